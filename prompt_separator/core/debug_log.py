"""
Debug logging for transcription calls and generated outputs.

When PS_DEBUG=1, each transcription request/response, classification summary
and sync report is written as a JSON file under
``{base_dir}/.prompt_separator/debug/session_<timestamp>/``.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .types import ClassificationResult, SyncReport


class DebugLogger:
    """
    Writes JSON debug records for one session.

    Disabled loggers accept every call and write nothing.
    """

    def __init__(self, base_dir: str = ".", enabled: Optional[bool] = None):
        """
        Initialize debug logger.

        Args:
            base_dir: Directory under which .prompt_separator/debug is created
            enabled: Override debug enable flag, uses PS_DEBUG env var if None
        """
        self.base_dir = base_dir
        self.enabled = enabled if enabled is not None else is_debug_enabled()
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

        if self.enabled:
            self._setup_log_directory()

    def _setup_log_directory(self) -> None:
        self.log_dir = Path(self.base_dir) / ".prompt_separator" / "debug"
        self.session_dir = self.log_dir / f"session_{self.session_id}"
        self.session_dir.mkdir(parents=True, exist_ok=True)

    def _write(self, step: str, record_type: str, payload: Dict[str, Any]) -> Optional[Path]:
        if not self.enabled:
            return None

        timestamp = datetime.now().isoformat()
        log_data = {"timestamp": timestamp, "session_id": self.session_id, "step": step, "type": record_type}
        log_data.update(payload)

        filename = f"{step}_{timestamp.replace(':', '-').replace('.', '_')}.json"
        log_file = self.session_dir / filename

        with open(log_file, "w", encoding="utf-8") as f:
            json.dump(log_data, f, indent=2, ensure_ascii=False, default=str)
        return log_file

    def log_transcription_request(self, filename: str, size_bytes: int, model: str, language: str) -> Optional[Path]:
        """
        Log an outgoing transcription request.

        Args:
            filename: Name of the uploaded audio file
            size_bytes: Payload size
            model: ASR model requested
            language: Source language requested
        """
        return self._write(
            "transcription_request",
            "request",
            {"filename": filename, "size_bytes": size_bytes, "model": model, "language": language},
        )

    def log_transcription_response(self, filename: str, text: Optional[str] = None, error: Optional[Exception] = None) -> Optional[Path]:
        """
        Log the outcome of a transcription request: either the text or the error.
        """
        payload: Dict[str, Any] = {"filename": filename}
        if error is not None:
            payload.update({"error": str(error), "error_type": type(error).__name__})
            return self._write("transcription_error", "error", payload)

        payload.update({"text": text or "", "text_length": len(text or "")})
        return self._write("transcription_response", "response", payload)

    def log_classification(self, result: ClassificationResult) -> Optional[Path]:
        return self._write(
            "classification_summary",
            "summary",
            {
                "with_characters": result.with_characters,
                "without_characters": result.without_characters,
                "stats": {"with_count": len(result.with_characters), "without_count": len(result.without_characters)},
            },
        )

    def log_sync_report(self, report: SyncReport) -> Optional[Path]:
        return self._write(
            "sync_report",
            "summary",
            {
                "source_label": report.source_label,
                "duration_seconds": report.duration_seconds,
                "blocks": [block.model_dump() for block in report.blocks],
                "stats": {"block_count": report.block_count},
            },
        )


# Global debug logger instance
_debug_logger: Optional[DebugLogger] = None


def get_debug_logger(base_dir: str = ".") -> DebugLogger:
    """
    Get or create the global debug logger instance.

    A new logger is created when the base directory or the PS_DEBUG flag changes.
    """
    global _debug_logger
    if _debug_logger is None or _debug_logger.base_dir != base_dir or _debug_logger.enabled != is_debug_enabled():
        _debug_logger = DebugLogger(base_dir)
    return _debug_logger


def is_debug_enabled() -> bool:
    """
    Check if debug logging is enabled via environment variable.

    Returns:
        True if PS_DEBUG=1 is set
    """
    return os.getenv("PS_DEBUG", "0") == "1"
