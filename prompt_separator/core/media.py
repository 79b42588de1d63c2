"""
Audio metadata probing.

The Prompt Separator only needs the length of an audio file, which it reads
with ffprobe from the FFmpeg suite.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class MediaProbeError(Exception):
    """Raised when the duration of an audio file cannot be determined."""

    pass


def probe_duration(path: Union[str, Path], ffprobe: str = "ffprobe") -> float:
    """
    Get the duration of an audio file in seconds.

    Args:
        path: Path to the audio file
        ffprobe: ffprobe executable name or path

    Returns:
        Duration in seconds

    Raises:
        FileNotFoundError: If the audio file doesn't exist
        MediaProbeError: If ffprobe is missing, fails, or reports no duration
    """
    audio_path = Path(path)
    if not audio_path.is_file():
        raise FileNotFoundError(f"Audio file not found: {path}")

    if shutil.which(ffprobe) is None:
        raise MediaProbeError(f"{ffprobe} not found in PATH; pass the duration explicitly with --duration")

    try:
        result = subprocess.run(
            [
                ffprobe,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(audio_path),
            ],
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip() or "no error output"
        raise MediaProbeError(f"ffprobe failed for {audio_path.name}: {stderr}") from e

    raw = result.stdout.strip()
    try:
        duration = float(raw)
    except ValueError as e:
        raise MediaProbeError(f"Could not read duration of {audio_path.name} (ffprobe returned {raw!r})") from e

    if not duration > 0:
        raise MediaProbeError(f"Audio file {audio_path.name} has no measurable duration")

    logger.debug(f"Probed duration of {audio_path}: {duration:.3f}s")
    return duration
