"""
Speech-to-text proxy for the Prompt Separator.

This module validates an audio payload and forwards it to an OpenAI-compatible
Whisper endpoint (Groq by default), returning the transcription as plain text.
The remote call sits behind the ``Transcriber`` protocol so callers and tests
can substitute their own implementation.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

import openai

from .config import RESPONSE_FORMAT, config, get_client
from .debug_log import get_debug_logger
from .types import Transcript

logger = logging.getLogger(__name__)

# Groq Whisper upload limit
MAX_AUDIO_BYTES = 25 * 1024 * 1024

SUPPORTED_EXTENSIONS = {".flac", ".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".ogg", ".opus", ".wav", ".webm"}

CONNECTION_ERROR_MESSAGE = "Could not reach the transcription service."


class SpeechError(Exception):
    """Raised when speech processing fails."""

    pass


class AudioValidationError(SpeechError):
    """Raised when an audio payload is rejected before being sent."""

    pass


class EmptyAudioError(AudioValidationError):
    """Raised when no audio bytes were provided."""

    pass


class AudioTooLargeError(AudioValidationError):
    """Raised when an audio payload exceeds MAX_AUDIO_BYTES."""

    def __init__(self, size_bytes: int, limit_bytes: int = MAX_AUDIO_BYTES):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(f"Audio file too large: {size_bytes / 1024 / 1024:.1f}MB (max: {limit_bytes // (1024 * 1024)}MB)")


class RemoteTranscriptionError(SpeechError):
    """Raised when the transcription service answers with an error. Carries its message verbatim."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class TranscriptionConnectionError(SpeechError):
    """Raised when the transcription service cannot be reached."""

    pass


class Transcriber(Protocol):
    """Anything that turns audio bytes into text."""

    def transcribe_bytes(self, payload: bytes, filename: str) -> str: ...


class GroqTranscriber:
    """
    Transcriber backed by an OpenAI-compatible Whisper endpoint.

    Model, language and endpoint come from configuration; the response
    format is always plain text.
    """

    def __init__(self, client: Optional[openai.OpenAI] = None, model: Optional[str] = None, language: Optional[str] = None):
        self._client = client
        self.model = model or config.asr_model
        self.language = language or config.language

    @property
    def client(self) -> openai.OpenAI:
        if self._client is None:
            self._client = get_client()
        return self._client

    def transcribe_bytes(self, payload: bytes, filename: str) -> str:
        """
        Send audio to the remote service.

        Raises:
            ConfigError: If the credential is not configured
            RemoteTranscriptionError: If the service rejects the request
            TranscriptionConnectionError: If the service cannot be reached
        """
        try:
            response = self.client.audio.transcriptions.create(
                file=(filename, payload),
                model=self.model,
                language=self.language,
                response_format=RESPONSE_FORMAT,
            )
        except openai.APIConnectionError as e:
            logger.warning(f"Transcription service unreachable: {e}")
            raise TranscriptionConnectionError(CONNECTION_ERROR_MESSAGE) from e
        except openai.APIStatusError as e:
            raise RemoteTranscriptionError(e.message, status_code=e.status_code) from e

        # response_format="text" yields a bare string; keep a fallback for object responses.
        return response if isinstance(response, str) else getattr(response, "text", str(response))


def validate_payload(payload: bytes) -> None:
    """
    Reject audio that must not be sent.

    Raises:
        EmptyAudioError: If the payload is empty
        AudioTooLargeError: If the payload exceeds MAX_AUDIO_BYTES
    """
    if not payload:
        raise EmptyAudioError("No audio data provided.")
    if len(payload) > MAX_AUDIO_BYTES:
        raise AudioTooLargeError(len(payload))


def validate_audio_format(path: Union[str, Path]) -> bool:
    """Return True if the file extension is one Whisper accepts."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


class TranscriptionProxy:
    """
    Validates audio and hands it to a Transcriber.

    No retries: the first failure is reported to the caller.
    """

    def __init__(self, transcriber: Optional[Transcriber] = None):
        self.transcriber = transcriber if transcriber is not None else GroqTranscriber()

    def transcribe(self, payload: bytes, filename: str) -> Transcript:
        """
        Transcribe an audio payload.

        Args:
            payload: Raw audio bytes
            filename: Original file name, forwarded so the service can detect the format

        Returns:
            Transcript holding the service's text unchanged

        Raises:
            AudioValidationError: If the payload is empty or too large (no network call is made)
            RemoteTranscriptionError: If the service answers with an error
            TranscriptionConnectionError: If the service cannot be reached
            ConfigError: If the credential is not configured
        """
        validate_payload(payload)

        debug_logger = get_debug_logger()
        debug_logger.log_transcription_request(
            filename,
            len(payload),
            getattr(self.transcriber, "model", "unknown"),
            getattr(self.transcriber, "language", "unknown"),
        )

        try:
            text = self.transcriber.transcribe_bytes(payload, filename)
        except SpeechError as e:
            debug_logger.log_transcription_response(filename, error=e)
            raise

        debug_logger.log_transcription_response(filename, text=text)
        return Transcript(text=text, source_name=filename)

    def transcribe_file(self, path: Union[str, Path]) -> Transcript:
        """
        Transcribe a local audio file.

        Raises:
            FileNotFoundError: If the audio file doesn't exist
            SpeechError: As for ``transcribe``, or if the path is not a file
        """
        audio_path = Path(path)

        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if not audio_path.is_file():
            raise SpeechError(f"Path is not a file: {path}")

        # Size check before reading the whole file into memory
        size = audio_path.stat().st_size
        if size > MAX_AUDIO_BYTES:
            raise AudioTooLargeError(size)

        return self.transcribe(audio_path.read_bytes(), audio_path.name)
