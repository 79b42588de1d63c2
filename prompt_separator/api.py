"""
HTTP endpoints for the Prompt Separator.

Handles:
- Audio transcription proxying (POST /api/transcribe)
- Credential retrieval (GET /api/key)
- Health check (GET /health)

Every failure is answered with a JSON body ``{"error": <message>}``.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, File, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from .core.config import ConfigError, get_api_key
from .core.speech import (
    AudioTooLargeError,
    AudioValidationError,
    MAX_AUDIO_BYTES,
    RemoteTranscriptionError,
    TranscriptionConnectionError,
    TranscriptionProxy,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "prompt-separator"

router = APIRouter()


def get_transcription_proxy() -> TranscriptionProxy:
    """Dependency providing the proxy used by the transcription route."""
    return TranscriptionProxy()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/api/key")
async def get_key():
    """
    Return the transcription credential.

    Returns:
        200: {"key": ...}
        500: credential not configured
    """
    try:
        return {"key": get_api_key()}
    except ConfigError as e:
        logger.error(f"Key requested but not configured: {e}")
        return _error(str(e), 500)


@router.post("/api/transcribe")
async def transcribe(
    audio: Optional[UploadFile] = File(None),
    proxy: TranscriptionProxy = Depends(get_transcription_proxy),
):
    """
    Transcribe an uploaded audio file through the remote speech-to-text service.

    Returns:
        200: transcription as text/plain
        400: no file, empty file, or file over 25MB
        500: credential missing or the service reported an error (message passed through)
        502: the service could not be reached
    """
    try:
        get_api_key()
    except ConfigError as e:
        return _error(str(e), 500)

    if audio is None or not audio.filename:
        return _error("No audio file uploaded.", 400)

    # Reject by declared size before buffering the upload
    if audio.size is not None and audio.size > MAX_AUDIO_BYTES:
        return _error(str(AudioTooLargeError(audio.size)), 400)

    payload = await audio.read()
    filename = audio.filename

    try:
        transcript = await run_in_threadpool(proxy.transcribe, payload, filename)
    except AudioValidationError as e:
        return _error(str(e), 400)
    except ConfigError as e:
        return _error(str(e), 500)
    except RemoteTranscriptionError as e:
        logger.warning(f"Transcription service error for {filename} (status {e.status_code}): {e}")
        return _error(str(e), 500)
    except TranscriptionConnectionError as e:
        return _error(str(e), 502)

    logger.info(f"Transcribed {filename} ({len(payload)} bytes, {len(transcript.text)} chars)")
    return PlainTextResponse(transcript.text)


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(title="Prompt Separator", description="Prompt classification and transcription proxy")
    application.include_router(router)
    return application


app = create_app()
