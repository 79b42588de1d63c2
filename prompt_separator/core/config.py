"""
Configuration management for the Prompt Separator.

This module handles environment variables, the transcription credential and the
OpenAI-compatible client used to reach the speech-to-text service. Environment
files are loaded explicitly through python-dotenv; nothing is loaded at import time.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "whisper-large-v3-turbo"
DEFAULT_LANGUAGE = "pt"
RESPONSE_FORMAT = "text"

ENV_FILE_ENV_VAR = "PS_ENV_FILE"
DEFAULT_ENV_FILENAME = ".env"


@lru_cache(maxsize=32)
def load_config(env_path: Optional[str] = None, override: bool = False) -> None:
    """Explicitly load environment variables from the given .env file path.

    Nothing is loaded when env_path is None.
    """
    if env_path:
        load_dotenv(dotenv_path=env_path, override=override)


class Config:
    """Configuration settings for the Prompt Separator."""

    @property
    def api_key(self) -> str:
        """Get the transcription service credential from environment."""
        key = os.getenv("GROQ_API_KEY")
        if not key:
            raise ConfigError("GROQ_API_KEY is not configured on the server. Set it in your environment or .env file.")
        return key

    @property
    def base_url(self) -> str:
        """Get the OpenAI-compatible transcription endpoint (default: Groq)."""
        return os.getenv("TRANSCRIBE_BASE_URL", DEFAULT_BASE_URL)

    @property
    def asr_model(self) -> str:
        """Get the model name for ASR (default: whisper-large-v3-turbo)."""
        return os.getenv("TRANSCRIBE_MODEL", DEFAULT_MODEL)

    @property
    def language(self) -> str:
        """Get the source language passed to the ASR model (default: pt)."""
        return os.getenv("TRANSCRIBE_LANGUAGE", DEFAULT_LANGUAGE)

    @property
    def timeout(self) -> int:
        """Get transcription request timeout in seconds (default: 120)."""
        return int(os.getenv("TRANSCRIBE_TIMEOUT", "120"))


# Global config instance
config = Config()


def load_env(filename: str = DEFAULT_ENV_FILENAME, override: bool = False) -> Optional[str]:
    """
    Load an environment file, if available.

    Load order (first match wins):
    1) Explicit env file path via PS_ENV_FILE
    2) <cwd>/<filename> (default: .env)

    Returns the path loaded, or None if nothing was loaded.
    """
    explicit = os.getenv(ENV_FILE_ENV_VAR)
    if explicit and Path(explicit).is_file():
        load_config(explicit, override=override)
        return explicit

    local = Path.cwd() / filename
    if local.is_file():
        load_config(str(local), override=override)
        return str(local)

    return None


def get_api_key() -> str:
    """
    Return the transcription credential, consulting the env file when the process
    environment does not carry it.

    Raises:
        ConfigError: If the credential is not configured
    """
    if not os.getenv("GROQ_API_KEY"):
        loaded_path = load_env()
        logger.debug(f"GROQ_API_KEY missing from environment; env file loaded: {loaded_path}")
    return config.api_key


@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    """
    Get an OpenAI client pointed at the transcription service.

    Retries are disabled: a failed request is reported, never repeated.

    Returns:
        OpenAI client instance

    Raises:
        ConfigError: If the API key is not configured
    """
    api_key = get_api_key()
    try:
        return OpenAI(
            api_key=api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
        )
    except Exception as e:
        raise ConfigError(f"Failed to create transcription client: {e}") from e


def validate_config() -> None:
    """
    Validate that all required configuration is present.

    Raises:
        ConfigError: If required configuration is missing
    """
    _ = get_api_key()
