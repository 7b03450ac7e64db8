"""Utility modules for the Yomi audio server.

- **errors** -- Exception hierarchy rooted at YomiAudioError; every subclass
  carries the HTTP status the error-handling middleware should answer with.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from yomi_audio.utils.errors import (
    ClientInputError,
    ConfigurationError,
    EntryStoreError,
    InvalidPatternError,
    NotFoundError,
    UpstreamError,
    YomiAudioError,
)

# -- Structured logging setup ----------------------------------------------
from yomi_audio.utils.logging import configure_logging, get_logger

__all__ = [
    "ClientInputError",
    "ConfigurationError",
    "EntryStoreError",
    "InvalidPatternError",
    "NotFoundError",
    "UpstreamError",
    "YomiAudioError",
    "configure_logging",
    "get_logger",
]
