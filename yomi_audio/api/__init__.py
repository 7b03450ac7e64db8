"""Yomi audio API layer -- routes, schemas, and middleware."""

from yomi_audio.api.middleware import (
    CORSHeadersMiddleware,
    EdgeCacheMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from yomi_audio.api.routes import router
from yomi_audio.api.schemas import AudioSourceItem, AudioSourceListResponse

__all__ = [
    "AudioSourceItem",
    "AudioSourceListResponse",
    "CORSHeadersMiddleware",
    "EdgeCacheMiddleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
]
