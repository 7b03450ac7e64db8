"""Yomi audio domain models -- re-exports all public model classes.

    - audio.py -- providers, store rows, resolved sources, source selection
    - cache.py -- cached HTTP responses held by the edge cache
"""

from __future__ import annotations

from yomi_audio.models.audio import (
    AudioEntry,
    Provider,
    ResolvedAudioSource,
    SourceSelection,
)
from yomi_audio.models.cache import CachedResponse

__all__ = [
    "AudioEntry",
    "CachedResponse",
    "Provider",
    "ResolvedAudioSource",
    "SourceSelection",
]
