"""Abstract base class for the key-value store behind the edge cache.

The edge cache (yomi_audio/services/edge_cache.py) only ever stores whole
:class:`CachedResponse` objects under ``"{METHOD} {URL}"`` keys and checks
freshness itself, so a backend needs nothing beyond get/set/delete/exists.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from yomi_audio.models.cache import CachedResponse


class ICacheProvider(ABC):
    """Contract for response stores.

    Async throughout so a network-backed store (e.g. Redis) can be dropped
    in without blocking the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> CachedResponse | None:
        """Return the response stored under *key*, or ``None``.

        Backends with their own expiry return ``None`` for expired keys.
        """

    @abstractmethod
    async def set(self, key: str, value: CachedResponse) -> None:
        """Store *value* under *key*, replacing whatever was there."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* currently holds a response."""
