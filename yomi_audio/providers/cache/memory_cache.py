"""Process-local response store backed by ``cachetools.TTLCache``.

Entries expire ``ttl`` seconds after they were written and the oldest
entries are evicted once ``max_size`` is reached.  Nothing is shared between
worker processes; each uvicorn worker warms its own cache.
"""

from __future__ import annotations

import structlog
from cachetools import TTLCache

from yomi_audio.interfaces.cache_provider import ICacheProvider
from yomi_audio.models.cache import CachedResponse

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """:class:`ICacheProvider` holding :class:`CachedResponse` objects in memory.

    ``hits`` and ``misses`` count :meth:`get` outcomes since construction.
    """

    def __init__(self, max_size: int = 4096, ttl: int = 86400) -> None:
        self._entries: TTLCache[str, CachedResponse] = TTLCache(maxsize=max_size, ttl=ttl)
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> CachedResponse | None:
        cached = self._entries.get(key)
        if cached is None:
            self.misses += 1
            logger.debug("cache_provider_miss", key=key)
            return None
        self.hits += 1
        logger.debug("cache_provider_hit", key=key, status=cached.status_code)
        return cached

    async def set(self, key: str, value: CachedResponse) -> None:
        self._entries[key] = value
        logger.debug("cache_provider_set", key=key, size=len(value.body))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self._entries
