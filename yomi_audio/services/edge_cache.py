"""Whole-response edge cache.

# ─── STATE MACHINE (per request) ──────────────────────────────────────
#
#   lookup(key) ── hit ──► replay stored status/headers/body
#        │
#       miss ──► run the route ──► stream body to caller while capturing
#                                      │
#                         GET and status < 500?
#                                      │ yes
#                                      ▼
#                  schedule_store(key, response)  (detached task)
#
# The key is "{METHOD} {full URL}" with the query string verbatim, so
# ?a=1&b=2 and ?b=2&a=1 are different entries.  Entries live for
# ``max_age`` seconds and are never invalidated otherwise.  Concurrent
# misses for the same key may both compute and both write; entries are
# idempotent, so the last write simply wins.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio

import structlog

from yomi_audio.interfaces.cache_provider import ICacheProvider
from yomi_audio.models.cache import CachedResponse

logger = structlog.get_logger(logger_name=__name__)


class ResponseCache:
    """Keyed response memoization with a fixed freshness window.

    Parameters
    ----------
    cache:
        Backing key-value store.
    enabled:
        When ``False`` nothing is looked up or stored.
    max_age:
        Freshness window in seconds; also advertised as
        ``Cache-Control: max-age``.
    """

    def __init__(self, cache: ICacheProvider, *, enabled: bool = True, max_age: int = 86400) -> None:
        self._cache = cache
        self._enabled = enabled
        self._max_age = max_age
        self._pending: set[asyncio.Task[None]] = set()
        self.stores_succeeded = 0
        self.stores_failed = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def max_age(self) -> int:
        return self._max_age

    @property
    def cache_control(self) -> str:
        return f"max-age={self._max_age}"

    @staticmethod
    def cache_key(method: str, url: str) -> str:
        return f"{method.upper()} {url}"

    @staticmethod
    def is_cacheable(method: str, status_code: int) -> bool:
        """Only GET responses that are not server errors are stored."""
        return method.upper() == "GET" and status_code < 500

    async def lookup(self, key: str) -> CachedResponse | None:
        """Return a fresh cached response for *key*, or ``None``."""
        if not self._enabled:
            return None
        cached = await self._cache.get(key)
        if cached is None:
            logger.debug("cache_miss", key=key)
            return None
        if cached.age_seconds() > self._max_age:
            logger.debug("cache_stale", key=key, age=cached.age_seconds())
            await self._cache.delete(key)
            return None
        logger.debug("cache_hit", key=key)
        return cached

    def schedule_store(self, key: str, response: CachedResponse) -> None:
        """Persist *response* in the background without blocking the caller."""
        if not self._enabled:
            return
        task = asyncio.create_task(self._store(key, response))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _store(self, key: str, response: CachedResponse) -> None:
        try:
            await self._cache.set(key, response)
        except Exception as exc:  # noqa: BLE001
            self.stores_failed += 1
            logger.warning("cache_store_failed", key=key, error=str(exc))
            return
        self.stores_succeeded += 1
        logger.debug("cache_store", key=key, status=response.status_code, size=len(response.body))

    async def flush(self) -> None:
        """Wait for every scheduled write to finish."""
        while True:
            pending = [task for task in self._pending if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
