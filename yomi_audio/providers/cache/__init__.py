"""Cache providers.

MemoryCacheProvider is a TTL dict -- fast but not shared across processes.
For multi-worker deployments, swap in a Redis adapter implementing
ICacheProvider without changing the edge cache.
"""

from yomi_audio.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
