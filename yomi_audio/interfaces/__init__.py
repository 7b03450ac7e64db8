"""Public interface definitions for external collaborators.

The entry database and the response cache are accessed exclusively through
the abstract base classes defined here.  Concrete adapters live in
``yomi_audio/providers/`` and are injected in ``yomi_audio/main.py``; unit
tests inject fakes through the same contracts.

    Interface        →  Concrete implementations (in yomi_audio/providers/)
    ──────────────────────────────────────────────────────────────────
    IEntryStore      →  SQLiteEntryStore
    ICacheProvider   →  MemoryCacheProvider
"""

from yomi_audio.interfaces.cache_provider import ICacheProvider
from yomi_audio.interfaces.entry_store import IEntryStore

__all__ = [
    "ICacheProvider",
    "IEntryStore",
]
