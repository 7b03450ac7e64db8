"""Entry store providers.

SQLiteEntryStore reads a pre-built ``entries`` database read-only.  The
query text is produced by ``build_entries_query`` so that no caller input is
ever interpolated into SQL.
"""

from yomi_audio.providers.store.query_builder import build_entries_query
from yomi_audio.providers.store.sqlite_entry_store import ENTRIES_SCHEMA_SQL, SQLiteEntryStore

__all__ = ["ENTRIES_SCHEMA_SQL", "SQLiteEntryStore", "build_entries_query"]
