"""SQLite-backed audio entry store.

Reads the ``entries`` table of a pre-built SQLite database using
``aiosqlite`` for async I/O.  The database is opened read-only: this
service never writes entries, and a missing file must fail loudly instead
of being silently created empty.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import structlog

from yomi_audio.interfaces.entry_store import IEntryStore
from yomi_audio.models.audio import AudioEntry
from yomi_audio.providers.store.query_builder import DEFAULT_LIMIT, build_entries_query
from yomi_audio.utils.errors import ConfigurationError, EntryStoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/entries.db")

ENTRIES_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS entries (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    expression  TEXT    NOT NULL,
    reading     TEXT,
    source      TEXT    NOT NULL,
    speaker     TEXT,
    display     TEXT,
    file        TEXT    NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_entries_expression ON entries(expression);
CREATE INDEX IF NOT EXISTS idx_entries_expression_source ON entries(expression, source);
"""

_TABLE_EXISTS_SQL = "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'entries';"


class SQLiteEntryStore(IEntryStore):
    """Read-only :class:`IEntryStore` over a local SQLite file."""

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        max_results: int = DEFAULT_LIMIT,
    ) -> None:
        self._db_path = Path(db_path)
        self._max_results = max_results

    def _connect(self) -> aiosqlite.Connection:
        uri = f"{self._db_path.resolve().as_uri()}?mode=ro"
        return aiosqlite.connect(uri, uri=True)

    async def initialize(self) -> None:
        """Check that the ``entries`` table exists and log its size."""
        try:
            async with self._connect() as db:
                cursor = await db.execute(_TABLE_EXISTS_SQL)
                if await cursor.fetchone() is None:
                    raise ConfigurationError(
                        f"No entries table in {self._db_path}",
                        provider_name=self.get_provider_name(),
                    )
                cursor = await db.execute("SELECT COUNT(*) FROM entries;")
                (count,) = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise ConfigurationError(
                f"Cannot open entry database {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("entry_store_ready", path=str(self._db_path), entries=count)

    async def find_entries(
        self,
        term: str,
        reading: str | None,
        sources: list[str],
    ) -> list[AudioEntry]:
        """Run the ranked lookup for *term* against *sources*."""
        sql, params = build_entries_query(term, reading, sources, limit=self._max_results)
        logger.debug("entries_query", sql=sql, params=params)

        try:
            async with self._connect() as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            logger.error("entries_query_failed", term=term, error=str(exc))
            raise EntryStoreError(
                f"Entry store query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        return [AudioEntry(**dict(row)) for row in rows]

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
        return "sqlite_entries"
