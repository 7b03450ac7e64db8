"""Abstract base class for audio entry stores.

Defines the read-only contract for looking up pronunciation recordings by
expression.  The production implementation is SQLite-backed; tests inject
in-memory fakes through the same interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from yomi_audio.models.audio import AudioEntry


class IEntryStore(ABC):
    """Contract for the backing store of :class:`AudioEntry` rows.

    All operations are async so network-backed stores can be used without
    blocking the event loop.
    """

    @abstractmethod
    async def find_entries(
        self,
        term: str,
        reading: str | None,
        sources: list[str],
    ) -> list[AudioEntry]:
        """Return entries for *term* restricted to *sources*.

        Parameters
        ----------
        term:
            The expression to look up (exact match).
        reading:
            Optional reading.  When given, entries with that reading *or* a
            NULL reading match; when ``None`` every reading matches.
        sources:
            Provider keys to search, in preference order.  Results are
            ranked by position in this list, then speaker, then reading.

        Returns
        -------
        list[AudioEntry]
            Possibly empty.  An empty list is a successful lookup.

        Raises
        ------
        EntryStoreError
            If the store cannot be queried.
        """

    async def initialize(self) -> None:
        """Prepare the store for queries (optional hook, called on startup)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
