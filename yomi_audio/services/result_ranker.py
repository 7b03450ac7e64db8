"""Ordering, de-duplication and display naming of entry store rows.

The store already returns rows ranked by requested provider order, then
speaker, then reading.  ``ResultRanker.rank`` applies the same ordering in
Python (NULLs first, as SQLite does), so it is a no-op on store output and
lets stores that cannot order be swapped in.

Forvo is published as several overlapping providers (``forvo``,
``forvo22``, ``forvo25``) that often carry the same recording.  When
de-duplication is on, only the first row per
``(expression, reading, speaker)`` survives among providers of that family.
The key ignores ``display`` and which family member the row came from.
"""

from __future__ import annotations

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.models.audio import AudioEntry


def _nulls_first(value: str | None) -> tuple[bool, str]:
    return (value is not None, value or "")


class ResultRanker:
    """Ranks and de-duplicates :class:`AudioEntry` rows for one registry."""

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        remove_duplicates: bool = True,
        family_prefix: str = "forvo",
    ) -> None:
        self._registry = registry
        self._remove_duplicates = remove_duplicates
        self._family = registry.family(family_prefix) if family_prefix else frozenset()

    @property
    def family(self) -> frozenset[str]:
        return self._family

    def rank(self, entries: list[AudioEntry], sources: list[str]) -> list[AudioEntry]:
        """Stable-sort *entries* by requested source order, speaker, reading."""
        position = {key: index for index, key in enumerate(sources)}
        unranked = len(sources)
        return sorted(
            entries,
            key=lambda e: (
                position.get(e.source, unranked),
                _nulls_first(e.speaker),
                _nulls_first(e.reading),
            ),
        )

    def deduplicate(self, entries: list[AudioEntry]) -> list[AudioEntry]:
        """Drop later family rows that repeat an earlier family row's key."""
        if not self._remove_duplicates or not self._family:
            return list(entries)

        seen: set[tuple[str, str, str]] = set()
        kept: list[AudioEntry] = []
        for entry in entries:
            if entry.source not in self._family:
                kept.append(entry)
                continue
            key = (entry.expression, entry.reading or "", entry.speaker or "")
            if key in seen:
                continue
            seen.add(key)
            kept.append(entry)
        return kept

    def display_name(self, entry: AudioEntry) -> str:
        """Return ``Provider (speaker)``, ``Provider display`` or ``Provider``."""
        name = self._registry.display_name(entry.source)
        if entry.speaker:
            return f"{name} ({entry.speaker})"
        if entry.display:
            return f"{name} {entry.display}"
        return name

    def process(self, entries: list[AudioEntry], sources: list[str]) -> list[AudioEntry]:
        """Rank then de-duplicate."""
        return self.deduplicate(self.rank(entries, sources))
