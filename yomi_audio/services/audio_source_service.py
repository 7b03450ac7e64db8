"""Resolution of a term to a ranked list of pronunciation audio sources.

# ─── PIPELINE ─────────────────────────────────────────────────────────
#
#   validate term ─► compile display filter ─► select sources
#        │                                          │ (empty → [])
#        ▼                                          ▼
#   entry store query ─► rank ─► dedup ─► resolve URLs ─► display filter
#
# The display filter is compiled before the store is touched so malformed
# input never costs a query.  Every step except the store query is pure.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import structlog

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.interfaces.entry_store import IEntryStore
from yomi_audio.models.audio import ResolvedAudioSource
from yomi_audio.services.display_filter import (
    DEFAULT_MAX_PATTERN_LENGTH,
    apply_display_filter,
    compile_display_filter,
)
from yomi_audio.services.result_ranker import ResultRanker
from yomi_audio.services.source_filter import select_sources
from yomi_audio.services.url_resolver import UrlResolver
from yomi_audio.utils.errors import ClientInputError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_TERM_LENGTH = 100


class AudioSourceService:
    """Runs the source-resolution pipeline for one request at a time.

    Stateless between calls; a single instance is shared by all requests.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        entry_store: IEntryStore,
        ranker: ResultRanker,
        url_resolver: UrlResolver,
        *,
        max_term_length: int = DEFAULT_MAX_TERM_LENGTH,
        max_pattern_length: int = DEFAULT_MAX_PATTERN_LENGTH,
    ) -> None:
        self._registry = registry
        self._store = entry_store
        self._ranker = ranker
        self._url_resolver = url_resolver
        self._max_term_length = max_term_length
        self._max_pattern_length = max_pattern_length

    def validate_term(self, term: str | None) -> str:
        if not term:
            raise ClientInputError("Missing term parameter")
        if len(term) > self._max_term_length:
            raise ClientInputError("Term parameter too long")
        return term

    async def resolve(
        self,
        term: str | None,
        *,
        host: str,
        reading: str | None = None,
        sources: str | None = None,
        exclude_pattern: str | None = None,
    ) -> list[ResolvedAudioSource]:
        """Return the audio sources for *term* as they should be served to *host*."""
        term = self.validate_term(term)
        pattern = compile_display_filter(exclude_pattern, self._max_pattern_length)
        reading = reading or None

        requested = select_sources(sources, self._registry)
        if not requested:
            logger.info("audio_sources_resolved", term=term, sources=0, results=0)
            return []

        entries = await self._store.find_entries(term, reading, requested)
        ranked = self._ranker.process(entries, requested)

        resolved = [
            ResolvedAudioSource(
                name=self._ranker.display_name(entry),
                url=self._url_resolver.resolve(entry, host),
            )
            for entry in ranked
        ]
        filtered = apply_display_filter(resolved, pattern)

        logger.info(
            "audio_sources_resolved",
            term=term,
            reading=reading,
            sources=len(requested),
            rows=len(entries),
            deduplicated=len(entries) - len(ranked),
            results=len(filtered),
        )
        return filtered
