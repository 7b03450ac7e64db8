"""Parsing of the ``sources`` selection expression.

The expression is a comma-separated list of provider keys.  A bare key
includes that provider; a ``-``-prefixed key excludes it.  Keys compare
case-insensitively but are otherwise taken verbatim: ``" forvo"`` is not
``forvo``.

    sources=nhk16,forvo     -> only nhk16 then forvo
    sources=-forvo,-jpod    -> every configured provider except those two
    sources=nhk16,-forvo    -> only nhk16 (inclusion wins, exclusions ignored)

Unknown keys are dropped silently; an empty result means "query nothing".
"""

from __future__ import annotations

from collections.abc import Iterable

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.models.audio import SourceSelection


def _unique_lowercase(keys: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(k.lower() for k in keys))


def parse_source_filter(raw: str | None) -> SourceSelection:
    """Split *raw* into included and excluded provider keys."""
    included: list[str] = []
    excluded: list[str] = []
    for token in (raw or "").split(","):
        if token.startswith("-"):
            token = token[1:]
            if token:
                excluded.append(token)
        elif token:
            included.append(token)

    return SourceSelection(
        included=_unique_lowercase(included),
        excluded=_unique_lowercase(excluded),
    )


def resolve_sources(selection: SourceSelection, registry: ProviderRegistry) -> list[str]:
    """Return the ordered provider keys to query for *selection*."""
    if selection.included:
        requested = list(selection.included)
    else:
        excluded = set(selection.excluded)
        requested = [k for k in registry.default_order if k not in excluded]
    return [k for k in requested if k in registry]


def select_sources(raw: str | None, registry: ProviderRegistry) -> list[str]:
    """Parse *raw* and resolve it against *registry* in one step."""
    return resolve_sources(parse_source_filter(raw), registry)
