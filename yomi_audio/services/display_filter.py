"""Caller-supplied exclusion of results by display name.

``excludeDisplayTextRegex`` is compiled once per request, case-insensitive,
and matched anywhere in each result's display name.  Compilation is
fallible: a malformed or oversized pattern is a client error, never a
silent no-op.
"""

from __future__ import annotations

import re

from yomi_audio.models.audio import ResolvedAudioSource
from yomi_audio.utils.errors import InvalidPatternError

DEFAULT_MAX_PATTERN_LENGTH = 200


def compile_display_filter(
    pattern: str | None,
    max_length: int = DEFAULT_MAX_PATTERN_LENGTH,
) -> re.Pattern[str] | None:
    """Compile *pattern*, or return ``None`` when no pattern was given."""
    if not pattern:
        return None
    if len(pattern) > max_length:
        raise InvalidPatternError(
            f"excludeDisplayTextRegex too long (max {max_length} characters)"
        )
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise InvalidPatternError(f"Invalid excludeDisplayTextRegex: {exc}") from exc


def apply_display_filter(
    sources: list[ResolvedAudioSource],
    pattern: re.Pattern[str] | None,
) -> list[ResolvedAudioSource]:
    """Drop every source whose name matches *pattern*."""
    if pattern is None:
        return list(sources)
    return [s for s in sources if not pattern.search(s.name)]
