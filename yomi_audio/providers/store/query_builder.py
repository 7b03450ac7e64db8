"""Parameterized SQL construction for entry lookups.

Every caller-controlled value -- the term, the reading and each provider
key, including those used in the ORDER BY rank expression -- is passed as
a bound ``?`` parameter.  Only placeholders and fixed keywords are ever
concatenated into the query text.
"""

from __future__ import annotations

from typing import Any

_SELECT_SQL = (
    "SELECT expression, reading, source, speaker, display, file "
    "FROM entries WHERE expression = ?"
)

DEFAULT_LIMIT = 100


def build_entries_query(
    term: str,
    reading: str | None,
    sources: list[str],
    limit: int = DEFAULT_LIMIT,
) -> tuple[str, list[Any]]:
    """Build the lookup query for *term* and return ``(sql, params)``.

    Rows are ranked by the position of their source in *sources*, then by
    speaker, then by reading (SQLite sorts NULLs first).  A NULL reading
    always matches, even when a specific *reading* is requested.
    """
    clauses = [_SELECT_SQL]
    params: list[Any] = [term]

    if sources:
        clauses.append(f"AND source IN ({_placeholders(len(sources))})")
        params.extend(sources)

    if reading:
        clauses.append("AND (reading IS NULL OR reading = ?)")
        params.append(reading)

    if sources:
        whens = " ".join(f"WHEN ? THEN {rank}" for rank in range(1, len(sources) + 1))
        clauses.append(f"ORDER BY CASE source {whens} ELSE {len(sources) + 1} END, speaker, reading")
        params.extend(sources)
    else:
        clauses.append("ORDER BY source, speaker, reading")

    clauses.append("LIMIT ?")
    params.append(limit)

    return " ".join(clauses), params


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))
