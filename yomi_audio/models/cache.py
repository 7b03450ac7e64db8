"""Cached HTTP response model used by the edge cache."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class CachedResponse(BaseModel):
    """A fully-buffered response stored under ``"{METHOD} {URL}"``.

    ``stored_at`` is the freshness timestamp; the edge cache refuses to
    replay entries older than its configured max-age.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: bytes = b""
    stored_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))  # noqa: UP017

    def age_seconds(self, now: datetime | None = None) -> float:
        """Return how many seconds ago this response was stored."""
        current = now or datetime.now(tz=timezone.utc)  # noqa: UP017
        return (current - self.stored_at).total_seconds()
