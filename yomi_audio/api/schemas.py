"""Pydantic response schemas for the Yomi audio API.

The JSON shape is fixed by the clients that consume it (dictionary and
flash-card tools expecting an ``audioSourceList``), so field names are
camelCase on the wire via aliases and snake_case in Python.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AudioSourceItem(BaseModel):
    """One playable pronunciation."""

    name: str = Field(description="Display name, e.g. 'NHK16' or 'Forvo (akitomo)'.")
    url: str = Field(description="Absolute provider URL or this service's passthrough URL.")


class AudioSourceListResponse(BaseModel):
    """Response body of ``GET /?term=...``."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["audioSourceList"] = "audioSourceList"
    audio_sources: list[AudioSourceItem] = Field(default_factory=list, alias="audioSources")
