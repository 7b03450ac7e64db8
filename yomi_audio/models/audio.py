"""Domain models for pronunciation-audio lookup.

Defines Pydantic v2 models for audio providers, rows returned by the entry
store, the resolved sources handed back to callers, and the parsed source
selection.  All models use frozen config to enforce immutability -- a
request derives each of these once and never mutates them afterwards.

Key relationships:
    - AudioEntry.source is a Provider.key
    - ResolvedAudioSource is built from one AudioEntry plus its Provider
    - SourceSelection is parsed from the ``sources`` query parameter and
      resolved against the ProviderRegistry (yomi_audio/config/registry.py)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Provider(BaseModel):
    """A named origin of pronunciation audio files.

    Configured at startup from ``config/providers.yaml`` (or the built-in
    table) and immutable for the lifetime of the process.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1, description="Lowercase provider identifier, e.g. 'nhk16'.")
    name: str = Field(min_length=1, description="Friendly display name, e.g. 'NHK16'.")
    url: str = Field(min_length=1, description="Base origin URL without trailing slash.")


class AudioEntry(BaseModel):
    """One row of the ``entries`` table.

    ``(source, file)`` uniquely identifies a retrievable file at the
    provider's origin.  A NULL ``reading`` means the recording is valid for
    any reading of the expression.
    """

    model_config = ConfigDict(frozen=True)

    expression: str
    reading: str | None = None
    source: str
    speaker: str | None = None
    display: str | None = None
    file: str


class ResolvedAudioSource(BaseModel):
    """A single entry of the ``audioSources`` list in the JSON response."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class SourceSelection(BaseModel):
    """Parsed form of the ``sources`` filter expression.

    Both tuples hold lowercase, de-duplicated keys.  ``included`` keeps the
    order in which keys first appeared; when it is non-empty ``excluded`` is
    ignored entirely.
    """

    model_config = ConfigDict(frozen=True)

    included: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()
