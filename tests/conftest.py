"""Shared pytest fixtures for the yomi-audio-server test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import aiosqlite
import httpx
import pytest
from fastapi import FastAPI

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.config.settings import Settings
from yomi_audio.interfaces.entry_store import IEntryStore
from yomi_audio.models.audio import AudioEntry, Provider
from yomi_audio.providers.store.sqlite_entry_store import ENTRIES_SCHEMA_SQL

ORIGIN = "https://audio.example"

# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


@pytest.fixture
def providers() -> list[Provider]:
    """Five providers: two dictionaries, two Forvo variants, one TTS voice."""
    return [
        Provider(key="nhk16", name="NHK16", url=f"{ORIGIN}/nhk16"),
        Provider(key="shinmeikai8", name="SMK8", url=f"{ORIGIN}/shinmeikai8"),
        Provider(key="forvo", name="Forvo", url=f"{ORIGIN}/forvo"),
        Provider(key="forvo22", name="Forvo22", url=f"{ORIGIN}/forvo22/"),
        Provider(key="ttsvoice", name="TTS Voice", url=f"{ORIGIN}/ttsvoice"),
    ]


@pytest.fixture
def registry(providers: list[Provider]) -> ProviderRegistry:
    return ProviderRegistry(providers)


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


@pytest.fixture
def neko_entries() -> list[AudioEntry]:
    """Rows for 猫 across every provider, including a Forvo duplicate."""
    return [
        AudioEntry(expression="猫", reading="ねこ", source="nhk16", file="nhk16_files/neko.mp3"),
        AudioEntry(
            expression="猫", reading=None, source="nhk16", display="[1]",
            file="nhk16_files/neko_any.mp3",
        ),
        AudioEntry(expression="猫", reading="ねこ", source="shinmeikai8", file="smk8/neko.ogg"),
        AudioEntry(
            expression="猫", reading="ねこ", source="forvo", speaker="akitomo",
            file="akitomo/neko.mp3",
        ),
        AudioEntry(
            expression="猫", reading="ねこ", source="forvo22", speaker="akitomo",
            file="akitomo/neko.mp3",
        ),
        AudioEntry(
            expression="猫", reading="ねこ", source="forvo22", speaker="TTSBot",
            file="ttsbot/neko.mp3",
        ),
        AudioEntry(expression="猫", reading=None, source="ttsvoice", file="neko.mp3"),
    ]


class FakeEntryStore(IEntryStore):
    """In-memory IEntryStore with the same matching rules as the SQLite store.

    Rows come back in stored order; ranking is left to the caller.  Every
    call is recorded in ``calls``.  Set ``error`` to make lookups raise.
    """

    def __init__(self, entries: list[AudioEntry]) -> None:
        self.entries = list(entries)
        self.calls: list[tuple[str, str | None, list[str]]] = []
        self.initialized = False
        self.error: Exception | None = None

    async def initialize(self) -> None:
        self.initialized = True

    async def find_entries(
        self,
        term: str,
        reading: str | None,
        sources: list[str],
    ) -> list[AudioEntry]:
        self.calls.append((term, reading, list(sources)))
        if self.error is not None:
            raise self.error
        return [
            e for e in self.entries
            if e.expression == term
            and e.source in sources
            and (reading is None or e.reading is None or e.reading == reading)
        ]

    def get_provider_name(self) -> str:
        return "fake_entries"


@pytest.fixture
def entry_store(neko_entries: list[AudioEntry]) -> FakeEntryStore:
    return FakeEntryStore(neko_entries)


@pytest.fixture
async def entries_db(tmp_path: Path, neko_entries: list[AudioEntry]) -> Path:
    """A real SQLite entries database holding the 猫 rows plus a few extras."""
    db_path = tmp_path / "entries.db"
    rows = [
        (e.expression, e.reading, e.source, e.speaker, e.display, e.file)
        for e in neko_entries
    ]
    rows += [
        ("猫", "びょう", "nhk16", None, None, "nhk16_files/byou.mp3"),
        ("犬", "いぬ", "nhk16", None, None, "nhk16_files/inu.mp3"),
    ]
    async with aiosqlite.connect(db_path) as db:
        await db.executescript(ENTRIES_SCHEMA_SQL)
        await db.executemany(
            "INSERT INTO entries (expression, reading, source, speaker, display, file) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            rows,
        )
        await db.commit()
    return db_path


# ---------------------------------------------------------------------------
# Provider origins
# ---------------------------------------------------------------------------


def origin_handler(request: httpx.Request) -> httpx.Response:
    """Fake provider origin: three known files, one unreachable path, else 404."""
    path = request.url.path
    if request.url.raw_path == b"/nhk16/q%3Fa.mp3":
        return httpx.Response(200, content=b"ID3-question", headers={"content-type": "audio/mpeg"})
    if path == "/nhk16/nhk16_files/neko.mp3":
        return httpx.Response(200, content=b"ID3-neko", headers={"content-type": "audio/mpeg"})
    if path == "/shinmeikai8/smk8/neko.ogg":
        return httpx.Response(200, content=b"OggS-neko", headers={"content-type": "audio/ogg"})
    if path.endswith("/unreachable.mp3"):
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.Response(404, text="Not Found")


@pytest.fixture
async def origin_client() -> AsyncIterator[httpx.AsyncClient]:
    """Shared HTTP client wired to the fake provider origin."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(origin_handler)) as client:
        yield client


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build Settings with test defaults and optional overrides."""
    defaults: dict[str, Any] = {
        "app_env": "test",
        "cache_enabled": True,
        "cache_max_age": 600,
        "proxy_audio": False,
    }
    defaults.update(overrides)
    return Settings(**defaults)


@pytest.fixture
def build_app(
    registry: ProviderRegistry,
    entry_store: FakeEntryStore,
    origin_client: httpx.AsyncClient,
) -> Callable[..., FastAPI]:
    """Return a factory building the app around the fake store and origin."""
    from yomi_audio.main import create_app

    def _build(**setting_overrides: Any) -> FastAPI:
        return create_app(
            make_settings(**setting_overrides),
            registry=registry,
            entry_store=entry_store,
            http_client=origin_client,
        )

    return _build


@pytest.fixture
def app(build_app: Callable[..., FastAPI]) -> FastAPI:
    return build_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """ASGI client against the default test app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
