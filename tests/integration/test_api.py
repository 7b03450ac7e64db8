"""Integration tests for the HTTP surface, driven through httpx.ASGITransport.

The app is assembled by create_app with the in-memory FakeEntryStore and an
httpx.MockTransport provider origin (see conftest).  Cache writes are
detached tasks, so tests that depend on them await ``response_cache.flush()``
between requests.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from fastapi import FastAPI

from yomi_audio.utils.errors import EntryStoreError

CORS_EXPECTED = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def _assert_cors(response: httpx.Response) -> None:
    for name, value in CORS_EXPECTED.items():
        assert response.headers[name] == value


def _client(app: FastAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")


# ======================================================================
# GET /?term=...
# ======================================================================


class TestAudioSourceList:
    @pytest.mark.asyncio
    async def test_response_shape(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/", params={"term": "猫", "sources": "shinmeikai8"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {
            "type": "audioSourceList",
            "audioSources": [
                {"name": "SMK8", "url": "https://audio.example/shinmeikai8/smk8/neko.ogg"},
            ],
        }
        _assert_cors(response)

    @pytest.mark.asyncio
    async def test_term_without_reading_returns_every_reading(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/", params={"term": "猫", "sources": "nhk16"})
        names = [s["name"] for s in response.json()["audioSources"]]
        assert names == ["NHK16 [1]", "NHK16"]

    @pytest.mark.asyncio
    async def test_forvo_duplicates_collapsed(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/", params={"term": "猫", "sources": "forvo,forvo22"})
        names = [s["name"] for s in response.json()["audioSources"]]
        assert names == ["Forvo (akitomo)", "Forvo22 (TTSBot)"]

    @pytest.mark.asyncio
    async def test_exclude_display_text_regex(self, client: httpx.AsyncClient) -> None:
        response = await client.get(
            "/", params={"term": "猫", "excludeDisplayTextRegex": "^TTS"}
        )
        names = [s["name"] for s in response.json()["audioSources"]]
        assert "TTS Voice" not in names
        assert "Forvo22 (TTSBot)" in names

    @pytest.mark.asyncio
    async def test_post_resolves_like_get(self, client: httpx.AsyncClient) -> None:
        get = await client.get("/", params={"term": "猫", "sources": "nhk16"})
        post = await client.post("/", params={"term": "猫", "sources": "nhk16"})
        assert post.status_code == 200
        assert post.json() == get.json()
        assert "x-cache" not in post.headers
        _assert_cors(post)

    @pytest.mark.asyncio
    async def test_no_results_is_empty_list(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/", params={"term": "犬"})
        assert response.status_code == 200
        assert response.json() == {"type": "audioSourceList", "audioSources": []}

    @pytest.mark.asyncio
    async def test_proxy_mode_urls(self, build_app: Callable[..., FastAPI]) -> None:
        async with _client(build_app(proxy_audio=True)) as client:
            response = await client.get("/", params={"term": "猫", "sources": "nhk16"})
        urls = [s["url"] for s in response.json()["audioSources"]]
        assert urls == [
            "https://testserver/nhk16/nhk16_files/neko_any.mp3",
            "https://testserver/nhk16/nhk16_files/neko.mp3",
        ]


# ======================================================================
# Client and server errors
# ======================================================================


class TestErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["term=", "reading=ねこ"])
    async def test_missing_term(self, client: httpx.AsyncClient, query: str) -> None:
        response = await client.get(f"/?{query}")
        assert response.status_code == 400
        assert response.text == "Missing term parameter"
        _assert_cors(response)

    @pytest.mark.asyncio
    async def test_term_too_long(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/", params={"term": "猫" * 101})
        assert response.status_code == 400
        assert response.text == "Term parameter too long"

    @pytest.mark.asyncio
    async def test_malformed_regex(self, client: httpx.AsyncClient, entry_store) -> None:
        response = await client.get("/", params={"term": "猫", "excludeDisplayTextRegex": "(("})
        assert response.status_code == 400
        assert response.text.startswith("Invalid excludeDisplayTextRegex")
        assert entry_store.calls == []

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, client: httpx.AsyncClient, entry_store) -> None:
        entry_store.error = EntryStoreError("Entry store query failed: disk I/O error")
        response = await client.get("/", params={"term": "猫"})
        assert response.status_code == 500
        assert response.text == "Error: Entry store query failed: disk I/O error"
        _assert_cors(response)

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_500(self, client: httpx.AsyncClient, entry_store) -> None:
        entry_store.error = RuntimeError("kaboom")
        response = await client.get("/", params={"term": "猫"})
        assert response.status_code == 500
        assert response.text == "Error: kaboom"


# ======================================================================
# GET /{provider}/{path}
# ======================================================================


class TestFilePassthrough:
    @pytest.mark.asyncio
    async def test_streams_file_with_headers(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/nhk16/nhk16_files/neko.mp3")
        assert response.status_code == 200
        assert response.content == b"ID3-neko"
        assert response.headers["content-type"] == "audio/mpeg"
        assert response.headers["content-disposition"] == 'attachment; filename="neko.mp3"'
        _assert_cors(response)

    @pytest.mark.asyncio
    async def test_encoded_question_mark_reaches_origin_in_path(
        self, client: httpx.AsyncClient
    ) -> None:
        response = await client.get("/nhk16/q%3Fa.mp3")
        assert response.status_code == 200
        assert response.content == b"ID3-question"
        assert response.headers["content-disposition"] == "attachment; filename*=utf-8''q%3Fa.mp3"

    @pytest.mark.asyncio
    async def test_post_streams_file(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/nhk16/nhk16_files/neko.mp3")
        assert response.status_code == 200
        assert response.content == b"ID3-neko"

    @pytest.mark.asyncio
    async def test_unknown_provider(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/unknownprovider/foo.mp3")
        assert response.status_code == 400
        assert response.text == "Invalid source"

    @pytest.mark.asyncio
    async def test_upstream_miss_is_404(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/forvo/nobody/neko.mp3")
        assert response.status_code == 404
        assert response.text == "File not found"

    @pytest.mark.asyncio
    async def test_unreachable_origin_is_500(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/nhk16/unreachable.mp3")
        assert response.status_code == 500
        assert response.text.startswith("Error: ")


# ======================================================================
# CORS and the query builder
# ======================================================================


class TestCorsAndBuilder:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/", "/nhk16/anything.mp3", "/?term=猫"])
    async def test_options_preflight(self, client: httpx.AsyncClient, entry_store, path: str) -> None:
        response = await client.options(path)
        assert response.status_code == 204
        assert response.content == b""
        _assert_cors(response)
        assert entry_store.calls == []

    @pytest.mark.asyncio
    async def test_bare_root_serves_query_builder(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert '"http://testserver/?term={term}&reading={reading}"' in response.text
        assert '"ttsvoice"' in response.text
        _assert_cors(response)


# ======================================================================
# Edge cache
# ======================================================================


class TestEdgeCache:
    @pytest.mark.asyncio
    async def test_repeat_request_served_from_cache(
        self, app: FastAPI, client: httpx.AsyncClient, entry_store
    ) -> None:
        first = await client.get("/", params={"term": "猫"})
        await app.state.response_cache.flush()
        second = await client.get("/", params={"term": "猫"})

        assert len(entry_store.calls) == 1
        assert first.headers["x-cache"] == "MISS"
        assert second.headers["x-cache"] == "HIT"
        assert second.json() == first.json()
        assert second.headers["cache-control"] == "max-age=600"
        assert first.headers["cache-control"] == "max-age=600"
        assert second.headers["content-type"] == "application/json"
        _assert_cors(second)

    @pytest.mark.asyncio
    async def test_query_order_gives_distinct_entries(
        self, app: FastAPI, client: httpx.AsyncClient, entry_store
    ) -> None:
        await client.get("/?term=猫&sources=nhk16")
        await app.state.response_cache.flush()
        response = await client.get("/?sources=nhk16&term=猫")
        assert response.headers["x-cache"] == "MISS"
        assert len(entry_store.calls) == 2

    @pytest.mark.asyncio
    async def test_client_errors_are_cached(self, app: FastAPI, client: httpx.AsyncClient) -> None:
        await client.get("/unknownprovider/foo.mp3")
        await app.state.response_cache.flush()
        response = await client.get("/unknownprovider/foo.mp3")
        assert response.status_code == 400
        assert response.headers["x-cache"] == "HIT"
        assert response.text == "Invalid source"

    @pytest.mark.asyncio
    async def test_server_errors_are_not_cached(
        self, app: FastAPI, client: httpx.AsyncClient, entry_store
    ) -> None:
        entry_store.error = EntryStoreError()
        await client.get("/", params={"term": "猫"})
        await app.state.response_cache.flush()
        response = await client.get("/", params={"term": "猫"})
        assert response.status_code == 500
        assert "x-cache" not in response.headers
        assert len(entry_store.calls) == 2

    @pytest.mark.asyncio
    async def test_passthrough_files_are_cached(self, app: FastAPI, client: httpx.AsyncClient) -> None:
        await client.get("/nhk16/nhk16_files/neko.mp3")
        await app.state.response_cache.flush()
        response = await client.get("/nhk16/nhk16_files/neko.mp3")
        assert response.headers["x-cache"] == "HIT"
        assert response.content == b"ID3-neko"
        assert response.headers["content-disposition"] == 'attachment; filename="neko.mp3"'

    @pytest.mark.asyncio
    async def test_disabled_cache(self, build_app: Callable[..., FastAPI], entry_store) -> None:
        app = build_app(cache_enabled=False)
        async with _client(app) as client:
            first = await client.get("/", params={"term": "猫"})
            await app.state.response_cache.flush()
            await client.get("/", params={"term": "猫"})
        assert len(entry_store.calls) == 2
        assert "cache-control" not in first.headers
        assert "x-cache" not in first.headers
