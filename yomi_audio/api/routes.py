"""FastAPI routes for the Yomi audio server.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint             Method   Description
# ─────────────────────────────────────────────────────────────────────
# /?term=...           GET/POST Resolve a term to a ranked audioSourceList
# /                    GET/POST Query builder page (no query string)
# /{source}/{path}     GET/POST Stream a provider file through this service
# *                    OPTIONS  204 preflight (answered by CORS middleware)
#
# Services are resolved from ``app.state`` (populated in main.py's
# _build_all) via Depends helpers and Annotated aliases, so tests can
# build an app around fake stores and HTTP clients.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from yomi_audio.api.schemas import AudioSourceItem, AudioSourceListResponse
from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.services.audio_source_service import AudioSourceService
from yomi_audio.services.file_fetcher import FileFetchService
from yomi_audio.services.query_builder_page import render_query_builder
from yomi_audio.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_audio_source_service(request: Request) -> AudioSourceService:
    """Return the resolution pipeline from application state."""
    return request.app.state.audio_source_service


def _get_file_fetcher(request: Request) -> FileFetchService:
    """Return the file passthrough service from application state."""
    return request.app.state.file_fetcher


def _get_registry(request: Request) -> ProviderRegistry:
    """Return the provider registry from application state."""
    return request.app.state.registry


AudioSourceServiceDep = Annotated[AudioSourceService, Depends(_get_audio_source_service)]
FileFetcherDep = Annotated[FileFetchService, Depends(_get_file_fetcher)]
RegistryDep = Annotated[ProviderRegistry, Depends(_get_registry)]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.api_route("/", methods=["GET", "POST"], response_model=None)
async def get_audio_sources(
    request: Request,
    service: AudioSourceServiceDep,
    registry: RegistryDep,
    term: str | None = None,
    reading: str | None = None,
    sources: str | None = None,
    exclude_display_text_regex: Annotated[
        str | None, Query(alias="excludeDisplayTextRegex")
    ] = None,
) -> Response:
    """Resolve *term* to audio sources, or serve the query builder.

    A bare ``GET /`` with no query string at all returns the HTML query
    builder; anything else is treated as a lookup and must carry ``term``.
    """
    if not request.url.query:
        base_url = f"{request.url.scheme}://{request.url.netloc}{request.url.path}"
        return HTMLResponse(render_query_builder(base_url, registry.keys()))

    resolved = await service.resolve(
        term,
        host=request.url.hostname or "",
        reading=reading,
        sources=sources,
        exclude_pattern=exclude_display_text_regex,
    )
    body = AudioSourceListResponse(
        audio_sources=[AudioSourceItem(name=r.name, url=r.url) for r in resolved]
    )
    return JSONResponse(content=body.model_dump(by_alias=True))


@router.api_route("/{file_path:path}", methods=["GET", "POST"], response_model=None)
async def fetch_audio_file(file_path: str, fetcher: FileFetcherDep) -> StreamingResponse:
    """Stream ``{source}/{path}`` from the provider's origin."""
    fetched = await fetcher.open(file_path)
    return StreamingResponse(
        fetched.response.aiter_bytes(),
        media_type=fetched.content_type,
        headers={"Content-Disposition": fetched.content_disposition},
        background=BackgroundTask(fetched.response.aclose),
    )
