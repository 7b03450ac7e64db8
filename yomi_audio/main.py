"""Yomi audio server FastAPI application entry point.

Wires together the provider registry, entry store, edge cache, and routes
via dependency injection.  Loads configuration from ``.env`` and
``config/providers.yaml`` and configures structured logging.

Run with ``uvicorn yomi_audio.main:app`` or ``python -m yomi_audio.main``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from yomi_audio.api.middleware import (
    EdgeCacheMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from yomi_audio.api.routes import router as api_router
from yomi_audio.config.loader import build_provider_registry, load_config
from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.config.settings import Settings
from yomi_audio.interfaces.cache_provider import ICacheProvider
from yomi_audio.interfaces.entry_store import IEntryStore
from yomi_audio.providers.cache.memory_cache import MemoryCacheProvider
from yomi_audio.providers.store.sqlite_entry_store import SQLiteEntryStore
from yomi_audio.services.audio_source_service import AudioSourceService
from yomi_audio.services.edge_cache import ResponseCache
from yomi_audio.services.file_fetcher import FileFetchService
from yomi_audio.services.result_ranker import ResultRanker
from yomi_audio.services.url_resolver import UrlResolver
from yomi_audio.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def _build_all(
    app_settings: Settings,
    *,
    registry: ProviderRegistry | None = None,
    entry_store: IEntryStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    cache_provider: ICacheProvider | None = None,
) -> dict[str, Any]:
    """Construct every component of the application.

    Anything passed in is used as-is (tests inject fakes this way);
    everything else is built from *app_settings*.  Returns a flat dict of
    named components to be stored on ``app.state``.
    """
    if registry is None:
        registry = build_provider_registry(load_config(settings=app_settings))

    owns_http_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(app_settings.upstream_timeout),
            follow_redirects=True,
        )

    if entry_store is None:
        entry_store = SQLiteEntryStore(
            db_path=app_settings.entries_db_path,
            max_results=app_settings.max_results,
        )

    if cache_provider is None:
        cache_provider = MemoryCacheProvider(
            max_size=app_settings.cache_max_entries,
            ttl=app_settings.cache_max_age,
        )

    response_cache = ResponseCache(
        cache_provider,
        enabled=app_settings.cache_enabled,
        max_age=app_settings.cache_max_age,
    )

    ranker = ResultRanker(
        registry,
        remove_duplicates=app_settings.remove_forvo_dupes,
        family_prefix=app_settings.dedup_family_prefix,
    )
    url_resolver = UrlResolver(registry, proxy_audio=app_settings.proxy_audio)

    audio_source_service = AudioSourceService(
        registry,
        entry_store,
        ranker,
        url_resolver,
        max_term_length=app_settings.max_term_length,
        max_pattern_length=app_settings.max_regex_length,
    )
    file_fetcher = FileFetchService(registry, http_client)

    return {
        "settings": app_settings,
        "registry": registry,
        "entry_store": entry_store,
        "http_client": http_client,
        "owns_http_client": owns_http_client,
        "response_cache": response_cache,
        "audio_source_service": audio_source_service,
        "file_fetcher": file_fetcher,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Check the entry store on startup; flush cache writes and close HTTP on shutdown."""
    state = application.state
    await state.entry_store.initialize()

    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=state.settings.app_env,
        providers=len(state.registry),
        store=state.entry_store.get_provider_name(),
        cache_enabled=state.response_cache.enabled,
        proxy_audio=state.settings.proxy_audio,
    )

    yield

    await state.response_cache.flush()
    if state.owns_http_client:
        await state.http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    *,
    registry: ProviderRegistry | None = None,
    entry_store: IEntryStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    cache_provider: ICacheProvider | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""
    app_settings = app_settings or settings
    components = _build_all(
        app_settings,
        registry=registry,
        entry_store=entry_store,
        http_client=http_client,
        cache_provider=cache_provider,
    )

    application = FastAPI(
        title="Yomi Audio Server",
        version=_VERSION,
        description=(
            "Resolve a Japanese term (and optional reading) to ranked, "
            "de-duplicated pronunciation audio from multiple providers, and "
            "stream provider files through a single origin."
        ),
        lifespan=_lifespan,
    )

    for key, value in components.items():
        setattr(application.state, key, value)

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(EdgeCacheMiddleware, response_cache=components["response_cache"])
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "yomi_audio.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
