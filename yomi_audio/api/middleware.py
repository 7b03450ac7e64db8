"""API middleware -- CORS, request logging, edge caching, and error handling.

# ─── MIDDLEWARE EXECUTION ORDER ────────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed).  In
# yomi_audio/main.py:
#
#     app.add_middleware(ErrorHandlingMiddleware)      # innermost
#     app.add_middleware(EdgeCacheMiddleware, ...)
#     app.add_middleware(RequestLoggingMiddleware)
#     configure_cors(app)                              # outermost
#
#   Request flow:
#     Client → CORS → RequestLogging → EdgeCache → ErrorHandling → route
#
# So every response -- cache hit, fresh result, or error converted by
# ErrorHandling -- passes back out through CORS, and OPTIONS preflights
# never reach logging, the cache, or the routes.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from yomi_audio.models.cache import CachedResponse
from yomi_audio.services.edge_cache import ResponseCache
from yomi_audio.utils.errors import YomiAudioError
from yomi_audio.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Add permissive CORS headers to every response.

    Unlike Starlette's ``CORSMiddleware`` the headers are sent whether or
    not the request carries an ``Origin`` header, and any ``OPTIONS``
    request is answered with an empty 204 straight away.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


def configure_cors(app: FastAPI) -> None:
    """Install :class:`CORSHeadersMiddleware` as the outermost middleware."""
    app.add_middleware(CORSHeadersMiddleware)


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                query=request.url.query,
                status=status_code,
                cache=response.headers.get("x-cache") if response else None,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Edge cache
# ---------------------------------------------------------------------------


class EdgeCacheMiddleware(BaseHTTPMiddleware):
    """Serve repeat requests from :class:`ResponseCache`.

    On a hit the route never runs.  On a miss the response body is streamed
    to the caller unchanged while a copy is captured; once the last chunk
    has gone out the copy is handed to ``schedule_store``, which persists it
    in a detached task.
    """

    def __init__(self, app: ASGIApp, response_cache: ResponseCache) -> None:
        super().__init__(app)
        self._cache = response_cache

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if not self._cache.enabled:
            return await call_next(request)

        key = self._cache.cache_key(request.method, str(request.url))
        cached = await self._cache.lookup(key)
        if cached is not None:
            return _replay(cached)

        response = await call_next(request)
        if not self._cache.is_cacheable(request.method, response.status_code):
            return response

        response.headers["Cache-Control"] = self._cache.cache_control
        response.headers["X-Cache"] = "MISS"
        snapshot = [(k, v) for k, v in response.headers.items() if k != "x-cache"]
        response.body_iterator = self._capture(  # type: ignore[attr-defined]
            key,
            response.status_code,
            snapshot,
            response.body_iterator,  # type: ignore[attr-defined]
        )
        return response

    async def _capture(
        self,
        key: str,
        status_code: int,
        headers: list[tuple[str, str]],
        body: AsyncIterator[bytes],
    ) -> AsyncIterator[bytes]:
        chunks: list[bytes] = []
        async for chunk in body:
            chunks.append(chunk)
            yield chunk
        self._cache.schedule_store(
            key,
            CachedResponse(status_code=status_code, headers=headers, body=b"".join(chunks)),
        )


def _replay(cached: CachedResponse) -> Response:
    response = Response(content=cached.body, status_code=cached.status_code)
    raw = [
        (name.encode("latin-1"), value.encode("latin-1"))
        for name, value in cached.headers
        if name.lower() != "content-length"
    ]
    raw.append((b"content-length", str(len(cached.body)).encode("latin-1")))
    raw.append((b"x-cache", b"HIT"))
    response.raw_headers = raw
    return response


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert exceptions into plain-text error responses.

    ``YomiAudioError`` subclasses map to their own ``status_code``: client
    errors return the bare message, server errors are prefixed with
    ``Error:``.  Any other exception becomes a 500 carrying its message.
    Stack traces are logged server-side only.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except YomiAudioError as exc:
            log = _logger.warning if exc.status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=exc.status_code,
                path=str(request.url.path),
            )
            body = exc.message if exc.status_code < 500 else f"Error: {exc.message}"
            return PlainTextResponse(body, status_code=exc.status_code)
        except Exception as exc:
            _logger.exception(
                "unhandled_error",
                error_type=type(exc).__name__,
                path=str(request.url.path),
            )
            return PlainTextResponse(f"Error: {exc}", status_code=500)
