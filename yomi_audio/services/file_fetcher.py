"""Passthrough of provider audio files.

``/{provider}/{path...}`` is mapped onto ``{provider origin}/{path...}`` and
fetched with the shared ``httpx.AsyncClient`` in streaming mode.  Any
non-success answer from the origin becomes a 404 -- the upstream status is
normalised, not forwarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

import httpx
import structlog

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.models.audio import Provider
from yomi_audio.utils.errors import ClientInputError, NotFoundError, UpstreamError

logger = structlog.get_logger(logger_name=__name__)


@dataclass(frozen=True)
class FetchedFile:
    """An open upstream response ready to be streamed to the caller.

    The caller owns ``response`` and must close it once the body is sent.
    """

    provider: Provider
    filename: str
    response: httpx.Response

    @property
    def content_type(self) -> str | None:
        return self.response.headers.get("content-type")

    @property
    def content_disposition(self) -> str:
        """``attachment`` disposition naming the final path segment."""
        quoted = quote(self.filename)
        if quoted != self.filename:
            return f"attachment; filename*=utf-8''{quoted}"
        return f'attachment; filename="{self.filename}"'


class FileFetchService:
    """Resolves passthrough paths and opens the upstream file stream."""

    def __init__(self, registry: ProviderRegistry, http_client: httpx.AsyncClient) -> None:
        self._registry = registry
        self._client = http_client

    def origin_url(self, path: str) -> tuple[Provider, str]:
        """Split ``{provider}/{file path}`` and return the provider and origin URL.

        *path* arrives percent-decoded from the router, so the file part is
        re-encoded: a ``?`` or ``#`` in a file name must stay in the path.
        """
        source, _, file_path = path.lstrip("/").partition("/")
        provider = self._registry.get(source) if source else None
        if provider is None:
            raise ClientInputError("Invalid source", provider_name=source or None)
        if not file_path:
            raise NotFoundError(provider_name=provider.key)
        return provider, f"{provider.url}/{quote(file_path, safe='/')}"

    async def open(self, path: str) -> FetchedFile:
        """Open the upstream file for *path*.

        Raises
        ------
        ClientInputError
            If the first path segment is not a configured provider.
        NotFoundError
            If the origin answers with a non-success status.
        UpstreamError
            If the origin cannot be reached at all.
        """
        provider, url = self.origin_url(path)
        logger.info("file_fetch", provider=provider.key, url=url)

        request = self._client.build_request("GET", url)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.warning("file_fetch_failed", provider=provider.key, url=url, error=str(exc))
            raise UpstreamError(
                f"Failed to fetch {url}: {exc}", provider_name=provider.key
            ) from exc

        if not response.is_success:
            await response.aclose()
            logger.info(
                "file_fetch_not_found",
                provider=provider.key,
                url=url,
                upstream_status=response.status_code,
            )
            raise NotFoundError(provider_name=provider.key)

        filename = path.rstrip("/").rsplit("/", 1)[-1]
        return FetchedFile(provider=provider, filename=filename, response=response)
