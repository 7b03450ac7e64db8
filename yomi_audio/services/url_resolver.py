"""Mapping of ``(source, file)`` pairs to caller-facing URLs.

Pure string manipulation -- no network I/O.  With proxy mode on, every URL
routes back through this service's ``/{source}/{file}`` passthrough so the
provider origins stay hidden and origin failures surface as 404s from here.
With proxy mode off, callers fetch straight from the provider origin.
"""

from __future__ import annotations

import httpx

from yomi_audio.config.registry import ProviderRegistry
from yomi_audio.models.audio import AudioEntry


class UrlResolver:
    """Builds result URLs according to the proxy-audio flag."""

    def __init__(self, registry: ProviderRegistry, *, proxy_audio: bool = False) -> None:
        self._registry = registry
        self._proxy_audio = proxy_audio

    @property
    def proxy_audio(self) -> bool:
        return self._proxy_audio

    @staticmethod
    def internal_path(source: str, file: str) -> str:
        return f"/{source}/{file}"

    def resolve(self, entry: AudioEntry, host: str) -> str:
        """Return the URL for *entry* as seen by a caller of *host*."""
        path = self.internal_path(entry.source, entry.file)
        if self._proxy_audio:
            return f"https://{host}{path}"

        provider = self._registry.get(entry.source)
        if provider is None:
            return path
        # httpx.URL.join resolves relative segments and percent-encodes
        # non-ASCII path characters.
        return str(httpx.URL(f"{provider.url}/").join(entry.file))
