"""Immutable registry of configured audio providers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from yomi_audio.models.audio import Provider
from yomi_audio.utils.errors import ConfigurationError


class ProviderRegistry:
    """Ordered, read-only collection of :class:`Provider` objects.

    Keys are normalised to lowercase.  ``default_order`` is the ordering
    applied when a request does not include any provider explicitly; it
    defaults to the configured order of the providers themselves.
    """

    def __init__(
        self,
        providers: Iterable[Provider],
        default_order: Iterable[str] | None = None,
    ) -> None:
        self._providers: dict[str, Provider] = {}
        for provider in providers:
            key = provider.key.lower()
            if key in self._providers:
                raise ConfigurationError(f"Duplicate provider key: {key}")
            self._providers[key] = provider.model_copy(
                update={"key": key, "url": provider.url.rstrip("/")}
            )

        if default_order is None:
            self._default_order = tuple(self._providers)
        else:
            order = tuple(dict.fromkeys(k.lower() for k in default_order))
            unknown = [k for k in order if k not in self._providers]
            if unknown:
                raise ConfigurationError(
                    f"default_order names unknown providers: {', '.join(unknown)}"
                )
            # Providers missing from an explicit ordering go last, in configured order.
            self._default_order = order + tuple(k for k in self._providers if k not in order)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._providers

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)

    def keys(self) -> list[str]:
        """Return provider keys in configured order."""
        return list(self._providers)

    @property
    def default_order(self) -> list[str]:
        return list(self._default_order)

    def get(self, key: str) -> Provider | None:
        """Return the provider for *key* (case-insensitive), or ``None``."""
        return self._providers.get(key.lower())

    def display_name(self, key: str) -> str:
        """Return the friendly name for *key*, falling back to the key itself."""
        provider = self.get(key)
        return provider.name if provider else key

    def family(self, prefix: str) -> frozenset[str]:
        """Return every key that starts with *prefix* (e.g. all Forvo variants)."""
        prefix = prefix.lower()
        return frozenset(k for k in self._providers if k.startswith(prefix))
