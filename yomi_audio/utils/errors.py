"""Custom exception hierarchy for the Yomi audio server.

All application exceptions inherit from :class:`YomiAudioError`, which
carries an optional ``provider_name`` so error handlers can identify which
audio provider (e.g. "nhk16", "forvo") or backing service caused the
failure, plus the HTTP ``status_code`` the error maps to.

The hierarchy is organized by who is at fault:

    YomiAudioError  (base -- catch-all, 500)
    +-- ClientInputError        (400: malformed request input)
    |   +-- InvalidPatternError (400: bad excludeDisplayTextRegex)
    +-- NotFoundError           (404: provider file unavailable)
    +-- UpstreamError           (500: provider origin unreachable)
    |   +-- EntryStoreError     (500: entry database failure)
    +-- ConfigurationError      (500: startup / missing config)

``ErrorHandlingMiddleware`` (src: yomi_audio/api/middleware.py) turns any of
these into a plain-text response with the matching status.  Nothing in the
pipeline retries; errors propagate to the middleware as raised.
"""


class YomiAudioError(Exception):
    """Base exception for all Yomi audio server errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which provider or backend triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[forvo] File not found``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client errors (4xx)
# ---------------------------------------------------------------------------

class ClientInputError(YomiAudioError):
    """Raised when request input is missing, oversized, or refers to an unknown source."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidPatternError(ClientInputError):
    """Raised when the caller's display-text exclusion pattern cannot be compiled."""

    def __init__(
        self,
        message: str = "Invalid excludeDisplayTextRegex",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(YomiAudioError):
    """Raised when a provider origin has no file at the requested path.

    The upstream status is deliberately not passed through: any
    non-success answer from the origin becomes a 404 here.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "File not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Server-side errors (5xx)
# ---------------------------------------------------------------------------

class UpstreamError(YomiAudioError):
    """Raised when an external dependency (provider origin, store) fails."""

    def __init__(
        self,
        message: str = "Upstream service failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EntryStoreError(UpstreamError):
    """Raised when the audio entry database cannot be queried.

    Never converted into an empty result list -- a failing store must
    surface as a 500.
    """

    def __init__(
        self,
        message: str = "Entry store query failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(YomiAudioError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
