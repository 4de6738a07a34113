"""Custom exception hierarchy for the Telegram API proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class UpstreamError(ProxyError):
    """Raised when the upstream request cannot be completed.

    Attributes:
        message: Error message
        provider: Upstream name used in logs (e.g., 'telegram')
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream request times out."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider)


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to reach or talk to the upstream."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider)
