"""Provider error taxonomy."""

from typing import Optional


class ProviderError(Exception):
    """Base class for failures raised by a provider adapter."""

    is_transient = False

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class MissingCredential(ProviderError):
    """Required API key/credentials are not configured."""

    def __init__(self, provider: Optional[str] = None, setting: Optional[str] = None):
        hint = f". Set {setting}" if setting else ""
        super().__init__(f"API key not configured{hint}", provider=provider)
        self.setting = setting


class InvalidRequest(ProviderError):
    """The query cannot be turned into a valid provider request."""


class TransportFailure(ProviderError):
    """Connectivity failure before a response was received."""

    is_transient = True

    def __init__(self, cause: BaseException, provider: Optional[str] = None):
        super().__init__(f"Network error: {cause}", provider=provider)
        self.cause = cause


class UpstreamError(ProviderError):
    """The provider answered with a non-success status or an error body."""

    is_transient = True

    def __init__(
        self,
        status_code: Optional[int],
        message: str = "",
        provider: Optional[str] = None,
    ):
        text = message or (f"HTTP {status_code}" if status_code is not None else "unknown error")
        super().__init__(f"API error: {text}", provider=provider)
        self.status_code = status_code


class MalformedResponse(ProviderError):
    """The provider response cannot be decoded at all."""

    is_transient = True

    def __init__(self, cause: object, provider: Optional[str] = None):
        super().__init__(f"Failed to decode response: {cause}", provider=provider)
        self.cause = cause


class ProviderUnavailable(Exception):
    """Orchestrator-level wrapper: the active provider could not serve a call.

    The original ProviderError is available as ``__cause__``.
    """

    def __init__(self, reason: str, provider: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.provider = provider

    @classmethod
    def from_error(cls, error: Exception, provider: Optional[str] = None) -> "ProviderUnavailable":
        unavailable = cls(str(error), provider=provider or getattr(error, "provider", None))
        unavailable.__cause__ = error
        return unavailable
