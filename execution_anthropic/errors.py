# ---------------------------------
# TYPED EXCEPTIONS
# ---------------------------------

from __future__ import annotations


class ProviderError(RuntimeError):
    """Base class for provider failures."""


class CredentialError(ProviderError):
    """Raised when no API key can be resolved."""


class ValidationError(ProviderError):
    """Raised when an API key does not match the vendor key format."""


class TransportError(ProviderError):
    """A sanitized failure from the vendor client.

    The message never contains credential material and no original exception
    is chained.
    """

    def __init__(
            self,
            message: str,
            *,
            provider: str,
            correlation_id: str | None = None,
            error_type: str | None = None,
            status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.correlation_id = correlation_id
        self.error_type = error_type
        self.status_code = status_code


class ConfigurationError(ProviderError):
    """Raised when provider settings cannot be loaded from the environment."""
