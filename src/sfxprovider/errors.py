"""
Exception hierarchy for sfxprovider.

- ``PayloadError``: a request payload could not be built from declared state.
- ``APIError``: the remote API rejected a call or could not be reached.
- ``NotFoundError``: the remote entity does not exist (HTTP 404).
- ``ConfigurationError``: the provider is missing required settings.
"""

from __future__ import annotations

from typing import Optional


class ProviderError(Exception):
    """Base class for all provider errors."""


class ConfigurationError(ProviderError):
    """Raised when required provider settings are missing or invalid."""


class PayloadError(ProviderError):
    """Raised when a request payload cannot be built from declared state."""

    def __init__(self, resource_type: str, reason: str):
        self.resource_type = resource_type
        self.reason = reason
        super().__init__(f"Failed creating json payload for {resource_type}: {reason}")


class APIError(ProviderError):
    """A failed call against the SignalFx API.

    ``status_code`` is ``None`` for transport failures (connection refused,
    timeout) where no response was received.
    """

    def __init__(self, operation: str, status_code: Optional[int], message: str):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.status_code is None:
            return f"{self.operation} failed: {self.message}"
        return f"{self.operation} failed: HTTP {self.status_code}: {self.message}"


class NotFoundError(APIError):
    """The requested entity does not exist remotely."""

    def __init__(self, operation: str, message: str = "not found"):
        super().__init__(operation, 404, message)
