"""
Exception hierarchy raised by the M-Pesa OpenAPI client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "AdaptationError",
    "BusinessError",
    "ConfigError",
    "EncryptionError",
    "GatewayError",
    "GatewayTimeoutError",
    "KeyFormatError",
    "MissingFieldError",
    "MpesaError",
    "TransportError",
    "UnsupportedOperationError",
]


class MpesaError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(MpesaError):
    """Raised when the supplied configuration is invalid."""


class TransportError(MpesaError):
    """The HTTP call could not be completed."""


class GatewayTimeoutError(TransportError):
    """The HTTP call did not complete before its deadline."""


class GatewayError(MpesaError):
    """
    The gateway answered with a structured error (HTTP status >= 400).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class BusinessError(MpesaError):
    """
    The call succeeded at the HTTP level but ``output_error`` was populated.

    The parsed response is attached so callers can inspect the response code.
    """

    def __init__(self, message: str, *, response: Any = None) -> None:
        super().__init__(message)
        self.response = response


class EncryptionError(MpesaError):
    """The RSA encryption of a secret failed."""


class KeyFormatError(EncryptionError):
    """The public key could not be parsed or is not an RSA key."""


class AdaptationError(MpesaError):
    """A logical request could not be turned into a wire payload."""


class MissingFieldError(AdaptationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"required field '{field}' is missing or invalid")
        self.field = field


class UnsupportedOperationError(AdaptationError):
    def __init__(self, operation: Any) -> None:
        super().__init__(f"no request mapping registered for operation '{operation}'")
        self.operation = operation
