"""
Public facade for the M-Pesa OpenAPI client package.

The module re-exports the most useful pieces for integrators so they can
``from mpesa_openapi import ...`` without navigating the package.
"""

from .api import create_client, disburse, push_payment
from .core import (
    BusinessError,
    CallbackRelay,
    CallbackReply,
    ClientConfig,
    ClientParameters,
    ConfigError,
    DisburseResponse,
    EncryptionError,
    GatewayError,
    GatewayTimeoutError,
    KeyFormatError,
    Market,
    MissingFieldError,
    MpesaClient,
    MpesaError,
    PaymentRequest,
    Platform,
    PushAsyncResponse,
    PushCallbackRequest,
    PushCallbackResponse,
    QueryTxParams,
    SessionResponse,
    TransportError,
    UnsupportedOperationError,
    callback_router,
    encrypt_key,
    load_client_config,
)

__all__ = (
    "BusinessError",
    "CallbackRelay",
    "CallbackReply",
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "DisburseResponse",
    "EncryptionError",
    "GatewayError",
    "GatewayTimeoutError",
    "KeyFormatError",
    "Market",
    "MissingFieldError",
    "MpesaClient",
    "MpesaError",
    "PaymentRequest",
    "Platform",
    "PushAsyncResponse",
    "PushCallbackRequest",
    "PushCallbackResponse",
    "QueryTxParams",
    "SessionResponse",
    "TransportError",
    "UnsupportedOperationError",
    "callback_router",
    "create_client",
    "disburse",
    "encrypt_key",
    "load_client_config",
    "push_payment",
)
