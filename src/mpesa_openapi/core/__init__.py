"""
Core primitives that implement the M-Pesa OpenAPI request pipeline.
"""

from .adapter import RequestAdapter, format_amount, normalize_msisdn
from .callback import CallbackRelay, CallbackReply, RelayState, callback_router
from .client import MpesaClient
from .config import ClientConfig, ClientParameters, load_client_config
from .crypto import encrypt_key, load_public_key
from .environment import ClientEnvironment, build_environment
from .errors import (
    AdaptationError,
    BusinessError,
    ConfigError,
    EncryptionError,
    GatewayError,
    GatewayTimeoutError,
    KeyFormatError,
    MissingFieldError,
    MpesaError,
    TransportError,
    UnsupportedOperationError,
)
from .markets import Market, Operation, Platform, build_base_path
from .models import (
    DisburseResponse,
    PaymentRequest,
    PushAsyncResponse,
    PushCallbackRequest,
    PushCallbackResponse,
    QueryTxParams,
    QueryTxResponse,
    SessionResponse,
)
from .session import Session, SessionManager
from .transport import GatewayRequest, RequestsTransport, Transport, TransportResponse

__all__ = [
    "AdaptationError",
    "BusinessError",
    "CallbackRelay",
    "CallbackReply",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "DisburseResponse",
    "EncryptionError",
    "GatewayError",
    "GatewayRequest",
    "GatewayTimeoutError",
    "KeyFormatError",
    "Market",
    "MissingFieldError",
    "MpesaClient",
    "MpesaError",
    "Operation",
    "PaymentRequest",
    "Platform",
    "PushAsyncResponse",
    "PushCallbackRequest",
    "PushCallbackResponse",
    "QueryTxParams",
    "QueryTxResponse",
    "RelayState",
    "RequestAdapter",
    "RequestsTransport",
    "Session",
    "SessionManager",
    "SessionResponse",
    "Transport",
    "TransportError",
    "TransportResponse",
    "UnsupportedOperationError",
    "build_base_path",
    "build_environment",
    "callback_router",
    "encrypt_key",
    "format_amount",
    "load_client_config",
    "load_public_key",
    "normalize_msisdn",
]
