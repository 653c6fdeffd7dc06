"""
HTTP client for the M-Pesa OpenAPI gateway.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Type, TypeVar

import requests

from .adapter import RequestAdapter
from .callback import CallbackRelay, CallbackReply, PushCallbackHandler
from .config import ClientConfig
from .crypto import encrypt_key
from .markets import ROUTES, Operation
from .models import (
    DisburseResponse,
    PaymentRequest,
    PushAsyncResponse,
    QueryTxParams,
    QueryTxResponse,
    SessionResponse,
)
from .session import Clock, SessionManager, check_response, utc_now
from .transport import GatewayRequest, RequestsTransport, Transport, authorization_headers

__all__ = ["MpesaClient"]

ResponseT = TypeVar("ResponseT", PushAsyncResponse, DisburseResponse)

_FAILURE_MESSAGES = {
    Operation.PUSH_PAY: "could not perform c2b single stage request",
    Operation.DISBURSE: "could not perform disburse request",
}


class MpesaClient:
    """
    Session-authenticated client for push payments and disbursements.

    One instance owns one cached session and may be shared between threads.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        callback_handler: Optional[PushCallbackHandler | Callable[..., Any]] = None,
        transport: Optional[Transport] = None,
        session: Optional[requests.Session] = None,
        clock: Clock = utc_now,
    ) -> None:
        if transport is not None and session is not None:
            raise ValueError("Provide either a transport or a requests session, not both.")
        self.config = config
        self.base_path = config.base_path
        self.transport: Transport = transport or RequestsTransport(
            session, timeout=config.timeout_seconds
        )
        self.request_adapter = RequestAdapter(
            market=config.market,
            platform=config.platform,
            service_provider_code=config.service_provider_code,
        )
        self.sessions = SessionManager(
            api_key=config.api_key,
            public_key=config.public_key,
            lifetime_minutes=config.session_lifetime_minutes,
            base_path=self.base_path,
            transport=self.transport,
            clock=clock,
        )
        self.callback_relay = CallbackRelay(callback_handler) if callback_handler else None

    def session_id(self) -> SessionResponse:
        """Fetch a fresh session id, replacing the cached one on success."""
        return self.sessions.acquire_session()

    def push_async(self, request: PaymentRequest) -> PushAsyncResponse:
        """Submit a C2B single stage payment to the customer's handset."""
        return self._submit(Operation.PUSH_PAY, request, PushAsyncResponse)

    def disburse(self, request: PaymentRequest) -> DisburseResponse:
        """Send a B2C payment to the customer's wallet."""
        return self._submit(Operation.DISBURSE, request, DisburseResponse)

    def query_tx(self, params: QueryTxParams) -> QueryTxResponse:
        raise NotImplementedError("transaction status queries are not implemented")

    def handle_callback(self, body: bytes) -> CallbackReply:
        if self.callback_relay is None:
            raise RuntimeError("MpesaClient was created without a callback handler")
        return self.callback_relay.handle(body)

    def _submit(
        self,
        operation: Operation,
        request: PaymentRequest,
        response_type: Type[ResponseT],
    ) -> ResponseT:
        session_id = self.sessions.ensure_session()
        token = encrypt_key(session_id, self.config.public_key)
        payload = self.request_adapter.adapt(operation, request)

        route = ROUTES[operation]
        url = self.base_path + route.path
        logging.info(
            "Submitting %s %s for conversation %s",
            operation,
            url,
            payload["input_ThirdPartyConversationID"],
        )
        response = self.transport.send(
            GatewayRequest(
                method=route.method,
                url=url,
                headers=authorization_headers(token),
                payload=payload,
            )
        )
        parsed = response_type.from_response(response.payload)
        logging.debug("%s response: %s", operation, parsed.raw)
        check_response(response, parsed.output_error, _FAILURE_MESSAGES[operation], parsed)
        return parsed

