"""
Inbound handling of the gateway's payment-result callbacks.

:class:`CallbackRelay` is independent of any web framework: it takes the raw
request body and returns a :class:`CallbackReply`. :func:`callback_router`
mounts a relay on a FastAPI application.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol, Type, TypeVar, Union

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from .models import PushCallbackRequest, PushCallbackResponse

__all__ = [
    "CALLBACK_TIMEOUT_SECONDS",
    "CallbackReply",
    "CallbackRelay",
    "PushCallbackHandler",
    "RelayState",
    "callback_router",
    "receive_payload",
]

CALLBACK_TIMEOUT_SECONDS = 60.0

ModelT = TypeVar("ModelT", bound=BaseModel)
CallbackResult = Union[PushCallbackResponse, BaseModel, Dict[str, Any]]


class PushCallbackHandler(Protocol):
    def handle_callback(self, request: PushCallbackRequest) -> CallbackResult:
        ...


class RelayState(str, Enum):
    RECEIVING = "receiving"
    HANDLING = "handling"
    REPLYING = "replying"
    ERRORING = "erroring"


@dataclass(frozen=True)
class CallbackReply:
    """
    What to write back to the gateway.

    ``failed_in`` names the stage that failed when ``state`` is ``ERRORING``.
    """

    status_code: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    state: RelayState = RelayState.REPLYING
    failed_in: Optional[RelayState] = None

    @classmethod
    def error(cls, message: str, failed_in: RelayState) -> "CallbackReply":
        return cls(
            status_code=500,
            body=message.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            state=RelayState.ERRORING,
            failed_in=failed_in,
        )


def receive_payload(label: str, body: bytes, model: Type[ModelT]) -> ModelT:
    """Decode a JSON request ``body`` into ``model``; raises ``ValueError``."""
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise ValueError(f"{label}: could not decode request body: {exc}") from exc


def _to_json(result: Any) -> bytes:
    if isinstance(result, BaseModel):
        return result.model_dump_json(by_alias=True).encode("utf-8")
    return json.dumps(result).encode("utf-8")


class CallbackRelay:
    """
    Decode a callback, pass it to the handler and turn the outcome into a reply.

    Handler failures are logged and reported to the gateway as a 500; they are
    never raised to the caller of :meth:`handle`.
    """

    label = "mpesa push callback"

    def __init__(
        self,
        handler: Union[PushCallbackHandler, Callable[[PushCallbackRequest], CallbackResult]],
    ) -> None:
        self._handle = getattr(handler, "handle_callback", handler)

    def handle(self, body: bytes) -> CallbackReply:
        try:
            request = receive_payload(self.label, body, PushCallbackRequest)
        except ValueError as exc:
            logging.warning("Rejected %s: %s", self.label, exc)
            return CallbackReply.error(str(exc), RelayState.RECEIVING)

        try:
            result = self._handle(request)
            payload = _to_json(result)
        except Exception as exc:  # noqa: BLE001
            logging.error(
                "Callback handler failed for conversation %s: %s",
                request.original_conversation_id,
                exc,
            )
            return CallbackReply.error(str(exc), RelayState.HANDLING)

        return CallbackReply(
            status_code=200,
            body=payload,
            headers={"Content-Type": "application/json"},
        )


def callback_router(
    relay: CallbackRelay,
    *,
    path: str = "/mpesa/callback",
    timeout: float = CALLBACK_TIMEOUT_SECONDS,
) -> APIRouter:
    """Build a router exposing ``relay`` as a POST endpoint at ``path``."""
    router = APIRouter()

    @router.post(path, tags=["M-Pesa"])
    async def mpesa_callback(request: Request) -> Response:
        try:
            body = await asyncio.wait_for(request.body(), timeout=timeout)
        except asyncio.TimeoutError:
            logging.warning("Timed out reading %s body", relay.label)
            reply = CallbackReply.error("timed out reading callback body", RelayState.RECEIVING)
        else:
            reply = await run_in_threadpool(relay.handle, body)
        return _as_response(reply)

    return router


def _as_response(reply: CallbackReply) -> Response:
    headers = dict(reply.headers)
    media_type = headers.pop("Content-Type", None)
    return Response(
        content=reply.body,
        status_code=reply.status_code,
        headers=headers,
        media_type=media_type,
    )
