"""
Request, response and callback types exchanged with the gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "DisburseResponse",
    "PaymentRequest",
    "PushAsyncResponse",
    "PushCallbackRequest",
    "PushCallbackResponse",
    "QueryTxParams",
    "QueryTxResponse",
    "SessionResponse",
]


@dataclass(frozen=True)
class PaymentRequest:
    """
    Market independent description of a push payment or a disbursement.

    ``msisdn`` may be given in local (``07...``) or international form; the
    request adapter normalises it for the configured market.
    """

    third_party_id: str
    reference: str
    amount: Decimal | str | int | float
    msisdn: str
    description: str


@dataclass(frozen=True)
class QueryTxParams:
    query_reference: str
    third_party_id: str


@dataclass(frozen=True)
class SessionResponse:
    code: Optional[str]
    description: Optional[str]
    session_id: str
    output_error: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "SessionResponse":
        return cls(
            code=payload.get("output_ResponseCode"),
            description=payload.get("output_ResponseDesc"),
            session_id=payload.get("output_SessionID") or "",
            output_error=payload.get("output_error") or "",
            raw=payload,
        )


TransactionT = TypeVar("TransactionT", bound="_TransactionResponse")


@dataclass(frozen=True)
class _TransactionResponse:
    code: Optional[str]
    description: Optional[str]
    transaction_id: Optional[str]
    conversation_id: Optional[str]
    third_party_conversation_id: Optional[str]
    output_error: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls: Type[TransactionT], payload: Dict[str, Any]) -> TransactionT:
        return cls(
            code=payload.get("output_ResponseCode"),
            description=payload.get("output_ResponseDesc"),
            transaction_id=payload.get("output_TransactionID"),
            conversation_id=payload.get("output_ConversationID"),
            third_party_conversation_id=payload.get("output_ThirdPartyConversationID"),
            output_error=payload.get("output_error") or "",
            raw=payload,
        )


class PushAsyncResponse(_TransactionResponse):
    """Response to a C2B single stage push payment."""


class DisburseResponse(_TransactionResponse):
    """Response to a B2C disbursement."""


class QueryTxResponse(_TransactionResponse):
    pass


class PushCallbackRequest(BaseModel):
    """Body the gateway POSTs once a push payment has completed."""

    model_config = ConfigDict(populate_by_name=True)

    original_conversation_id: str = Field(alias="input_OriginalConversationID")
    transaction_id: str = Field(alias="input_TransactionID")
    result_code: str = Field(alias="input_ResultCode")
    result_desc: str = Field(alias="input_ResultDesc")
    third_party_conversation_id: str = Field(alias="input_ThirdPartyConversationID")

    @property
    def succeeded(self) -> bool:
        return self.result_code == "INS-0"


class PushCallbackResponse(BaseModel):
    """Acknowledgement returned to the gateway for a callback."""

    model_config = ConfigDict(populate_by_name=True)

    original_conversation_id: str = Field(alias="output_OriginalConversationID")
    response_code: str = Field(default="0", alias="output_ResponseCode")
    response_desc: str = Field(default="Successfully Accepted Result", alias="output_ResponseDesc")
    third_party_conversation_id: str = Field(alias="output_ThirdPartyConversationID")

    @classmethod
    def accept(cls, request: PushCallbackRequest) -> "PushCallbackResponse":
        return cls(
            original_conversation_id=request.original_conversation_id,
            third_party_conversation_id=request.third_party_conversation_id,
        )
