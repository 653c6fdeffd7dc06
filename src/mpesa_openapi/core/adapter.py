"""
Helpers for constructing the JSON payloads sent to the M-Pesa gateway.

Every function here is pure: the same operation, context and request always
produce the same payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Dict

from .errors import MissingFieldError, UnsupportedOperationError
from .markets import Market, Operation, Platform
from .models import PaymentRequest

__all__ = [
    "RequestAdapter",
    "format_amount",
    "normalize_msisdn",
]

_CENTS = Decimal("0.01")


def _require(value: object, field_name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise MissingFieldError(field_name)
    return text


def format_amount(amount: object) -> str:
    """Render ``amount`` with two decimal places, e.g. ``"1500.00"``."""
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        raise MissingFieldError("amount")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise MissingFieldError("amount") from exc
    if not value.is_finite() or value <= 0:
        raise MissingFieldError("amount")
    try:
        return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        raise MissingFieldError("amount") from exc


def normalize_msisdn(msisdn: object, market: Market) -> str:
    """
    Return ``msisdn`` in the international format expected for ``market``.

    ``+255 712-345-678``, ``00255712345678``, ``0712345678`` and
    ``255712345678`` all become ``255712345678`` in Tanzania.
    """
    raw = _require(msisdn, "msisdn")
    digits = "".join(ch for ch in raw if ch.isdigit())
    if digits.startswith("00"):
        digits = digits[2:]
    if not digits:
        raise MissingFieldError("msisdn")
    if digits.startswith(market.dial_code):
        return digits
    if digits.startswith("0"):
        return market.dial_code + digits.lstrip("0")
    return market.dial_code + digits


@dataclass(frozen=True)
class RequestAdapter:
    """Maps a :class:`PaymentRequest` onto the gateway's ``input_*`` fields."""

    market: Market
    platform: Platform
    service_provider_code: str

    def adapt(self, operation: Operation, request: PaymentRequest | None = None) -> Dict[str, str]:
        try:
            build = _BUILDERS[operation]
        except KeyError:
            raise UnsupportedOperationError(operation) from None
        return build(self, request)

    def _common(self, request: PaymentRequest | None) -> Dict[str, str]:
        if request is None:
            raise MissingFieldError("request")
        return {
            "input_Amount": format_amount(request.amount),
            "input_Country": self.market.value,
            "input_Currency": self.market.currency,
            "input_CustomerMSISDN": normalize_msisdn(request.msisdn, self.market),
            "input_ServiceProviderCode": _require(
                self.service_provider_code, "service_provider_code"
            ),
            "input_ThirdPartyConversationID": _require(
                request.third_party_id, "third_party_id"
            ),
            "input_TransactionReference": _require(request.reference, "reference"),
        }

    def _session(self, request: PaymentRequest | None) -> Dict[str, str]:
        return {}

    def _push(self, request: PaymentRequest | None) -> Dict[str, str]:
        payload = self._common(request)
        payload["input_PurchasedItemsDesc"] = _require(request.description, "description")
        return payload

    def _disburse(self, request: PaymentRequest | None) -> Dict[str, str]:
        payload = self._common(request)
        payload["input_PaymentItemsDesc"] = _require(request.description, "description")
        return payload


# Operation.QUERY is deliberately absent: the gateway contract for it is not
# implemented by this client.
_BUILDERS: Dict[Operation, Callable[[RequestAdapter, PaymentRequest | None], Dict[str, str]]] = {
    Operation.SESSION_ID: RequestAdapter._session,
    Operation.PUSH_PAY: RequestAdapter._push,
    Operation.DISBURSE: RequestAdapter._disburse,
}
