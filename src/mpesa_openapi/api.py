"""
Public, high-level helpers for talking to the M-Pesa OpenAPI gateway.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

import requests

from .core.client import MpesaClient
from .core.config import ClientConfig, ClientParameters, load_client_config
from .core.models import DisburseResponse, PaymentRequest, PushAsyncResponse

__all__ = [
    "create_client",
    "disburse",
    "push_payment",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    callback_handler: Any = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    **explicit: Any,
) -> MpesaClient:
    """
    Construct a :class:`MpesaClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (overrides, base, parameters, *explicit.values())
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            **explicit,
        )
    return MpesaClient(cfg, session=session, callback_handler=callback_handler)


def _payment_request(
    *,
    msisdn: str,
    amount: Decimal | str | int | float,
    reference: str,
    third_party_id: str,
    description: str,
) -> PaymentRequest:
    return PaymentRequest(
        third_party_id=third_party_id,
        reference=reference,
        amount=amount,
        msisdn=msisdn,
        description=description,
    )


def push_payment(
    *,
    msisdn: str,
    amount: Decimal | str | int | float,
    reference: str,
    third_party_id: str,
    description: str,
    client: Optional[MpesaClient] = None,
    **client_kwargs: Any,
) -> PushAsyncResponse:
    """
    One-shot C2B push payment; builds a client from the environment when none is given.
    """
    client = client or create_client(**client_kwargs)
    return client.push_async(
        _payment_request(
            msisdn=msisdn,
            amount=amount,
            reference=reference,
            third_party_id=third_party_id,
            description=description,
        )
    )


def disburse(
    *,
    msisdn: str,
    amount: Decimal | str | int | float,
    reference: str,
    third_party_id: str,
    description: str,
    client: Optional[MpesaClient] = None,
    **client_kwargs: Any,
) -> DisburseResponse:
    client = client or create_client(**client_kwargs)
    return client.disburse(
        _payment_request(
            msisdn=msisdn,
            amount=amount,
            reference=reference,
            third_party_id=third_party_id,
            description=description,
        )
    )
