"""Shared fixtures: RSA key material, a controllable clock and a stub transport."""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from mpesa_openapi.core.config import ClientConfig
from mpesa_openapi.core.markets import Market, Platform
from mpesa_openapi.core.transport import GatewayRequest, TransportResponse


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now += timedelta(**kwargs)


class StubTransport:
    """Replays queued responses and records every request it receives."""

    def __init__(self, *responses: Union[TransportResponse, Exception]) -> None:
        self.responses: List[Union[TransportResponse, Exception]] = list(responses)
        self.requests: List[GatewayRequest] = []

    def queue(self, payload: Dict[str, Any], status_code: int = 200) -> None:
        self.responses.append(ok(payload, status_code))

    def send(self, request: GatewayRequest) -> TransportResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request to {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def paths(self) -> List[str]:
        return [req.url.rsplit("/ipg/v2/vodacomTZN/", 1)[-1] for req in self.requests]


def ok(payload: Dict[str, Any], status_code: int = 200) -> TransportResponse:
    return TransportResponse(
        status_code=status_code,
        payload=payload,
        error=payload if status_code >= 400 else None,
    )


def session_payload(session_id: str = "S1", output_error: str = "") -> Dict[str, Any]:
    return {
        "output_ResponseCode": "INS-0",
        "output_ResponseDesc": "Request processed successfully",
        "output_SessionID": session_id,
        "output_error": output_error,
    }


def transaction_payload(**extra: Any) -> Dict[str, Any]:
    payload = {
        "output_ResponseCode": "INS-0",
        "output_ResponseDesc": "Request processed successfully",
        "output_TransactionID": "49XCDF6",
        "output_ConversationID": "AG_20240101_000049b2a4bf1b9d7a36",
        "output_ThirdPartyConversationID": "asv02e5958774f7ba228d83d0d689761",
    }
    payload.update(extra)
    return payload


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_key_b64(private_key: rsa.RSAPrivateKey) -> str:
    der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(der).decode("ascii")


@pytest.fixture
def decrypt(private_key: rsa.RSAPrivateKey):
    def _decrypt(token: str) -> str:
        return private_key.decrypt(base64.b64decode(token), padding.PKCS1v15()).decode("utf-8")

    return _decrypt


@pytest.fixture
def config(public_key_b64: str) -> ClientConfig:
    return ClientConfig(
        api_key="test-api-key",
        public_key=public_key_b64,
        market=Market.TANZANIA,
        platform=Platform.SANDBOX,
        service_provider_code="000000",
        session_lifetime_minutes=5,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()
