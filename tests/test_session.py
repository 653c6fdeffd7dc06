"""Tests for session acquisition and caching."""

from __future__ import annotations

import threading
import time
from datetime import timedelta

import pytest

from conftest import StubTransport, ok, session_payload
from mpesa_openapi.core.errors import (
    BusinessError,
    GatewayError,
    GatewayTimeoutError,
    KeyFormatError,
    TransportError,
)
from mpesa_openapi.core.session import Session, SessionManager
from mpesa_openapi.core.transport import TransportResponse

BASE = "https://openapi.m-pesa.com/sandbox/ipg/v2/vodacomTZN/"


def _manager(config, transport, clock, **kwargs) -> SessionManager:
    options = dict(
        api_key=config.api_key,
        public_key=config.public_key,
        lifetime_minutes=config.session_lifetime_minutes,
        base_path=BASE,
        transport=transport,
        clock=clock,
    )
    options.update(kwargs)
    return SessionManager(**options)


def test_acquire_stores_session_for_configured_lifetime(config, transport, clock) -> None:
    transport.queue(session_payload("S1"))
    manager = _manager(config, transport, clock)

    response = manager.acquire_session()

    assert response.session_id == "S1"
    assert response.raw == session_payload("S1")
    assert manager.session == Session(id="S1", expires_at=clock.now + timedelta(minutes=5))


def test_acquire_sends_encrypted_api_key(config, transport, clock, decrypt) -> None:
    transport.queue(session_payload())
    _manager(config, transport, clock).acquire_session()

    (request,) = transport.requests
    assert request.method == "GET"
    assert request.url == BASE + "getSession/"
    assert request.payload is None
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Origin"] == "*"
    scheme, token = request.headers["Authorization"].split(" ", 1)
    assert scheme == "Bearer"
    assert decrypt(token) == "test-api-key"


def test_cached_session_skips_network(config, transport, clock) -> None:
    transport.queue(session_payload("S1"))
    manager = _manager(config, transport, clock)
    manager.acquire_session()
    clock.advance(minutes=4, seconds=59)

    assert manager.ensure_session() == "S1"
    assert len(transport.requests) == 1


def test_expired_session_is_refreshed(config, transport, clock) -> None:
    transport.queue(session_payload("S1"))
    transport.queue(session_payload("S2"))
    manager = _manager(config, transport, clock)
    manager.acquire_session()
    clock.advance(minutes=5)

    assert manager.ensure_session() == "S2"
    assert len(transport.requests) == 2
    assert manager.session.expires_at == clock.now + timedelta(minutes=5)


def test_missing_session_is_acquired(config, transport, clock) -> None:
    transport.queue(session_payload("S9"))

    assert _manager(config, transport, clock).ensure_session() == "S9"


def test_business_error_keeps_previous_session(config, transport, clock) -> None:
    transport.queue(session_payload("S1"))
    transport.queue({"output_error": "invalid key"})
    manager = _manager(config, transport, clock)
    manager.acquire_session()
    before = manager.session

    with pytest.raises(BusinessError, match="invalid key") as excinfo:
        manager.acquire_session()

    assert manager.session is before
    assert excinfo.value.response.output_error == "invalid key"


def test_gateway_error_response(config, clock) -> None:
    transport = StubTransport(ok({"output_ResponseCode": "INS-989", "output_error": "bad"}, 401))
    manager = _manager(config, transport, clock)

    with pytest.raises(GatewayError) as excinfo:
        manager.acquire_session()

    assert excinfo.value.status_code == 401
    assert manager.session is None


def test_response_without_session_id_is_a_gateway_error(config, clock) -> None:
    transport = StubTransport(TransportResponse(status_code=200, payload={"output_ResponseCode": "INS-0"}))

    with pytest.raises(GatewayError, match="output_SessionID"):
        _manager(config, transport, clock).acquire_session()


@pytest.mark.parametrize("failure", [TransportError("connection refused"), GatewayTimeoutError("slow")])
def test_transport_failure_propagates(config, clock, failure) -> None:
    manager = _manager(config, StubTransport(failure), clock)

    with pytest.raises(TransportError):
        manager.ensure_session()

    assert manager.session is None


def test_bad_public_key_fails_before_network(config, transport, clock) -> None:
    manager = _manager(config, transport, clock, public_key="not-a-key")

    with pytest.raises(KeyFormatError):
        manager.ensure_session()

    assert transport.requests == []


def test_concurrent_refresh_is_single_flight(config, clock) -> None:
    class SlowTransport(StubTransport):
        def send(self, request):
            time.sleep(0.05)
            return super().send(request)

    transport = SlowTransport(ok(session_payload("S1")))
    manager = _manager(config, transport, clock)
    results = []

    def worker() -> None:
        results.append(manager.ensure_session())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["S1"] * 8
    assert len(transport.requests) == 1
