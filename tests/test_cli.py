from __future__ import annotations

import pytest

from conftest import StubTransport, ok, session_payload, transaction_payload
from mpesa_openapi import cli
from mpesa_openapi.core.client import MpesaClient


@pytest.fixture
def stub(monkeypatch, public_key_b64):
    transport = StubTransport()

    def fake_create_client(*, config, session=None):
        return MpesaClient(config, transport=transport)

    monkeypatch.setattr(cli, "create_client", fake_create_client)
    monkeypatch.setenv("MPESA_API_KEY", "api-key")
    monkeypatch.setenv("MPESA_PUBLIC_KEY", public_key_b64)
    return transport


def test_session_command(stub, tmp_path) -> None:
    stub.queue(session_payload("S1"))

    assert cli.run_cli(["--env-file", str(tmp_path / "none"), "session"]) == 0
    assert stub.paths == ["getSession/"]


def test_push_command(stub, tmp_path) -> None:
    stub.queue(session_payload("S1"))
    stub.queue(transaction_payload())

    code = cli.run_cli(
        [
            "--env-file", str(tmp_path / "none"),
            "push",
            "--msisdn", "0712345678",
            "--amount", "100",
            "--reference", "T1",
            "--description", "Shoes",
        ]
    )

    assert code == 0
    payload = stub.requests[-1].payload
    assert payload["input_CustomerMSISDN"] == "255712345678"
    assert payload["input_ThirdPartyConversationID"]


def test_disburse_business_error_exits_non_zero(stub, tmp_path) -> None:
    stub.queue(session_payload("S1"))
    stub.responses.append(ok(transaction_payload(output_error="Insufficient balance")))

    code = cli.run_cli(
        [
            "--env-file", str(tmp_path / "none"),
            "disburse",
            "--msisdn", "255712345678",
            "--amount", "5",
            "--reference", "T2",
            "--third-party-id", "tp-2",
            "--description", "Refund",
        ]
    )

    assert code == 1
    assert stub.paths == ["getSession/", "b2cPayment/"]


def test_invalid_configuration(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv("MPESA_API_KEY", raising=False)
    monkeypatch.delenv("MPESA_PUBLIC_KEY", raising=False)

    assert cli.run_cli(["--env-file", str(tmp_path / "none"), "session"]) == 1


def test_override_syntax_is_validated() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--set", "novalue", "session"])
