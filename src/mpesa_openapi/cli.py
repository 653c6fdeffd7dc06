"""
Command-line interface for exercising the M-Pesa OpenAPI client.
"""

from __future__ import annotations

import argparse
import logging
import uuid
from typing import Iterable, Sequence, Tuple

import requests

from .api import create_client
from .core.config import load_client_config
from .core.errors import ConfigError, MpesaError
from .core.models import PaymentRequest


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _add_payment_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--msisdn", required=True, help="Customer phone number")
    parser.add_argument("--amount", required=True, help="Amount in the market currency (e.g. 1500)")
    parser.add_argument("--reference", required=True, help="Transaction reference shown to the customer")
    parser.add_argument(
        "--third-party-id",
        default=None,
        help="Conversation id echoed back by the gateway (default: random)",
    )
    parser.add_argument("--description", required=True, help="Items description")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpesa-openapi",
        description="Call the M-Pesa OpenAPI gateway",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MPESA_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("session", help="Generate a new session id")
    _add_payment_arguments(commands.add_parser("push", help="Send a C2B single stage push payment"))
    _add_payment_arguments(commands.add_parser("disburse", help="Send a B2C disbursement"))
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config, session=requests.Session())
    logging.info("Using gateway at %s", client.base_path)

    try:
        if args.command == "session":
            response = client.session_id()
            logging.info("Session acquired (%s): %s", response.code, response.description)
            return 0

        request = PaymentRequest(
            third_party_id=args.third_party_id or uuid.uuid4().hex,
            reference=args.reference,
            amount=args.amount,
            msisdn=args.msisdn,
            description=args.description,
        )
        if args.command == "push":
            result = client.push_async(request)
        else:
            result = client.disburse(request)
    except MpesaError as exc:
        logging.error("%s request failed: %s", args.command, exc)
        return 1

    logging.info(
        "%s accepted (%s): transaction %s, conversation %s",
        args.command,
        result.code,
        result.transaction_id,
        result.conversation_id,
    )
    return 0


def main() -> None:
    raise SystemExit(run_cli())
