"""
Minimal script that uses the public API to push a payment request to a handset.
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid

from mpesa_openapi import ConfigError, MpesaError, create_client, push_payment


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Push an M-Pesa payment request using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MPESA_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--msisdn", required=True, help="Customer phone number")
    parser.add_argument("--amount", default="10", help="Amount to request (default: 10)")
    parser.add_argument("--reference", default="T12344C", help="Transaction reference")
    parser.add_argument("--description", default="Example purchase", help="Items description")
    parser.add_argument(
        "--market",
        help="Override the market (TZN, GHA, LES, DRC, MOZ, EGY)",
    )
    parser.add_argument(
        "--platform",
        help="Override the platform (sandbox or openapi)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        client = create_client(env_file=args.env_file, market=args.market, platform=args.platform)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    logging.info("Pushing payment request through %s", client.base_path)

    try:
        session = client.session_id()
        logging.info("Session accepted: %s", session.description)
        response = push_payment(
            client=client,
            msisdn=args.msisdn,
            amount=args.amount,
            reference=args.reference,
            third_party_id=uuid.uuid4().hex,
            description=args.description,
        )
    except MpesaError as exc:
        logging.error("Payment request failed: %s", exc)
        return 1

    logging.info(
        "Payment accepted. Transaction %s, conversation %s",
        response.transaction_id,
        response.conversation_id,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
