"""
Command-line driver for the checkout API.

Runs the same flows the checkout pages run, against a live server.

Run:
    python -m app.cli config
    python -m app.cli pay --payment-method pm_123
    python -m app.cli pay --confirmation-token ctoken_123
    python -m app.cli setup --payment-method pm_123 --charge --amount 5000
    python -m app.cli charge --customer cus_123 --payment-method pm_123
    python -m app.cli poll-payment pi_123_secret_abc
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Optional, Sequence

from app.client.checkout import CheckoutClient, CheckoutError
from app.config import settings
from app.engine.poller import PollResult


def _poll_to_dict(result: PollResult) -> dict[str, Any]:
    return {
        "outcome": result.outcome.value,
        "status": result.status,
        "attempts": result.attempts,
        "message": result.message,
        "intentId": result.snapshot.id if result.snapshot else None,
        "paymentMethod": result.snapshot.payment_method if result.snapshot else None,
        "redirectTo": result.redirect_to,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.cli", description="UPI autopay checkout driver")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--interval-ms", type=int, default=settings.poll_interval_ms)
    parser.add_argument("--max-attempts", type=int, default=settings.poll_max_attempts)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("config", help="Show publishable key and test email")

    pay = sub.add_parser("pay", help="Create and confirm a PaymentIntent, then poll")
    source = pay.add_mutually_exclusive_group(required=True)
    source.add_argument("--payment-method", help="Server-side confirmation with a PaymentMethod id")
    source.add_argument("--confirmation-token", help="Confirmation with a ConfirmationToken id")

    setup = sub.add_parser("setup", help="Save a UPI mandate with a SetupIntent")
    setup.add_argument("--payment-method", required=True)
    setup.add_argument("--charge", action="store_true", help="Charge the saved method afterwards")
    setup.add_argument("--amount", type=int, default=None, help="Charge amount in paise")

    charge = sub.add_parser("charge", help="Charge a saved payment method off-session")
    charge.add_argument("--customer", required=True)
    charge.add_argument("--payment-method", required=True)
    charge.add_argument("--amount", type=int, default=None, help="Amount in paise")

    poll_payment = sub.add_parser("poll-payment", help="Poll a PaymentIntent by client secret")
    poll_payment.add_argument("client_secret")

    poll_setup = sub.add_parser("poll-setup", help="Poll a SetupIntent by client secret")
    poll_setup.add_argument("client_secret")

    return parser


async def run(args: argparse.Namespace, client: CheckoutClient) -> dict[str, Any]:
    if args.command == "config":
        return await client.get_config()
    if args.command == "pay":
        if args.payment_method:
            result = await client.run_server_side_flow(args.payment_method)
        else:
            result = await client.run_client_side_flow(args.confirmation_token)
        return _poll_to_dict(result)
    if args.command == "setup":
        flow = await client.run_setup_flow(args.payment_method, charge_amount=args.amount, charge=args.charge)
        body = asdict(flow)
        body["poll"] = _poll_to_dict(flow.poll)
        return body
    if args.command == "charge":
        return await client.charge_saved_method(args.customer, args.payment_method, args.amount)
    if args.command == "poll-payment":
        return _poll_to_dict(await client.await_payment(args.client_secret))
    if args.command == "poll-setup":
        return _poll_to_dict(await client.await_setup(args.client_secret))
    raise ValueError(f"Unknown command: {args.command}")


async def _main(args: argparse.Namespace) -> int:
    def report(snapshot, message: str) -> None:
        print(message, file=sys.stderr)

    async with CheckoutClient(
        args.base_url,
        poll_interval_ms=args.interval_ms,
        poll_max_attempts=args.max_attempts,
        on_status=report,
    ) as client:
        try:
            output = await run(args, client)
        except CheckoutError as e:
            print(json.dumps({"error": e.message, "type": e.error_type, "status": e.status_code}, indent=2))
            return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
