"""
Intent creation for the UPI autopay flows.

Two entry points:
  - create_payment_intent: one-off INR payment that also saves the UPI
    mandate for off-session reuse (setup_future_usage=off_session).
  - create_setup_intent: creates a Customer, then a SetupIntent that saves the
    mandate without charging.

Both attach the same mandate options: a maximum-amount mandate that expires one
year after creation. Processor errors propagate as ProcessorError unchanged.
"""

import logging
import time
from typing import Optional

from app.audit.logger import log_event
from app.models.intent import CreatedIntent
from app.providers.base import Payload, PaymentProcessor

logger = logging.getLogger("upi_autopay.intents")

PAYMENT_AMOUNT = 42424  # paise
CURRENCY = "inr"
MANDATE_MAX_AMOUNT = 100000  # 1000 INR ceiling per debit
MANDATE_TERM_SECONDS = 365 * 24 * 60 * 60

PAYMENT_MANDATE_DESCRIPTION = "Monthly subscription"
SETUP_MANDATE_DESCRIPTION = "Monthly autopay"


def mandate_options(description: str, now: Optional[float] = None) -> Payload:
    """UPI mandate options with a one-year end date (unix seconds)."""
    issued_at = int(now if now is not None else time.time())
    return {
        "upi": {
            "mandate_options": {
                "description": description,
                "amount": MANDATE_MAX_AMOUNT,
                "amount_type": "maximum",
                "end_date": issued_at + MANDATE_TERM_SECONDS,
            },
        },
    }


def payment_intent_params(now: Optional[float] = None) -> Payload:
    return {
        "amount": PAYMENT_AMOUNT,
        "currency": CURRENCY,
        "setup_future_usage": "off_session",
        "payment_method_options": mandate_options(PAYMENT_MANDATE_DESCRIPTION, now),
    }


def setup_intent_params(customer_id: str, now: Optional[float] = None) -> Payload:
    return {
        "customer": customer_id,
        "payment_method_types": ["upi"],
        "payment_method_options": mandate_options(SETUP_MANDATE_DESCRIPTION, now),
    }


async def create_payment_intent(processor: PaymentProcessor) -> CreatedIntent:
    """Create a PaymentIntent carrying the autopay mandate options."""
    intent = await processor.create_payment_intent(payment_intent_params())

    log_event("payment_intent_created", intent_id=intent["id"], details={
        "amount": PAYMENT_AMOUNT,
        "currency": CURRENCY,
        "processor": processor.name,
    })
    return CreatedIntent(client_secret=intent["client_secret"], intent_id=intent["id"])


async def create_setup_intent(processor: PaymentProcessor, email: str) -> CreatedIntent:
    """
    Create a Customer and a SetupIntent bound to it.

    The customer must exist first: the saved payment method is attached to it,
    and later off-session charges reference it.
    """
    customer = await processor.create_customer(email)
    logger.info("Customer created: %s", customer["id"])

    intent = await processor.create_setup_intent(setup_intent_params(customer["id"]))

    log_event("setup_intent_created", intent_id=intent["id"], details={
        "customer": customer["id"],
        "processor": processor.name,
    })
    return CreatedIntent(
        client_secret=intent["client_secret"],
        intent_id=intent["id"],
        customer_id=customer["id"],
    )
