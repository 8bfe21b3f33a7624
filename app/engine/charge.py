"""Off-session charge against a saved UPI mandate."""

import logging
from typing import Optional

from app.audit.logger import log_event
from app.engine.intents import CURRENCY
from app.providers.base import Payload, PaymentProcessor

logger = logging.getLogger("upi_autopay.charge")

DEFAULT_CHARGE_AMOUNT = 10000  # 100 INR


async def charge_saved_method(
    processor: PaymentProcessor,
    customer_id: str,
    payment_method_id: str,
    amount: Optional[int] = None,
) -> Payload:
    """
    Create and confirm a PaymentIntent off-session in one call.

    A missing or zero amount falls back to DEFAULT_CHARGE_AMOUNT. Declines are
    not retried: the intent comes back with whatever status the processor
    assigned (succeeded, requires_action, ...).
    """
    charge_amount = amount or DEFAULT_CHARGE_AMOUNT
    intent = await processor.create_payment_intent({
        "amount": charge_amount,
        "currency": CURRENCY,
        "customer": customer_id,
        "payment_method": payment_method_id,
        "off_session": True,
        "confirm": True,
    })

    logger.info("Off-session payment created. Status: %s", intent.get("status"))
    log_event("off_session_charge", intent_id=intent.get("id"), details={
        "customer": customer_id,
        "amount": charge_amount,
        "status": intent.get("status"),
    })
    return intent
