"""
Server-side confirmation of Payment and Setup intents.

The browser tokenizes the UPI details (a PaymentMethod or a ConfirmationToken)
and posts the id here. We forward it to the processor's confirm operation
together with the mandate acceptance and a return URL, then report whether the
intent still needs customer action.

For UPI the processor answers ``requires_action`` with an
``upi_await_notification`` next action and the caller polls for the outcome.
A ``redirect_to_url`` next action is passed through for methods that need one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.audit.logger import log_event
from app.models.enums import IntentStatus
from app.providers.base import Payload, PaymentProcessor

logger = logging.getLogger("upi_autopay.confirmation")


@dataclass
class ConfirmationResult:
    """Outcome of a confirm call, in the shape the browser expects."""

    intent: Payload
    requires_action: bool
    next_action_url: Optional[str] = None


def next_action_url(intent: Payload) -> Optional[str]:
    """Extract ``next_action.redirect_to_url.url`` if the processor sent one."""
    next_action = intent.get("next_action") or {}
    redirect = next_action.get("redirect_to_url") or {}
    return redirect.get("url")


def _result(intent: Payload, action: str) -> ConfirmationResult:
    requires_action = intent.get("status") == IntentStatus.REQUIRES_ACTION.value
    next_action: Any = intent.get("next_action")

    logger.info("%s confirmed. Status: %s", intent.get("object", "intent"), intent.get("status"))
    log_event(action, intent_id=intent.get("id"), details={
        "status": intent.get("status"),
        "requires_action": requires_action,
        "next_action": next_action.get("type") if isinstance(next_action, dict) else None,
    })
    return ConfirmationResult(
        intent=intent,
        requires_action=requires_action,
        next_action_url=next_action_url(intent),
    )


async def confirm_payment(
    processor: PaymentProcessor,
    intent_id: str,
    payment_method_id: str,
    mandate_data: Payload,
    return_url: str,
) -> ConfirmationResult:
    """Confirm a PaymentIntent with a browser-created PaymentMethod."""
    intent = await processor.confirm_payment_intent(intent_id, {
        "payment_method": payment_method_id,
        "mandate_data": mandate_data,
        "return_url": return_url,
    })
    return _result(intent, "payment_intent_confirmed")


async def confirm_payment_with_token(
    processor: PaymentProcessor,
    intent_id: str,
    confirmation_token_id: str,
    return_url: str,
) -> ConfirmationResult:
    """
    Confirm a PaymentIntent with a ConfirmationToken.

    The token already carries the payment method data and mandate acceptance.
    """
    intent = await processor.confirm_payment_intent(intent_id, {
        "confirmation_token": confirmation_token_id,
        "return_url": return_url,
    })
    return _result(intent, "payment_intent_confirmed_with_token")


async def confirm_setup_intent(
    processor: PaymentProcessor,
    intent_id: str,
    payment_method_id: str,
    mandate_data: Payload,
    return_url: str,
) -> ConfirmationResult:
    intent = await processor.confirm_setup_intent(intent_id, {
        "payment_method": payment_method_id,
        "mandate_data": mandate_data,
        "return_url": return_url,
    })
    return _result(intent, "setup_intent_confirmed")
