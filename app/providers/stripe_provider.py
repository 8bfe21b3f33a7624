"""Stripe adapter: runs the blocking SDK calls in a worker thread."""

import asyncio
import logging
from typing import Any, Callable

import stripe
from stripe import StripeError

from app.engine.errors import ProcessorError
from app.providers.base import Payload, PaymentProcessor

logger = logging.getLogger("upi_autopay.stripe")

MISSING_KEY_MESSAGE = "No API key provided. Set STRIPE_SECRET_KEY in your environment."


class StripePaymentProcessor(PaymentProcessor):
    """Thin asynchronous wrapper around the Stripe SDK."""

    def __init__(self, *, api_key: str) -> None:
        # An empty key is only rejected when a call is made
        self._api_key = api_key
        if api_key:
            stripe.api_key = api_key

    @property
    def name(self) -> str:
        return "stripe"

    async def _call(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Payload:
        if not self._api_key:
            logger.warning("Stripe %s skipped: no API key configured", operation)
            raise ProcessorError(MISSING_KEY_MESSAGE, error_type="authentication_error")

        def _run() -> Payload:
            stripe.api_key = self._api_key
            return self._normalise_response(func(*args, **kwargs))

        try:
            return await asyncio.to_thread(_run)
        except StripeError as exc:
            error_type = getattr(exc.error, "type", None) if exc.error else None
            logger.warning("Stripe %s failed: %s", operation, exc.user_message or exc)
            raise ProcessorError(
                exc.user_message or str(exc),
                error_type=error_type or type(exc).__name__,
            ) from exc

    def _normalise_response(self, obj: Any) -> Payload:
        """Convert a StripeObject into a plain dict."""
        if not hasattr(obj, "to_dict"):
            raise ProcessorError(f"Unexpected Stripe response type: {type(obj).__name__}")
        serialized = obj.to_dict()
        if not isinstance(serialized, dict):
            raise ProcessorError("Stripe to_dict() returned non-dict payload")
        if not isinstance(serialized.get("id"), str):
            raise ProcessorError("Stripe response missing 'id' field")
        return serialized

    async def create_customer(self, email: str) -> Payload:
        return await self._call("customer.create", stripe.Customer.create, email=email)

    async def create_payment_intent(self, params: Payload) -> Payload:
        return await self._call("payment_intent.create", stripe.PaymentIntent.create, **params)

    async def confirm_payment_intent(self, intent_id: str, params: Payload) -> Payload:
        return await self._call("payment_intent.confirm", stripe.PaymentIntent.confirm, intent_id, **params)

    async def retrieve_payment_intent(self, intent_id: str) -> Payload:
        return await self._call("payment_intent.retrieve", stripe.PaymentIntent.retrieve, intent_id)

    async def create_setup_intent(self, params: Payload) -> Payload:
        return await self._call("setup_intent.create", stripe.SetupIntent.create, **params)

    async def confirm_setup_intent(self, intent_id: str, params: Payload) -> Payload:
        return await self._call("setup_intent.confirm", stripe.SetupIntent.confirm, intent_id, **params)

    async def retrieve_setup_intent(self, intent_id: str) -> Payload:
        return await self._call("setup_intent.retrieve", stripe.SetupIntent.retrieve, intent_id)
