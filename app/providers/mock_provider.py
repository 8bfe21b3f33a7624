"""
In-memory payment processor for local runs and tests.

Simulates the parts of the processor this service touches:
  - Configurable latency (default from settings)
  - Scripted status timelines: after confirmation, each retrieve advances the
    intent one step along ``status_script`` until the script runs out
  - UPI await-notification ``next_action`` while an intent requires action
  - Injected failures per operation, raised as ProcessorError
  - Realistic-looking ids and client secrets
"""

import asyncio
import copy
import random
import time
import uuid
from collections import deque
from typing import Iterable, Optional

from app.config import settings
from app.engine.errors import ProcessorError
from app.models.enums import IntentStatus
from app.providers.base import Payload, PaymentProcessor

DEFAULT_STATUS_SCRIPT = (IntentStatus.REQUIRES_ACTION.value, IntentStatus.SUCCEEDED.value)

CONFIRMABLE_STATUSES = {
    IntentStatus.REQUIRES_PAYMENT_METHOD.value,
    IntentStatus.REQUIRES_CONFIRMATION.value,
    IntentStatus.REQUIRES_ACTION.value,
}


def _token(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:24]}"


class MockPaymentProcessor(PaymentProcessor):
    """
    Processor double that keeps Payment/Setup intents in dictionaries.

    Every call is recorded in ``calls`` as ``(operation, params)`` so tests can
    assert what would have been sent to the real processor.
    """

    def __init__(
        self,
        status_script: Optional[Iterable[str]] = None,
        charge_status: str = IntentStatus.SUCCEEDED.value,
        redirect_url: Optional[str] = None,
        fail_operations: Optional[Iterable[str]] = None,
        latency_ms: Optional[int] = None,
    ):
        self.status_script = tuple(status_script or DEFAULT_STATUS_SCRIPT)
        self.charge_status = charge_status
        self.redirect_url = redirect_url
        self.fail_operations = set(fail_operations or ())
        self._latency_ms = latency_ms if latency_ms is not None else settings.mock_latency_ms

        self.customers: dict[str, Payload] = {}
        self.payment_intents: dict[str, Payload] = {}
        self.setup_intents: dict[str, Payload] = {}
        self.calls: list[tuple[str, Payload]] = []
        self._timelines: dict[str, deque] = {}

    @property
    def name(self) -> str:
        return "mock_processor"

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]

    async def _enter(self, operation: str, params: Payload) -> None:
        self.calls.append((operation, copy.deepcopy(params)))

        if self._latency_ms > 0:
            jitter = random.uniform(0.5, 1.5)
            await asyncio.sleep(self._latency_ms * jitter / 1000)

        if operation in self.fail_operations:
            raise ProcessorError(
                f"Mock processor error during {operation}",
                error_type="api_error",
            )

    def _set_status(self, intent: Payload, status: str) -> None:
        intent["status"] = status
        if status != IntentStatus.REQUIRES_ACTION.value:
            intent["next_action"] = None
        elif self.redirect_url:
            intent["next_action"] = {
                "type": "redirect_to_url",
                "redirect_to_url": {
                    "url": self.redirect_url,
                    "return_url": intent.get("return_url"),
                },
            }
        else:
            intent["next_action"] = {
                "type": "upi_await_notification",
                "upi_await_notification": {"expires_at": int(time.time()) + 600},
            }

    def _lookup(self, store: dict[str, Payload], kind: str, intent_id: str) -> Payload:
        intent = store.get(intent_id)
        if intent is None:
            raise ProcessorError(f"No such {kind}: '{intent_id}'", error_type="invalid_request_error")
        return intent

    def _confirm(self, intent: Payload, kind: str, params: Payload) -> Payload:
        if intent["status"] not in CONFIRMABLE_STATUSES:
            raise ProcessorError(
                f"You cannot confirm this {kind} because it has a status of {intent['status']}.",
                error_type="invalid_request_error",
            )

        payment_method = params.get("payment_method")
        if not payment_method and params.get("confirmation_token"):
            payment_method = _token("pm")
        if not payment_method:
            raise ProcessorError(
                f"You must provide a payment method to confirm this {kind}.",
                error_type="invalid_request_error",
            )

        intent["payment_method"] = payment_method
        intent["return_url"] = params.get("return_url")
        if params.get("mandate_data"):
            intent["mandate"] = _token("mandate")

        timeline = deque(self.status_script)
        self._set_status(intent, timeline.popleft())
        self._timelines[intent["id"]] = timeline
        return copy.deepcopy(intent)

    def _advance(self, intent: Payload) -> Payload:
        timeline = self._timelines.get(intent["id"])
        if timeline:
            self._set_status(intent, timeline.popleft())
        return copy.deepcopy(intent)

    async def create_customer(self, email: str) -> Payload:
        await self._enter("create_customer", {"email": email})
        customer = {"id": _token("cus"), "object": "customer", "email": email}
        self.customers[customer["id"]] = customer
        return dict(customer)

    async def create_payment_intent(self, params: Payload) -> Payload:
        await self._enter("create_payment_intent", params)
        intent_id = _token("pi")
        intent = {
            "id": intent_id,
            "object": "payment_intent",
            "amount": params.get("amount"),
            "currency": params.get("currency"),
            "customer": params.get("customer"),
            "setup_future_usage": params.get("setup_future_usage"),
            "payment_method_options": params.get("payment_method_options"),
            "client_secret": f"{intent_id}_secret_{uuid.uuid4().hex[:16]}",
            "payment_method": params.get("payment_method"),
            "status": IntentStatus.REQUIRES_PAYMENT_METHOD.value,
            "next_action": None,
        }
        self.payment_intents[intent_id] = intent

        if params.get("confirm"):
            # Off-session charge: no customer interaction, single-step outcome
            if not params.get("customer") or not params.get("payment_method"):
                raise ProcessorError(
                    "Off-session confirmation requires a customer and payment_method.",
                    error_type="invalid_request_error",
                )
            self._set_status(intent, self.charge_status)

        return copy.deepcopy(intent)

    async def confirm_payment_intent(self, intent_id: str, params: Payload) -> Payload:
        await self._enter("confirm_payment_intent", {"id": intent_id, **params})
        intent = self._lookup(self.payment_intents, "payment_intent", intent_id)
        return self._confirm(intent, "PaymentIntent", params)

    async def retrieve_payment_intent(self, intent_id: str) -> Payload:
        await self._enter("retrieve_payment_intent", {"id": intent_id})
        intent = self._lookup(self.payment_intents, "payment_intent", intent_id)
        return self._advance(intent)

    async def create_setup_intent(self, params: Payload) -> Payload:
        await self._enter("create_setup_intent", params)
        customer_id = params.get("customer")
        if customer_id and customer_id not in self.customers:
            raise ProcessorError(f"No such customer: '{customer_id}'", error_type="invalid_request_error")

        intent_id = _token("seti")
        intent = {
            "id": intent_id,
            "object": "setup_intent",
            "customer": customer_id,
            "payment_method_types": params.get("payment_method_types"),
            "payment_method_options": params.get("payment_method_options"),
            "client_secret": f"{intent_id}_secret_{uuid.uuid4().hex[:16]}",
            "payment_method": None,
            "status": IntentStatus.REQUIRES_PAYMENT_METHOD.value,
            "next_action": None,
        }
        self.setup_intents[intent_id] = intent
        return copy.deepcopy(intent)

    async def confirm_setup_intent(self, intent_id: str, params: Payload) -> Payload:
        await self._enter("confirm_setup_intent", {"id": intent_id, **params})
        intent = self._lookup(self.setup_intents, "setup_intent", intent_id)
        return self._confirm(intent, "SetupIntent", params)

    async def retrieve_setup_intent(self, intent_id: str) -> Payload:
        await self._enter("retrieve_setup_intent", {"id": intent_id})
        intent = self._lookup(self.setup_intents, "setup_intent", intent_id)
        return self._advance(intent)
