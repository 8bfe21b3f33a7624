"""
Checkout client: drives the three UPI autopay flows over the HTTP API.

This is the browser's side of the integration: it creates intents, posts
confirmations, and, when the processor reports a pending UPI state, polls the
status endpoints with the bounded poller until the mandate resolves.

Flows:
  - run_server_side_flow: PaymentMethod id + mandate data confirmed by the server
  - run_client_side_flow: ConfirmationToken confirmed by the server
  - run_setup_flow: save the mandate via SetupIntent, optionally charge it
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.engine.poller import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_MAX_ATTEMPTS,
    MESSAGES,
    PENDING_STATUSES,
    PollResult,
    StatusCallback,
    poll_intent_status,
    resolve_status,
)
from app.models.enums import IntentKind, IntentStatus, PollOutcome
from app.models.intent import IntentSnapshot, build_mandate_data

logger = logging.getLogger("upi_autopay.client")

DEFAULT_USER_AGENT = "upi-autopay-client/0.1"


class CheckoutError(Exception):
    """Non-2xx response from the checkout API."""

    def __init__(self, message: str, status_code: int, error_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type


@dataclass
class SetupFlowResult:
    """Outcome of saving a mandate, plus the ids needed to charge it later."""

    poll: PollResult
    customer_id: str
    setup_intent_id: str
    payment_method_id: Optional[str] = None
    charge: Optional[dict] = None


class CheckoutClient:
    """Async HTTP client for the checkout API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        http: Optional[httpx.AsyncClient] = None,
        poll_interval_ms: int = DEFAULT_INTERVAL_MS,
        poll_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        on_status: Optional[StatusCallback] = None,
        timeout: float = 30.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._poll_interval_ms = poll_interval_ms
        self._poll_max_attempts = poll_max_attempts
        self._on_status = on_status

    async def __aenter__(self) -> "CheckoutClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._http.request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            raise CheckoutError(
                body.get("error") or f"Request to {path} failed",
                status_code=response.status_code,
                error_type=body.get("type"),
            )
        return body

    # -- API calls ---------------------------------------------------------

    async def get_config(self) -> dict[str, Any]:
        return await self._request("GET", "/config")

    async def create_payment_intent(self) -> dict[str, Any]:
        return await self._request("POST", "/create-payment-intent")

    async def confirm_payment(
        self,
        payment_intent_id: str,
        payment_method_id: str,
        mandate_data: dict,
    ) -> dict[str, Any]:
        return await self._request("POST", "/confirm-payment", json={
            "paymentIntentId": payment_intent_id,
            "paymentMethodId": payment_method_id,
            "mandateData": mandate_data,
        })

    async def confirm_payment_with_token(self, payment_intent_id: str, confirmation_token_id: str) -> dict[str, Any]:
        return await self._request("POST", "/confirm-payment-client-side", json={
            "paymentIntentId": payment_intent_id,
            "confirmationTokenId": confirmation_token_id,
        })

    async def create_setup_intent(self) -> dict[str, Any]:
        return await self._request("POST", "/create-setup-intent")

    async def confirm_setup_intent(
        self,
        setup_intent_id: str,
        payment_method_id: str,
        mandate_data: dict,
    ) -> dict[str, Any]:
        return await self._request("POST", "/confirm-setup-intent", json={
            "setupIntentId": setup_intent_id,
            "paymentMethodId": payment_method_id,
            "mandateData": mandate_data,
        })

    async def charge_saved_method(
        self,
        customer_id: str,
        payment_method_id: str,
        amount: Optional[int] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"customerId": customer_id, "paymentMethodId": payment_method_id}
        if amount is not None:
            body["amount"] = amount
        return await self._request("POST", "/charge-saved-method", json=body)

    async def _fetch_status(self, path: str, client_secret: str) -> IntentSnapshot:
        body = await self._request("GET", path, params={"client_secret": client_secret})
        return IntentSnapshot(
            id=body["id"],
            status=body["status"],
            client_secret=client_secret,
            payment_method=body.get("paymentMethod"),
        )

    async def fetch_payment_status(self, client_secret: str) -> IntentSnapshot:
        return await self._fetch_status("/payment-intent-status", client_secret)

    async def fetch_setup_status(self, client_secret: str) -> IntentSnapshot:
        return await self._fetch_status("/setup-intent-status", client_secret)

    # -- Polling -----------------------------------------------------------

    async def await_payment(self, client_secret: str) -> PollResult:
        return await poll_intent_status(
            lambda: self.fetch_payment_status(client_secret),
            kind=IntentKind.PAYMENT,
            max_attempts=self._poll_max_attempts,
            interval_ms=self._poll_interval_ms,
            on_status=self._on_status,
        )

    async def await_setup(self, client_secret: str) -> PollResult:
        return await poll_intent_status(
            lambda: self.fetch_setup_status(client_secret),
            kind=IntentKind.SETUP,
            max_attempts=self._poll_max_attempts,
            interval_ms=self._poll_interval_ms,
            on_status=self._on_status,
        )

    # -- Flows -------------------------------------------------------------

    async def _settle(self, confirmation: dict[str, Any], intent_key: str, kind: IntentKind) -> PollResult:
        """Decide what a confirm response means: redirect, poll, or done."""
        intent = confirmation[intent_key]
        snapshot = IntentSnapshot.from_payload(intent)

        if confirmation.get("requiresAction") and confirmation.get("nextActionUrl"):
            logger.info("Redirect required: %s", confirmation["nextActionUrl"])
            return PollResult(
                outcome=PollOutcome.REDIRECT_REQUIRED,
                status=snapshot.status,
                attempts=0,
                message="Redirecting to complete authorization",
                snapshot=snapshot,
                redirect_to=confirmation["nextActionUrl"],
            )

        if snapshot.status in PENDING_STATUSES:
            logger.info("%s intent %s pending (%s), starting to poll", kind.value, snapshot.id, snapshot.status)
            if snapshot.status == IntentStatus.PROCESSING.value and self._on_status is not None:
                self._on_status(snapshot, MESSAGES[kind]["processing"])
            if kind is IntentKind.SETUP:
                return await self.await_setup(intent["client_secret"])
            return await self.await_payment(intent["client_secret"])

        return resolve_status(snapshot, kind)

    async def run_server_side_flow(
        self,
        payment_method_id: str,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> PollResult:
        created = await self.create_payment_intent()
        logger.info("PaymentIntent created: %s", created["paymentIntentId"])
        confirmation = await self.confirm_payment(
            created["paymentIntentId"],
            payment_method_id,
            build_mandate_data(user_agent),
        )
        return await self._settle(confirmation, "paymentIntent", IntentKind.PAYMENT)

    async def run_client_side_flow(self, confirmation_token_id: str) -> PollResult:
        created = await self.create_payment_intent()
        logger.info("PaymentIntent created: %s", created["paymentIntentId"])
        confirmation = await self.confirm_payment_with_token(created["paymentIntentId"], confirmation_token_id)
        return await self._settle(confirmation, "paymentIntent", IntentKind.PAYMENT)

    async def run_setup_flow(
        self,
        payment_method_id: str,
        user_agent: str = DEFAULT_USER_AGENT,
        charge_amount: Optional[int] = None,
        charge: bool = False,
    ) -> SetupFlowResult:
        """
        Save a UPI mandate, then optionally charge it off-session.

        The charge only runs when the setup succeeded and ``charge`` is set.
        """
        created = await self.create_setup_intent()
        logger.info("SetupIntent created: %s (customer %s)", created["setupIntentId"], created["customerId"])
        confirmation = await self.confirm_setup_intent(
            created["setupIntentId"],
            payment_method_id,
            build_mandate_data(user_agent),
        )
        poll = await self._settle(confirmation, "setupIntent", IntentKind.SETUP)

        result = SetupFlowResult(
            poll=poll,
            customer_id=created["customerId"],
            setup_intent_id=created["setupIntentId"],
        )
        if poll.outcome is not PollOutcome.SUCCEEDED:
            return result

        result.payment_method_id = (poll.snapshot and poll.snapshot.payment_method) or payment_method_id
        if charge:
            response = await self.charge_saved_method(result.customer_id, result.payment_method_id, charge_amount)
            result.charge = response["paymentIntent"]
            if result.charge.get("status") != IntentStatus.SUCCEEDED.value:
                logger.warning("Off-session charge ended in %s", result.charge.get("status"))
        return result
