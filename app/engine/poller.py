"""
Bounded status polling for asynchronously resolved intents.

UPI payments and mandates settle out of band: after confirmation the intent
sits in ``requires_action`` (waiting for the customer to approve in their UPI
app) or ``processing`` until the processor hears back from the bank. The
poller re-reads the status at a fixed interval until it sees a terminal state
or runs out of attempts.

Rules per tick:
  - requires_action → sleep and retry
  - processing → report interim message, sleep and retry
  - succeeded → success
  - requires_payment_method → failure
  - anything else → failure, status reported verbatim
  - fetch raised → error, no further attempts

Exactly one fetch is in flight at a time. The attempt counter is the only
timeout: max_attempts fetches at most, no sleep after the last one.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from app.models.enums import IntentKind, IntentStatus, PollOutcome
from app.models.intent import IntentSnapshot

logger = logging.getLogger("upi_autopay.poller")

DEFAULT_MAX_ATTEMPTS = 40
DEFAULT_INTERVAL_MS = 3000
PAYMENT_SUCCESS_URL = "/success"

PENDING_STATUSES = {IntentStatus.REQUIRES_ACTION.value, IntentStatus.PROCESSING.value}

MESSAGES = {
    IntentKind.PAYMENT: {
        "succeeded": "Payment successful! Autopay has been set up.",
        "processing": "Payment is processing...",
        "failed": "Payment failed. Please try again.",
        "other": "Payment {status}",
        "error": "Failed to check payment status",
        "timed_out": "Payment confirmation timed out. Please check your payment status.",
    },
    IntentKind.SETUP: {
        "succeeded": "Payment method saved! Ready for future charges.",
        "processing": "Setup is processing...",
        "failed": "Setup failed. Please try again.",
        "other": "Setup {status}",
        "error": "Failed to check setup status",
        "timed_out": "Setup confirmation timed out. Please check your status.",
    },
}

FetchStatus = Callable[[], Awaitable[IntentSnapshot]]
StatusCallback = Callable[[IntentSnapshot, str], None]


@dataclass
class PollResult:
    """How a polling (or confirmation) sequence ended."""

    outcome: PollOutcome
    status: Optional[str]
    attempts: int
    message: str
    snapshot: Optional[IntentSnapshot] = None
    redirect_to: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is PollOutcome.SUCCEEDED


def resolve_status(
    snapshot: IntentSnapshot,
    kind: IntentKind,
    attempts: int = 0,
) -> Optional[PollResult]:
    """
    Map an observed status to a terminal result.

    Returns None while the status is still pending.
    """
    messages = MESSAGES[kind]
    status = snapshot.status

    if status in PENDING_STATUSES:
        return None

    if status == IntentStatus.SUCCEEDED.value:
        return PollResult(
            outcome=PollOutcome.SUCCEEDED,
            status=status,
            attempts=attempts,
            message=messages["succeeded"],
            snapshot=snapshot,
            redirect_to=PAYMENT_SUCCESS_URL if kind is IntentKind.PAYMENT else None,
        )

    if status == IntentStatus.REQUIRES_PAYMENT_METHOD.value:
        message = messages["failed"]
    else:
        message = messages["other"].format(status=status)
    return PollResult(
        outcome=PollOutcome.FAILED,
        status=status,
        attempts=attempts,
        message=message,
        snapshot=snapshot,
    )


async def poll_intent_status(
    fetch: FetchStatus,
    *,
    kind: IntentKind = IntentKind.PAYMENT,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    on_status: Optional[StatusCallback] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> PollResult:
    """
    Poll an intent until it reaches a terminal status or attempts run out.

    Args:
        fetch: Async callable returning the intent's current snapshot.
        kind: Payment or setup; selects the user-facing wording.
        max_attempts: Upper bound on fetch calls.
        interval_ms: Fixed delay between fetches.
        on_status: Called with (snapshot, interim message) while processing.
        sleep: Injected for tests.

    Returns:
        PollResult with outcome SUCCEEDED, FAILED, ERROR or TIMED_OUT.
    """
    messages = MESSAGES[kind]
    last: Optional[IntentSnapshot] = None
    attempts = 0

    while attempts < max_attempts:
        attempts += 1
        logger.debug("Polling attempt %d/%d...", attempts, max_attempts)

        try:
            last = await fetch()
        except Exception as e:
            logger.error("Polling error on attempt %d: %s", attempts, e)
            return PollResult(
                outcome=PollOutcome.ERROR,
                status=last.status if last else None,
                attempts=attempts,
                message=messages["error"],
                snapshot=last,
            )

        logger.info("Current status: %s", last.status)
        result = resolve_status(last, kind, attempts)
        if result is not None:
            return result

        if last.status == IntentStatus.PROCESSING.value and on_status is not None:
            on_status(last, messages["processing"])

        if attempts < max_attempts:
            await sleep(interval_ms / 1000)

    logger.warning("Gave up after %d attempts; last status %s", attempts, last.status if last else None)
    return PollResult(
        outcome=PollOutcome.TIMED_OUT,
        status=last.status if last else None,
        attempts=attempts,
        message=messages["timed_out"],
        snapshot=last,
    )
