"""Enumerations for the checkout domain model."""

from enum import Enum


class IntentStatus(str, Enum):
    """Lifecycle states reported by the processor for Payment/Setup intents."""

    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    REQUIRES_CAPTURE = "requires_capture"
    CANCELED = "canceled"
    SUCCEEDED = "succeeded"
    PAYMENT_FAILED = "payment_failed"


class IntentKind(str, Enum):
    """Which intent object a flow works with."""

    PAYMENT = "payment"
    SETUP = "setup"


class PollOutcome(str, Enum):
    """How a confirmation or polling sequence ended."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    ERROR = "error"
    REDIRECT_REQUIRED = "redirect_required"
