"""
Presence checks for request bodies.

A field counts as missing when it is absent, null, an empty string, zero or
false. Objects and lists pass through even when empty; the processor decides
whether their contents are acceptable. Each check returns a structured result
so routes can reject the request before any processor call.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.engine.errors import InvalidRequestError

CONFIRM_PAYMENT_MESSAGE = "Missing required fields: paymentIntentId, paymentMethodId, or mandateData"
CONFIRM_WITH_TOKEN_MESSAGE = "Missing required fields: paymentIntentId or confirmationTokenId"
CONFIRM_SETUP_MESSAGE = "Missing required fields: setupIntentId, paymentMethodId, or mandateData"
CHARGE_SAVED_METHOD_MESSAGE = "Missing required fields: customerId or paymentMethodId"

# Body-parse failures on these routes report the same message as a missing field
MESSAGES_BY_PATH = {
    "/confirm-payment": CONFIRM_PAYMENT_MESSAGE,
    "/confirm-payment-client-side": CONFIRM_WITH_TOKEN_MESSAGE,
    "/confirm-setup-intent": CONFIRM_SETUP_MESSAGE,
    "/charge-saved-method": CHARGE_SAVED_METHOD_MESSAGE,
}
INVALID_BODY_MESSAGE = "Invalid request body"


@dataclass
class ValidationResult:
    """Result of a presence check."""

    valid: bool
    missing: list[str] = field(default_factory=list)
    message: str = ""


def is_missing(value: Any) -> bool:
    """True for None, "", 0 and False; containers never count as missing."""
    if value is None or value is False:
        return True
    if isinstance(value, (str, int, float)):
        return not value
    return False


def check_required(fields: Mapping[str, Any], message: str) -> ValidationResult:
    """
    Check that every named field carries a value.

    Args:
        fields: Field name (as the client sends it) → value.
        message: Fixed error message reported when anything is missing.

    Returns:
        ValidationResult listing the missing field names, in input order.
    """
    missing = [name for name, value in fields.items() if is_missing(value)]
    if missing:
        return ValidationResult(valid=False, missing=missing, message=message)
    return ValidationResult(valid=True)


def require(fields: Mapping[str, Any], message: str) -> None:
    """Raise InvalidRequestError unless every field is present."""
    result = check_required(fields, message)
    if not result.valid:
        raise InvalidRequestError(result.message)


def message_for_path(path: str) -> str:
    """Error message for an unparseable body sent to ``path``."""
    return MESSAGES_BY_PATH.get(path.rstrip("/") or path, INVALID_BODY_MESSAGE)
