"""
Intent status lookup by client secret.

The browser only holds the client secret. The intent id is its prefix
(``pi_123_secret_abc`` → ``pi_123``); the secret itself must match the one the
processor returns, so a guessed id alone reveals nothing.
"""

import hmac

from app.engine.errors import InvalidRequestError
from app.models.enums import IntentKind
from app.models.intent import IntentSnapshot
from app.providers.base import PaymentProcessor

SECRET_SEPARATOR = "_secret_"
INVALID_SECRET_MESSAGE = "Invalid client secret"

_PREFIXES = {
    IntentKind.PAYMENT: "pi_",
    IntentKind.SETUP: "seti_",
}


def intent_id_from_secret(client_secret: str, kind: IntentKind = IntentKind.PAYMENT) -> str:
    """Return the intent id embedded in a client secret."""
    intent_id, separator, tail = (client_secret or "").partition(SECRET_SEPARATOR)
    if not separator or not tail or not intent_id.startswith(_PREFIXES[kind]):
        raise InvalidRequestError(INVALID_SECRET_MESSAGE)
    return intent_id


async def fetch_intent_status(
    processor: PaymentProcessor,
    kind: IntentKind,
    client_secret: str,
) -> IntentSnapshot:
    """Retrieve the current state of the intent the secret belongs to."""
    intent_id = intent_id_from_secret(client_secret, kind)
    if kind is IntentKind.SETUP:
        payload = await processor.retrieve_setup_intent(intent_id)
    else:
        payload = await processor.retrieve_payment_intent(intent_id)

    expected = str(payload.get("client_secret") or "")
    if not hmac.compare_digest(expected.encode(), client_secret.encode()):
        raise InvalidRequestError(INVALID_SECRET_MESSAGE)
    return IntentSnapshot.from_payload(payload)
