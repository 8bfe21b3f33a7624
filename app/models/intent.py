"""
Transient references to processor-owned objects.

Nothing here is persisted. Intents, customers and payment methods live at the
processor; these dataclasses only carry the fields this service reads.
"""

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_MANDATE_IP = "127.0.0.0"


@dataclass
class IntentSnapshot:
    """Point-in-time view of a PaymentIntent or SetupIntent."""

    id: str
    status: str
    client_secret: Optional[str] = None
    payment_method: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "IntentSnapshot":
        payment_method = payload.get("payment_method")
        # Expanded payment methods come back as objects
        if isinstance(payment_method, dict):
            payment_method = payment_method.get("id")
        return cls(
            id=payload["id"],
            status=payload["status"],
            client_secret=payload.get("client_secret"),
            payment_method=payment_method,
        )


@dataclass
class CreatedIntent:
    """Identifiers handed back to the browser after intent creation."""

    client_secret: str
    intent_id: str
    customer_id: Optional[str] = None


def build_mandate_data(user_agent: str, ip_address: str = DEFAULT_MANDATE_IP) -> dict:
    """Online customer-acceptance block required for UPI mandates."""
    return {
        "customer_acceptance": {
            "type": "online",
            "online": {
                "ip_address": ip_address,
                "user_agent": user_agent,
            },
        },
    }
