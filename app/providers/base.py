"""
Abstract payment processor interface.

The processor owns every intent, customer and mandate. Implementations return
the processor's JSON payload as a plain dict so callers can forward it to the
browser unchanged. The real adapter wraps the Stripe SDK; the mock keeps intents
in memory for local runs and tests.
"""

from abc import ABC, abstractmethod
from typing import Any

Payload = dict[str, Any]


class PaymentProcessor(ABC):
    """Abstract base class for payment processors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Processor identifier (e.g. 'stripe')."""
        ...

    @abstractmethod
    async def create_customer(self, email: str) -> Payload:
        ...

    @abstractmethod
    async def create_payment_intent(self, params: Payload) -> Payload:
        """
        Create a PaymentIntent.

        When params carry ``confirm=True`` the intent is confirmed in the same
        call and the returned status reflects the confirmation.

        Raises:
            ProcessorError: On any processor-side failure.
        """
        ...

    @abstractmethod
    async def confirm_payment_intent(self, intent_id: str, params: Payload) -> Payload:
        ...

    @abstractmethod
    async def retrieve_payment_intent(self, intent_id: str) -> Payload:
        ...

    @abstractmethod
    async def create_setup_intent(self, params: Payload) -> Payload:
        ...

    @abstractmethod
    async def confirm_setup_intent(self, intent_id: str, params: Payload) -> Payload:
        ...

    @abstractmethod
    async def retrieve_setup_intent(self, intent_id: str) -> Payload:
        ...
