from functools import lru_cache

from app.config import settings
from app.providers.base import PaymentProcessor
from app.providers.mock_provider import MockPaymentProcessor
from app.providers.stripe_provider import StripePaymentProcessor


@lru_cache
def get_processor() -> PaymentProcessor:
    """Processor used by the HTTP routes; overridden in tests."""
    if settings.processor_backend == "mock":
        return MockPaymentProcessor()
    return StripePaymentProcessor(api_key=settings.stripe_secret_key)


__all__ = ["PaymentProcessor", "MockPaymentProcessor", "StripePaymentProcessor", "get_processor"]
