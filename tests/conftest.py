"""Shared test fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.providers import get_processor
from app.providers.mock_provider import MockPaymentProcessor


@pytest.fixture
def processor():
    """In-memory processor: confirm → requires_action, next retrieve → succeeded."""
    return MockPaymentProcessor(latency_ms=0)


@pytest_asyncio.fixture
async def http(processor):
    """HTTP client wired to the app with the mock processor injected."""
    app.dependency_overrides[get_processor] = lambda: processor
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def mandate_data():
    return {
        "customer_acceptance": {
            "type": "online",
            "online": {"ip_address": "127.0.0.0", "user_agent": "pytest"},
        },
    }
