"""HTTP tests for the checkout endpoints."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.engine.errors import ProcessorError
from app.main import app
from app.providers import get_processor
from app.providers.mock_provider import MockPaymentProcessor
from app.providers.stripe_provider import StripePaymentProcessor


@pytest.mark.asyncio
async def test_config(http, monkeypatch):
    from app.config import settings

    monkeypatch.setattr(settings, "stripe_publishable_key", "pk_test_123")
    response = await http.get("/config")

    assert response.status_code == 200
    assert response.json() == {"publishableKey": "pk_test_123", "testEmail": settings.test_billing_email}


class TestCreatePaymentIntent:
    @pytest.mark.asyncio
    async def test_returns_secret_and_id(self, http, processor):
        response = await http.post("/create-payment-intent")

        assert response.status_code == 200
        body = response.json()
        assert body["paymentIntentId"] in processor.payment_intents
        assert body["clientSecret"].startswith(body["paymentIntentId"])

        _, params = processor.calls[0]
        assert params["amount"] == 42424
        assert params["currency"] == "inr"
        assert params["setup_future_usage"] == "off_session"

    @pytest.mark.asyncio
    async def test_processor_failure_is_500(self, http, processor):
        processor.fail_operations.add("create_payment_intent")
        response = await http.post("/create-payment-intent")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Mock processor error during create_payment_intent",
            "type": "api_error",
        }


class TestConfirmPayment:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["paymentIntentId", "paymentMethodId", "mandateData"])
    async def test_missing_field_is_400_without_processor_call(self, http, processor, mandate_data, missing):
        body = {"paymentIntentId": "pi_1", "paymentMethodId": "pm_1", "mandateData": mandate_data}
        del body[missing]

        response = await http.post("/confirm-payment", json=body)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields: paymentIntentId, paymentMethodId, or mandateData",
        }
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_empty_body_is_400(self, http, processor):
        response = await http.post("/confirm-payment")
        assert response.status_code == 400
        assert processor.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"paymentIntentId": 123},
        {"mandateData": "yes"},
        {"paymentMethodId": ["pm_1"]},
    ])
    async def test_wrong_types_are_400_without_processor_call(self, http, processor, mandate_data, overrides):
        body = {"paymentIntentId": "pi_1", "paymentMethodId": "pm_1", "mandateData": mandate_data, **overrides}

        response = await http.post("/confirm-payment", json=body)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields: paymentIntentId, paymentMethodId, or mandateData",
        }
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_invalid_json_is_400(self, http, processor):
        response = await http.post(
            "/confirm-payment",
            content="{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields: paymentIntentId, paymentMethodId, or mandateData",
        }
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_empty_mandate_object_reaches_processor(self, http, processor):
        created = (await http.post("/create-payment-intent")).json()

        response = await http.post("/confirm-payment", json={
            "paymentIntentId": created["paymentIntentId"],
            "paymentMethodId": "pm_upi",
            "mandateData": {},
        })

        assert response.status_code == 200
        operation, params = processor.calls[-1]
        assert operation == "confirm_payment_intent"
        assert params["mandate_data"] == {}

    @pytest.mark.asyncio
    async def test_upi_requires_action(self, http, processor, mandate_data):
        created = (await http.post("/create-payment-intent")).json()

        response = await http.post("/confirm-payment", json={
            "paymentIntentId": created["paymentIntentId"],
            "paymentMethodId": "pm_upi",
            "mandateData": mandate_data,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["requiresAction"] is True
        assert "nextActionUrl" not in body
        assert body["paymentIntent"]["status"] == "requires_action"

        _, params = processor.calls[-1]
        assert params["return_url"] == "http://testserver/"

    @pytest.mark.asyncio
    async def test_processor_error_echoes_type(self, http, mandate_data):
        response = await http.post("/confirm-payment", json={
            "paymentIntentId": "pi_unknown",
            "paymentMethodId": "pm_upi",
            "mandateData": mandate_data,
        })
        assert response.status_code == 500
        assert response.json()["type"] == "invalid_request_error"


class TestConfirmPaymentClientSide:
    @pytest.mark.asyncio
    async def test_missing_token_is_400(self, http, processor):
        response = await http.post("/confirm-payment-client-side", json={"paymentIntentId": "pi_1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: paymentIntentId or confirmationTokenId"
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_confirms_with_token(self, http, processor):
        created = (await http.post("/create-payment-intent")).json()
        response = await http.post("/confirm-payment-client-side", json={
            "paymentIntentId": created["paymentIntentId"],
            "confirmationTokenId": "ctoken_123",
        })

        assert response.status_code == 200
        assert response.json()["requiresAction"] is True
        _, params = processor.calls[-1]
        assert params["confirmation_token"] == "ctoken_123"
        assert params["return_url"] == "http://testserver/success"


class TestSetupIntent:
    @pytest.mark.asyncio
    async def test_create_returns_all_ids(self, http, processor):
        response = await http.post("/create-setup-intent")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"clientSecret", "setupIntentId", "customerId"}
        assert processor.operations() == ["create_customer", "create_setup_intent"]

    @pytest.mark.asyncio
    async def test_confirm_missing_fields(self, http, processor):
        response = await http.post("/confirm-setup-intent", json={"setupIntentId": "seti_1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: setupIntentId, paymentMethodId, or mandateData"
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_confirm_non_object_mandate_is_400(self, http, processor):
        response = await http.post("/confirm-setup-intent", json={
            "setupIntentId": "seti_1",
            "paymentMethodId": "pm_1",
            "mandateData": "yes",
        })
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: setupIntentId, paymentMethodId, or mandateData"}
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_confirm_then_status(self, http, processor, mandate_data):
        created = (await http.post("/create-setup-intent")).json()
        confirmed = await http.post("/confirm-setup-intent", json={
            "setupIntentId": created["setupIntentId"],
            "paymentMethodId": "pm_upi",
            "mandateData": mandate_data,
        })
        assert confirmed.json()["setupIntent"]["status"] == "requires_action"
        _, params = processor.calls[-1]
        assert params["return_url"] == "http://testserver/setup-success"

        status = await http.get("/setup-intent-status", params={"client_secret": created["clientSecret"]})
        assert status.status_code == 200
        assert status.json() == {
            "id": created["setupIntentId"],
            "status": "succeeded",
            "paymentMethod": "pm_upi",
        }


class TestChargeSavedMethod:
    @pytest.mark.asyncio
    async def test_missing_customer_is_400(self, http, processor):
        response = await http.post("/charge-saved-method", json={"paymentMethodId": "pm_1"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: customerId or paymentMethodId"
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_non_numeric_amount_is_400(self, http, processor):
        response = await http.post("/charge-saved-method", json={
            "customerId": "cus_1",
            "paymentMethodId": "pm_1",
            "amount": "lots",
        })
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: customerId or paymentMethodId"}
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_amount_defaults_to_10000(self, http):
        response = await http.post("/charge-saved-method", json={"customerId": "cus_1", "paymentMethodId": "pm_1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["paymentIntent"]["amount"] == 10000
        assert body["paymentIntent"]["status"] == "succeeded"


class TestIntentStatus:
    @pytest.mark.asyncio
    async def test_invalid_secret_is_400(self, http, processor):
        response = await http.get("/payment-intent-status", params={"client_secret": "garbage"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid client secret"}
        assert processor.calls == []

    @pytest.mark.asyncio
    async def test_unconfirmed_intent(self, http):
        created = (await http.post("/create-payment-intent")).json()
        response = await http.get("/payment-intent-status", params={"client_secret": created["clientSecret"]})
        assert response.json()["status"] == "requires_payment_method"


class TestReturnPages:
    @pytest.mark.asyncio
    async def test_plain_success_page(self, http):
        response = await http.get("/success")
        assert response.status_code == 200
        assert "Payment Successful!" in response.text

    @pytest.mark.asyncio
    async def test_setup_success_page(self, http):
        response = await http.get("/setup-success")
        assert "Payment Method Saved!" in response.text

    @pytest.mark.asyncio
    async def test_redirect_return_checks_status(self, http):
        created = (await http.post("/create-payment-intent")).json()
        response = await http.get("/success", params={"payment_intent_client_secret": created["clientSecret"]})

        assert response.status_code == 200
        assert "Payment failed. Please try again." in response.text

    @pytest.mark.asyncio
    async def test_redirect_return_with_bad_secret(self, http):
        response = await http.get("/setup-success", params={"setup_intent_client_secret": "seti_x_secret_y"})
        assert response.status_code == 200
        assert "Failed to verify setup status" in response.text

    @pytest.mark.asyncio
    async def test_processing_return(self, processor, http, mandate_data):
        processor.status_script = ("processing", "processing")
        created = (await http.post("/create-payment-intent")).json()
        await http.post("/confirm-payment", json={
            "paymentIntentId": created["paymentIntentId"],
            "paymentMethodId": "pm_upi",
            "mandateData": mandate_data,
        })

        response = await http.get("/success", params={"payment_intent_client_secret": created["clientSecret"]})
        assert "Your payment is processing. Please wait..." in response.text


def test_mock_processor_defaults():
    processor = MockPaymentProcessor(latency_ms=0)
    assert processor.name == "mock_processor"
    assert processor.calls == []


class TestMissingStripeKey:
    @pytest_asyncio.fixture
    async def keyless_http(self):
        app.dependency_overrides[get_processor] = lambda: StripePaymentProcessor(api_key="")
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            yield client
        app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_processor_call_is_authentication_error(self):
        with pytest.raises(ProcessorError) as exc_info:
            await StripePaymentProcessor(api_key="").create_customer("someone@example.com")
        assert exc_info.value.error_type == "authentication_error"

    @pytest.mark.asyncio
    async def test_create_intent_returns_json_500(self, keyless_http):
        response = await keyless_http.post("/create-payment-intent")

        assert response.status_code == 500
        assert response.json() == {
            "error": "No API key provided. Set STRIPE_SECRET_KEY in your environment.",
            "type": "authentication_error",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path,heading", [
        ("/success", "Payment Successful!"),
        ("/setup-success", "Payment Method Saved!"),
    ])
    async def test_plain_pages_still_render(self, keyless_http, path, heading):
        response = await keyless_http.get(path)
        assert response.status_code == 200
        assert heading in response.text

    @pytest.mark.asyncio
    async def test_redirect_return_reports_lookup_failure(self, keyless_http):
        response = await keyless_http.get("/success", params={"payment_intent_client_secret": "pi_1_secret_x"})
        assert response.status_code == 200
        assert "Failed to verify payment status" in response.text
