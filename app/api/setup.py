"""
SetupIntent endpoints (save a UPI mandate without charging).

POST /create-setup-intent   — Create a Customer and a SetupIntent for it.
POST /confirm-setup-intent  — Server-side confirm with a PaymentMethod + mandate data.
GET  /setup-intent-status   — Current status, looked up by client secret.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from app.api.common import confirmation_body, return_url
from app.api.payments import IntentStatusResponse
from app.config import settings
from app.engine.confirmation import confirm_setup_intent
from app.engine.intents import create_setup_intent
from app.engine.status import fetch_intent_status
from app.engine.validation import CONFIRM_SETUP_MESSAGE, require
from app.models.enums import IntentKind
from app.providers import PaymentProcessor, get_processor

router = APIRouter(tags=["setup"])


class ConfirmSetupRequest(BaseModel):
    setup_intent_id: Optional[str] = Field(None, alias="setupIntentId")
    payment_method_id: Optional[str] = Field(None, alias="paymentMethodId")
    mandate_data: Optional[dict] = Field(None, alias="mandateData")

    model_config = {"populate_by_name": True}


@router.post("/create-setup-intent")
async def create_setup_intent_route(processor: PaymentProcessor = Depends(get_processor)):
    created = await create_setup_intent(processor, settings.test_billing_email)
    return {
        "clientSecret": created.client_secret,
        "setupIntentId": created.intent_id,
        "customerId": created.customer_id,
    }


@router.post("/confirm-setup-intent")
async def confirm_setup_intent_route(
    request: Request,
    body: Optional[ConfirmSetupRequest] = None,
    processor: PaymentProcessor = Depends(get_processor),
):
    body = body or ConfirmSetupRequest()
    require({
        "setupIntentId": body.setup_intent_id,
        "paymentMethodId": body.payment_method_id,
        "mandateData": body.mandate_data,
    }, CONFIRM_SETUP_MESSAGE)

    result = await confirm_setup_intent(
        processor,
        body.setup_intent_id,
        body.payment_method_id,
        body.mandate_data,
        return_url(request, "/setup-success"),
    )
    return confirmation_body(result, "setupIntent")


@router.get("/setup-intent-status", response_model=IntentStatusResponse)
async def setup_intent_status_route(
    client_secret: str = Query("", description="SetupIntent client secret"),
    processor: PaymentProcessor = Depends(get_processor),
):
    snapshot = await fetch_intent_status(processor, IntentKind.SETUP, client_secret)
    return IntentStatusResponse(id=snapshot.id, status=snapshot.status, paymentMethod=snapshot.payment_method)
