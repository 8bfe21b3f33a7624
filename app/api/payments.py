"""
PaymentIntent endpoints.

POST /create-payment-intent        — Create a PaymentIntent with UPI mandate options.
POST /confirm-payment              — Server-side confirm with a PaymentMethod + mandate data.
POST /confirm-payment-client-side  — Confirm with a ConfirmationToken built in the browser.
POST /charge-saved-method          — Off-session charge against a saved mandate.
GET  /payment-intent-status        — Current status, looked up by client secret.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from app.api.common import confirmation_body, return_url
from app.engine.charge import charge_saved_method
from app.engine.confirmation import confirm_payment, confirm_payment_with_token
from app.engine.intents import create_payment_intent
from app.engine.status import fetch_intent_status
from app.engine.validation import (
    CHARGE_SAVED_METHOD_MESSAGE,
    CONFIRM_PAYMENT_MESSAGE,
    CONFIRM_WITH_TOKEN_MESSAGE,
    require,
)
from app.models.enums import IntentKind
from app.providers import PaymentProcessor, get_processor

router = APIRouter(tags=["payments"])


class ConfirmPaymentRequest(BaseModel):
    payment_intent_id: Optional[str] = Field(None, alias="paymentIntentId")
    payment_method_id: Optional[str] = Field(None, alias="paymentMethodId")
    mandate_data: Optional[dict] = Field(None, alias="mandateData")

    model_config = {"populate_by_name": True}


class ConfirmWithTokenRequest(BaseModel):
    payment_intent_id: Optional[str] = Field(None, alias="paymentIntentId")
    confirmation_token_id: Optional[str] = Field(None, alias="confirmationTokenId")

    model_config = {"populate_by_name": True}


class ChargeSavedMethodRequest(BaseModel):
    customer_id: Optional[str] = Field(None, alias="customerId")
    payment_method_id: Optional[str] = Field(None, alias="paymentMethodId")
    amount: Optional[int] = None  # paise

    model_config = {"populate_by_name": True}


class IntentStatusResponse(BaseModel):
    id: str
    status: str
    paymentMethod: Optional[str] = None


@router.post("/create-payment-intent")
async def create_payment_intent_route(processor: PaymentProcessor = Depends(get_processor)):
    """Create a PaymentIntent that also saves the UPI mandate (setup_future_usage=off_session)."""
    created = await create_payment_intent(processor)
    return {"clientSecret": created.client_secret, "paymentIntentId": created.intent_id}


@router.post("/confirm-payment")
async def confirm_payment_route(
    request: Request,
    body: Optional[ConfirmPaymentRequest] = None,
    processor: PaymentProcessor = Depends(get_processor),
):
    """
    Confirm a PaymentIntent server-side.

    The browser has already validated the form and created the PaymentMethod;
    for UPI the result is normally ``requires_action`` with no redirect URL and
    the browser polls until the customer approves the mandate.
    """
    body = body or ConfirmPaymentRequest()
    require({
        "paymentIntentId": body.payment_intent_id,
        "paymentMethodId": body.payment_method_id,
        "mandateData": body.mandate_data,
    }, CONFIRM_PAYMENT_MESSAGE)

    result = await confirm_payment(
        processor,
        body.payment_intent_id,
        body.payment_method_id,
        body.mandate_data,
        return_url(request, "/"),
    )
    return confirmation_body(result, "paymentIntent")


@router.post("/confirm-payment-client-side")
async def confirm_payment_client_side_route(
    request: Request,
    body: Optional[ConfirmWithTokenRequest] = None,
    processor: PaymentProcessor = Depends(get_processor),
):
    """Confirm a PaymentIntent with a ConfirmationToken (carries payment method and mandate)."""
    body = body or ConfirmWithTokenRequest()
    require({
        "paymentIntentId": body.payment_intent_id,
        "confirmationTokenId": body.confirmation_token_id,
    }, CONFIRM_WITH_TOKEN_MESSAGE)

    result = await confirm_payment_with_token(
        processor,
        body.payment_intent_id,
        body.confirmation_token_id,
        return_url(request, "/success"),
    )
    return confirmation_body(result, "paymentIntent")


@router.post("/charge-saved-method")
async def charge_saved_method_route(
    body: Optional[ChargeSavedMethodRequest] = None,
    processor: PaymentProcessor = Depends(get_processor),
):
    """Charge a previously saved UPI payment method off-session."""
    body = body or ChargeSavedMethodRequest()
    require({
        "customerId": body.customer_id,
        "paymentMethodId": body.payment_method_id,
    }, CHARGE_SAVED_METHOD_MESSAGE)

    intent = await charge_saved_method(processor, body.customer_id, body.payment_method_id, body.amount)
    return {"success": True, "paymentIntent": intent}


@router.get("/payment-intent-status", response_model=IntentStatusResponse)
async def payment_intent_status_route(
    client_secret: str = Query("", description="PaymentIntent client secret"),
    processor: PaymentProcessor = Depends(get_processor),
):
    snapshot = await fetch_intent_status(processor, IntentKind.PAYMENT, client_secret)
    return IntentStatusResponse(id=snapshot.id, status=snapshot.status, paymentMethod=snapshot.payment_method)
