"""
Confirmation pages the processor redirects customers back to.

GET /success        — Payment result page.
GET /setup-success  — Saved payment method page.

When the processor appends ``payment_intent_client_secret`` or
``setup_intent_client_secret`` to the return URL, the intent is re-read before
rendering so the page reflects the real status rather than assuming success.
"""

import html
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from app.engine.errors import ServiceError
from app.engine.status import fetch_intent_status
from app.models.enums import IntentKind, IntentStatus
from app.providers import PaymentProcessor, get_processor

logger = logging.getLogger("upi_autopay.pages")

router = APIRouter(tags=["pages"])

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <title>{title}</title>
    <link rel="stylesheet" href="/styles.css">
  </head>
  <body>
    <div class="container">
      <h1>{heading}</h1>
      <p>{message}</p>
      <a href="/">{link_text}</a>
    </div>
  </body>
</html>
"""

PAGES = {
    IntentKind.PAYMENT: {
        "title": "Payment Successful",
        "heading": "Payment Successful!",
        "message": "Your UPI payment has been confirmed and set up for autopay.",
        "link_text": "Make another payment",
        "processing": "Your payment is processing. Please wait...",
        "failed": "Payment failed. Please try again.",
        "other": "Payment status: {status}",
        "lookup_failed": "Failed to verify payment status",
    },
    IntentKind.SETUP: {
        "title": "Setup Successful",
        "heading": "Payment Method Saved!",
        "message": "Your UPI payment method has been saved for future autopay transactions.",
        "link_text": "Back to Home",
        "processing": "Setup is processing. Please wait...",
        "failed": "Setup failed. Please try again.",
        "other": "Setup status: {status}",
        "lookup_failed": "Failed to verify setup status",
    },
}


def render_page(kind: IntentKind, status: Optional[str] = None, lookup_failed: bool = False) -> str:
    page = PAGES[kind]
    heading = page["heading"]
    message = page["message"]

    if lookup_failed:
        heading, message = "Status Unavailable", page["lookup_failed"]
    elif status == IntentStatus.PROCESSING.value:
        heading, message = "Processing", page["processing"]
    elif status == IntentStatus.REQUIRES_PAYMENT_METHOD.value:
        heading, message = "Not Completed", page["failed"]
    elif status is not None and status != IntentStatus.SUCCEEDED.value:
        heading, message = "Status Update", page["other"].format(status=status)

    return PAGE_TEMPLATE.format(
        title=html.escape(page["title"]),
        heading=html.escape(heading),
        message=html.escape(message),
        link_text=html.escape(page["link_text"]),
    )


async def _returned_status(
    processor: PaymentProcessor,
    kind: IntentKind,
    client_secret: Optional[str],
) -> tuple[Optional[str], bool]:
    """(status, lookup_failed) for a redirect return; (None, False) on a plain visit."""
    if not client_secret:
        return None, False
    try:
        snapshot = await fetch_intent_status(processor, kind, client_secret)
    except ServiceError as e:
        logger.warning("Could not verify %s intent on return: %s", kind.value, e)
        return None, True
    logger.info("Returned from redirect, %s status: %s", kind.value, snapshot.status)
    return snapshot.status, False


@router.get("/success", response_class=HTMLResponse)
async def success_page(
    payment_intent_client_secret: Optional[str] = Query(None),
    processor: PaymentProcessor = Depends(get_processor),
):
    status, failed = await _returned_status(processor, IntentKind.PAYMENT, payment_intent_client_secret)
    return HTMLResponse(render_page(IntentKind.PAYMENT, status, failed))


@router.get("/setup-success", response_class=HTMLResponse)
async def setup_success_page(
    setup_intent_client_secret: Optional[str] = Query(None),
    processor: PaymentProcessor = Depends(get_processor),
):
    status, failed = await _returned_status(processor, IntentKind.SETUP, setup_intent_client_secret)
    return HTMLResponse(render_page(IntentKind.SETUP, status, failed))
