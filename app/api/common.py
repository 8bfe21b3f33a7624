"""Helpers shared by the checkout routers."""

from typing import Any

from fastapi import Request

from app.config import settings
from app.engine.confirmation import ConfirmationResult


def return_url(request: Request, path: str = "/") -> str:
    """Absolute URL the processor sends the customer back to after a redirect."""
    base = settings.public_base_url or str(request.base_url)
    return base.rstrip("/") + path


def confirmation_body(result: ConfirmationResult, intent_key: str) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": True,
        intent_key: result.intent,
        "requiresAction": result.requires_action,
    }
    if result.next_action_url:
        body["nextActionUrl"] = result.next_action_url
    return body
