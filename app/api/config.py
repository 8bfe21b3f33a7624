"""
Browser configuration endpoint.

GET /config — Publishable key and the test billing email for mandate testing.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

router = APIRouter(tags=["config"])


class ConfigResponse(BaseModel):
    publishableKey: str
    testEmail: str


@router.get("/config", response_model=ConfigResponse)
async def get_config():
    return ConfigResponse(
        publishableKey=settings.stripe_publishable_key,
        testEmail=settings.test_billing_email,
    )
