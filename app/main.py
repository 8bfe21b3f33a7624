"""
UPI Autopay Checkout — PaymentIntent/SetupIntent integration API.

Collects a recurring UPI mandate through three flows: client-side
confirmation, server-side confirmation, and setup-then-charge. All intent
state lives at the payment processor; this service creates intents, forwards
confirmations and reports statuses.

Start the server:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.config import router as config_router
from app.api.pages import router as pages_router
from app.api.payments import router as payments_router
from app.api.setup import router as setup_router
from app.config import settings
from app.engine.errors import InvalidRequestError, ProcessorError
from app.engine.validation import message_for_path

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("upi_autopay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report the processor backend on startup."""
    logger.info("Processor backend: %s", settings.processor_backend)
    if settings.processor_backend == "stripe" and not settings.stripe_secret_key:
        logger.warning("Make sure to set STRIPE_SECRET_KEY in your .env file")
    yield


app = FastAPI(
    title="UPI Autopay Checkout",
    description=(
        "Creates and confirms PaymentIntents and SetupIntents carrying UPI autopay "
        "mandates, charges saved mandates off-session, and exposes intent status "
        "for bounded client-side polling."
    ),
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Wrong types and unparseable JSON are reported like missing fields
    logger.info("Rejected body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": message_for_path(request.url.path)})


@app.exception_handler(ProcessorError)
async def processor_error_handler(request: Request, exc: ProcessorError):
    logger.error("Processor error on %s %s: %s", request.method, request.url.path, exc.message)
    content = {"error": exc.message}
    if exc.error_type:
        content["type"] = exc.error_type
    return JSONResponse(status_code=exc.status_code, content=content)


app.include_router(config_router)
app.include_router(payments_router)
app.include_router(setup_router)
app.include_router(pages_router)
