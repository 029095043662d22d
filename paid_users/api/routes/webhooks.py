"""Stripe webhook route — verifies the event and grants paid-user entitlement."""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from paid_users.core.config import get_settings
from paid_users.core.exceptions import SignatureInvalid, StoreError
from paid_users.webhooks import construct_event, dispatch_event, read_raw_body

logger = structlog.get_logger(__name__)

router = APIRouter()

STRIPE_WEBHOOK_PATH = "/webhooks/stripe"


@router.post(STRIPE_WEBHOOK_PATH)
async def stripe_webhook(request: Request):
    """Handle a Stripe webhook: read raw body → verify → dispatch → respond."""
    settings = get_settings()

    body = await read_raw_body(request)
    sig_header = request.headers.get("stripe-signature")

    try:
        event = construct_event(
            body,
            sig_header,
            settings.stripe_webhook_secret,
            tolerance=settings.stripe_webhook_tolerance,
        )
    except SignatureInvalid as e:
        logger.warning("webhook_signature_invalid", error=e.message)
        return JSONResponse(status_code=400, content={"error": f"Webhook Error: {e.message}"})

    logger.info("webhook_received", event_id=event.id, event_type=event.type)

    try:
        result = await dispatch_event(event)
    except StoreError as e:
        logger.error("paid_user_store_error", event_id=event.id, error=e.message)
        return JSONResponse(status_code=500, content={"error": "Database error"})
    except Exception as e:
        logger.error(
            "paid_user_write_failed",
            event_id=event.id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": "Server error"})

    logger.info("webhook_processed", event_id=event.id, event_type=event.type, result=result.value)
    return {"received": True}
