"""Stripe webhook signature verification.

The only trust boundary of the service: everything downstream assumes the
event is authentic once construct_event returns.
"""

import stripe
from pydantic import ValidationError

from paid_users.core.exceptions import SignatureInvalid
from paid_users.webhooks.events import WebhookEvent

DEFAULT_TOLERANCE = 300


def construct_event(
    payload: bytes,
    sig_header: str | None,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
) -> WebhookEvent:
    """Verify a Stripe-Signature header over the raw payload and parse the event.

    Args:
        payload: Raw request body bytes, untouched
        sig_header: Value of the Stripe-Signature header
        secret: Endpoint signing secret (whsec_...)
        tolerance: Maximum age of the signed timestamp, in seconds

    Returns:
        The verified WebhookEvent

    Raises:
        SignatureInvalid: on a missing/malformed header, a mismatched or stale
            signature, or a payload that is not a Stripe event
    """
    if not secret:
        raise SignatureInvalid("No webhook signing secret configured")
    if not sig_header:
        raise SignatureInvalid("No stripe-signature header value was provided.")

    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        raise SignatureInvalid("Invalid payload: body is not valid UTF-8")

    try:
        stripe.WebhookSignature.verify_header(text, sig_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        raise SignatureInvalid(e.user_message or str(e))

    try:
        return WebhookEvent.model_validate_json(text)
    except ValidationError as e:
        raise SignatureInvalid(f"Invalid payload: {e.error_count()} validation error(s)")
