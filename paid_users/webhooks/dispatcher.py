"""Routes verified Stripe events to the entitlement writer.

Exactly two outcomes per event: HANDLED for checkout.session.completed,
IGNORED for every other type. Events are not deduplicated by id; a redelivered
checkout lands on the same email row because the write is an upsert.
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from paid_users.db.models.paid_user import UNKNOWN_CUSTOMER_ID
from paid_users.services.entitlements import upsert_paid_user
from paid_users.webhooks.events import CHECKOUT_SESSION_COMPLETED, CheckoutSession, WebhookEvent

logger = structlog.get_logger(__name__)


class DispatchResult(str, Enum):
    HANDLED = "handled"
    IGNORED = "ignored"


@dataclass(frozen=True)
class PaidUserGrant:
    """The row a completed checkout entitles."""

    email: str
    stripe_customer_id: str


def extract_grant(session: CheckoutSession) -> PaidUserGrant | None:
    """Build the grant for a checkout session, or None when it carries no email."""
    email = session.customer_email
    if email is None:
        return None
    return PaidUserGrant(
        email=email.lower(),
        stripe_customer_id=session.customer_id or UNKNOWN_CUSTOMER_ID,
    )


async def _handle_checkout_completed(event: WebhookEvent) -> None:
    session = CheckoutSession.model_validate(event.data.object)
    grant = extract_grant(session)
    if grant is None:
        # A completed checkout without an email is not an error
        logger.info("checkout_completed_without_email", event_id=event.id, session_id=session.id)
        return

    await upsert_paid_user(grant.email, grant.stripe_customer_id)


async def dispatch_event(event: WebhookEvent) -> DispatchResult:
    """Run the write path for the one handled event type.

    Raises:
        StoreError: if the upsert fails
    """
    if event.type != CHECKOUT_SESSION_COMPLETED:
        logger.info("webhook_event_ignored", event_id=event.id, event_type=event.type)
        return DispatchResult.IGNORED

    await _handle_checkout_completed(event)
    return DispatchResult.HANDLED
