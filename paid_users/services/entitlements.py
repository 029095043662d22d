"""Entitlement writer — the single mutating operation of the webhook.

Upserts one ``paid_users`` row keyed on the lower-cased email. Atomicity and
the one-row-per-email invariant come from the store's ``ON CONFLICT`` upsert,
not from application-level locking.
"""

from datetime import UTC, datetime

import structlog
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from paid_users.core.exceptions import StoreError
from paid_users.db.base import get_session_factory
from paid_users.db.models.paid_user import PaidUser

logger = structlog.get_logger(__name__)

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _build_upsert(dialect_name: str, email: str, stripe_customer_id: str):
    """Build INSERT ... ON CONFLICT (email) DO UPDATE for the bound dialect."""
    insert = _INSERTS.get(dialect_name)
    if insert is None:
        raise StoreError(f"Upsert not supported for dialect '{dialect_name}'")

    stmt = insert(PaidUser).values(email=email, stripe_customer_id=stripe_customer_id)
    return stmt.on_conflict_do_update(
        index_elements=["email"],
        set_={
            "stripe_customer_id": stmt.excluded.stripe_customer_id,
            # onupdate defaults do not fire for ON CONFLICT updates
            "updated_at": datetime.now(UTC),
        },
    )


async def upsert_paid_user(email: str, stripe_customer_id: str) -> None:
    """Insert a paid user, or overwrite the customer id of the existing row.

    Args:
        email: Non-empty, lower-cased customer email (the unique key)
        stripe_customer_id: Stripe customer id, or the "unknown" placeholder

    Raises:
        ValueError: if email is empty
        StoreError: if the store rejects the write
    """
    if not email:
        raise ValueError("email is required")

    factory = get_session_factory()
    async with factory() as session:
        try:
            stmt = _build_upsert(session.bind.dialect.name, email, stripe_customer_id)
            await session.execute(stmt)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise StoreError(str(e)) from e

    logger.info("paid_user_upserted", email=email, stripe_customer_id=stripe_customer_id)
