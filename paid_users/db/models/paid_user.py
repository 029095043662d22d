"""PaidUser model — one entitlement row per customer email."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String

from paid_users.db.base import Base

UNKNOWN_CUSTOMER_ID = "unknown"


class PaidUser(Base):
    __tablename__ = "paid_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Always stored lower-cased; the unique constraint is the upsert conflict target
    email = Column(String, unique=True, nullable=False, index=True)
    stripe_customer_id = Column(String(255), nullable=False, default=UNKNOWN_CUSTOMER_ID)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
