"""Re-export all models so Base.metadata sees them."""

from paid_users.db.models.paid_user import UNKNOWN_CUSTOMER_ID, PaidUser

__all__ = [
    "PaidUser",
    "UNKNOWN_CUSTOMER_ID",
]
