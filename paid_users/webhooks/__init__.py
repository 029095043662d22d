"""Stripe webhook pipeline: raw body reader, signature verifier, event dispatcher."""

from paid_users.webhooks.dispatcher import DispatchResult, dispatch_event
from paid_users.webhooks.reader import read_raw_body
from paid_users.webhooks.verification import construct_event

__all__ = [
    "DispatchResult",
    "construct_event",
    "dispatch_event",
    "read_raw_body",
]
