"""Typed views over the Stripe event payloads this service reads."""

from typing import Any

from pydantic import BaseModel, ConfigDict

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class EventData(BaseModel):
    model_config = ConfigDict(frozen=True)

    object: dict[str, Any]


class WebhookEvent(BaseModel):
    """A verified Stripe event envelope. Only built by construct_event."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    type: str
    data: EventData


class CustomerDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str | None = None


class CheckoutSession(BaseModel):
    """The ``data.object`` of a checkout.session.completed event."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    # A customer id, or the full customer object when the event was expanded
    customer: str | dict[str, Any] | None = None
    customer_details: CustomerDetails | None = None

    @property
    def customer_id(self) -> str | None:
        if isinstance(self.customer, dict):
            return self.customer.get("id") or None
        return self.customer or None

    @property
    def customer_email(self) -> str | None:
        if self.customer_details is None:
            return None
        return self.customer_details.email or None
