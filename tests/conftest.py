"""Shared test fixtures for all test groups."""

import hashlib
import hmac
import json
import os
import time

# Set before any test module imports app code: get_settings() is cached on first use.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest


@pytest.fixture
def webhook_secret() -> str:
    return os.environ["STRIPE_WEBHOOK_SECRET"]


@pytest.fixture
def sign_payload(webhook_secret):
    """Factory building a Stripe-Signature header (v1 scheme) for a payload."""

    def _sign(payload: bytes, secret: str | None = None, timestamp: int | None = None) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        key = (secret or webhook_secret).encode("utf-8")
        signature = hmac.new(key, f"{ts}.".encode("utf-8") + payload, hashlib.sha256).hexdigest()
        return f"t={ts},v1={signature}"

    return _sign


@pytest.fixture
def make_stripe_event():
    """Factory serializing a minimal Stripe-style event envelope."""

    def _make(event_type: str, data: dict, event_id: str = "evt_test_001") -> bytes:
        return json.dumps(
            {
                "id": event_id,
                "object": "event",
                "type": event_type,
                "data": {"object": data},
            }
        ).encode("utf-8")

    return _make


@pytest.fixture
def checkout_session_data():
    """data.object of a checkout.session.completed event with email and customer."""
    return {
        "id": "cs_test_a1",
        "object": "checkout.session",
        "customer": "cus_test_123",
        "customer_details": {"email": "USER@Example.com", "name": "Test User"},
        "payment_status": "paid",
    }
