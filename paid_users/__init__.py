"""Stripe checkout webhook that grants paid-user entitlement."""
