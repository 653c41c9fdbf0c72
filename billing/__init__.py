"""Stripe checkout, metadata normalisation and webhook handling."""

from .checkout import create_checkout_session, create_mail_checkout
from .events import handle_event, verify_event
from .metadata import CheckoutMetadata, normalize_checkout, stringify_metadata
from .notify import notify_automation

__all__ = [
    "create_checkout_session",
    "create_mail_checkout",
    "handle_event",
    "verify_event",
    "CheckoutMetadata",
    "normalize_checkout",
    "stringify_metadata",
    "notify_automation",
]
