"""Stripe webhook verification and event logging.

Events are only logged; nothing is persisted or reconciled here.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import stripe

from core import config
from core.errors import ApiError, ConfigurationError
from core.log import get_logger

logger = get_logger(__name__)


def verify_event(payload: bytes, signature: Optional[str]) -> Any:
    """Return the verified event or raise a 400 ``ApiError``."""
    if not config.STRIPE_WEBHOOK_SECRET:
        raise ConfigurationError("Stripe webhook")
    try:
        return stripe.Webhook.construct_event(payload, signature or "", config.STRIPE_WEBHOOK_SECRET)
    except (ValueError, stripe.SignatureVerificationError) as exc:
        logger.warning("[webhook] signature verify failed: %s", exc)
        raise ApiError(400, error=f"Webhook Error: {exc}") from exc


def _get(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    try:
        return obj[key]
    except (KeyError, TypeError):
        return getattr(obj, key, default)


def _on_checkout_completed(obj: Any) -> Dict[str, Any]:
    email = _get(_get(obj, "customer_details"), "email")
    logger.info("[webhook] checkout.session.completed %s %s", _get(obj, "id"), email)
    return {"id": _get(obj, "id"), "email": email}


def _on_payment_succeeded(obj: Any) -> Dict[str, Any]:
    logger.info(
        "[webhook] payment_intent.succeeded %s %s %s",
        _get(obj, "id"), _get(obj, "amount"), _get(obj, "currency"),
    )
    return {"id": _get(obj, "id"), "amount": _get(obj, "amount"), "currency": _get(obj, "currency")}


def _on_charge_refunded(obj: Any) -> Dict[str, Any]:
    logger.info("[webhook] charge.refunded %s %s", _get(obj, "id"), _get(obj, "amount_refunded"))
    return {"id": _get(obj, "id"), "amount_refunded": _get(obj, "amount_refunded")}


HANDLERS: Dict[str, Callable[[Any], Dict[str, Any]]] = {
    "checkout.session.completed": _on_checkout_completed,
    "payment_intent.succeeded": _on_payment_succeeded,
    "charge.refunded": _on_charge_refunded,
}


def handle_event(event: Any) -> Optional[Dict[str, Any]]:
    """Dispatch a verified event; returns the logged summary or None."""
    event_type = _get(event, "type")
    handler = HANDLERS.get(event_type)
    if handler is None:
        logger.info("[webhook] unhandled event: %s", event_type)
        return None
    return handler(_get(_get(event, "data"), "object"))


__all__ = ["verify_event", "handle_event", "HANDLERS"]
