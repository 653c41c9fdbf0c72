"""Stripe webhook receiver (raw body, signature checked)."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from billing.events import handle_event, verify_event
from core.log import get_logger

logger = get_logger(__name__)

webhook_api = Blueprint("webhook", __name__)


@webhook_api.post("/api/webhook")
def stripe_webhook() -> Any:
    event = verify_event(request.get_data(), request.headers.get("Stripe-Signature"))
    try:
        handle_event(event)
    except Exception:
        logger.exception("[webhook] handler error")
        return jsonify({"error": "Webhook handler error"}), 500
    return jsonify({"received": True})
