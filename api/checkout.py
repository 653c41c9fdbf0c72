"""Checkout endpoints: domiciliation plans and the mail add-on."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from billing.checkout import create_checkout_session, create_mail_checkout

checkout_api = Blueprint("checkout", __name__)


@checkout_api.post("/api/create-checkout-session")
def create_session() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(create_checkout_session(body))


@checkout_api.post("/api/create-mail-checkout")
def create_mail_session() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(create_mail_checkout(body))
