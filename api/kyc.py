"""KYC endpoints: token check and signed document upload."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from kyc.storage import sign_upload
from kyc.tokens import require_order

kyc_api = Blueprint("kyc", __name__)


@kyc_api.get("/api/kyc/verify")
def verify() -> Any:
    order = require_order(request.args.get("token"))
    return jsonify({"ok": True, **order})


@kyc_api.post("/api/kyc/sign-upload")
def sign() -> Any:
    return jsonify(sign_upload(request.get_json(force=True, silent=True)))
