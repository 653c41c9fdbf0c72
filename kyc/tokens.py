"""KYC access tokens.

A token is handed to the customer after checkout and unlocks the document
upload step for exactly one order. Tokens are timed signatures, so the
verifier needs no datastore.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from core import config
from core.errors import ApiError, ConfigurationError
from core.log import get_logger

logger = get_logger(__name__)

SALT = "ofinova-kyc-upload"

DEMO_PREFILL = {"orderId": "demo-123", "email": "demo@ofinova.es", "name": "Demo Client"}


def _serializer() -> URLSafeTimedSerializer:
    if not config.KYC_TOKEN_SECRET:
        raise ConfigurationError("KYC token secret")
    return URLSafeTimedSerializer(config.KYC_TOKEN_SECRET, salt=SALT)


def issue_token(order_id: str, email: str = "", name: str = "") -> str:
    if not order_id:
        raise ValueError("order_id required")
    return _serializer().dumps({"orderId": order_id, "email": email, "name": name})


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the order prefill for a valid token, None otherwise."""
    if config.KYC_DEMO_TOKEN and token == config.KYC_DEMO_TOKEN:
        return dict(DEMO_PREFILL)
    if not config.KYC_TOKEN_SECRET:
        logger.warning("[kyc] KYC_TOKEN_SECRET not set; only the demo token is accepted")
        return None
    try:
        data = _serializer().loads(token, max_age=config.KYC_TOKEN_MAX_AGE_S)
    except SignatureExpired:
        logger.info("[kyc] expired token presented")
        return None
    except BadSignature:
        return None
    if not isinstance(data, dict) or not data.get("orderId"):
        return None
    return {
        "orderId": str(data["orderId"]),
        "email": data.get("email", ""),
        "name": data.get("name", ""),
    }


def require_order(token: Any) -> Dict[str, Any]:
    """Verify ``token`` or raise the KYC-shaped 400/401 error."""
    token = str(token or "").strip()
    if not token:
        raise ApiError(400, ok=False, reason="missing-token")
    order = verify_token(token)
    if order is None:
        raise ApiError(401, ok=False, reason="invalid-token")
    return order


__all__ = ["issue_token", "verify_token", "require_order", "DEMO_PREFILL"]
