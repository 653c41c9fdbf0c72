"""Signed upload URLs for KYC documents."""
from __future__ import annotations

import time
from numbers import Real
from typing import Any, Dict, Mapping, Optional

from core import config
from core.errors import ApiError
from core.log import get_logger
from core.storage import storage_bucket
from kyc.tokens import require_order

logger = get_logger(__name__)

EXTENSIONS = {"application/pdf": "pdf", "image/jpeg": "jpg", "image/png": "png"}
KINDS = ("id", "company")


def ext_from_mime(mime: str) -> str:
    return EXTENSIONS.get(mime, "bin")


def upload_path(order_id: str, kind: str, mime: str, ts_ms: Optional[int] = None) -> str:
    safe_kind = kind if kind in KINDS else "id"
    ts = ts_ms if ts_ms is not None else int(time.time() * 1000)
    return f"orders/{order_id}/KYC_{order_id}_{safe_kind}_{ts}.{ext_from_mime(mime)}"


def validate_file_meta(body: Mapping[str, Any]) -> None:
    mime = body.get("mime")
    size = body.get("size")
    if not mime or isinstance(size, bool) or not isinstance(size, Real):
        raise ApiError(400, ok=False, reason="missing-file-meta")
    if mime not in config.KYC_ALLOWED_MIME:
        raise ApiError(415, ok=False, reason="unsupported-type", allowed=list(config.KYC_ALLOWED_MIME))
    if size > config.KYC_MAX_BYTES:
        raise ApiError(413, ok=False, reason="file-too-large", max=config.KYC_MAX_BYTES)


def sign_upload(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Check token and file metadata, then ask Supabase for an upload token."""
    if not isinstance(body, Mapping):
        raise ApiError(400, ok=False, reason="bad-json")
    if not body.get("token"):
        raise ApiError(400, ok=False, reason="missing-token")
    validate_file_meta(body)
    order = require_order(body.get("token"))

    path = upload_path(order["orderId"], str(body.get("kind") or "id"), body["mime"])
    bucket = config.KYC_BUCKET
    try:
        signed = storage_bucket(bucket).create_signed_upload_url(path)
    except ApiError:
        raise
    except Exception as exc:
        logger.exception("[kyc] signed upload url failed for %s", path)
        raise ApiError(500, ok=False, reason="sign-url-failed", detail=str(exc)) from exc

    upload_token = (signed or {}).get("token")
    if not upload_token:
        raise ApiError(500, ok=False, reason="sign-url-failed", detail="no upload token returned")

    logger.info("[kyc] upload signed", extra={"order_id": order["orderId"], "path": path})
    return {
        "ok": True,
        "bucket": bucket,
        "path": path,
        "uploadToken": upload_token,
        "signedUrl": signed.get("signed_url") or signed.get("signedUrl"),
        "max": config.KYC_MAX_BYTES,
        "allowed": list(config.KYC_ALLOWED_MIME),
    }


__all__ = ["ext_from_mime", "upload_path", "validate_file_meta", "sign_upload"]
