"""Contract delivery: store the PDF and email it to the customer."""
from __future__ import annotations

import smtplib
import time
from email.message import EmailMessage
from typing import Any, Dict, Mapping, Optional

from core import config
from core.errors import ApiError
from core.log import get_logger
from core.storage import storage_bucket

logger = get_logger(__name__)

SUBJECTS = {"es": "Tu contrato Ofinova", "ko": "Ofinova 계약서"}
BODIES = {
    "es": "Hola {name},\n\nAdjuntamos tu contrato de domiciliación.\nTambién puedes descargarlo aquí: {url}\n\nOfinova Madrid",
    "ko": "{name}님 안녕하세요,\n\n주소지 서비스 계약서를 첨부합니다.\n다운로드 링크: {url}\n\nOfinova Madrid",
}


def contract_filename(ts_ms: Optional[int] = None) -> str:
    ts = ts_ms if ts_ms is not None else int(time.time() * 1000)
    return f"contract-{ts}.pdf"


def store_contract(pdf: bytes, lead_id: str, filename: str) -> Dict[str, str]:
    """Upload to the contracts bucket and return a signed download URL."""
    bucket = config.CONTRACTS_BUCKET
    path = f"contracts/{lead_id or 'anon'}/{filename}"
    files = storage_bucket(bucket)
    files.upload(path, pdf, {"content-type": "application/pdf"})
    signed = files.create_signed_url(path, config.CONTRACT_URL_TTL_S) or {}
    url = signed.get("signedURL") or signed.get("signedUrl") or signed.get("signed_url") or ""
    return {"bucket": bucket, "path": path, "url": url}


def send_contract_email(to: str, pdf: bytes, filename: str, url: str, lang: str = "es", name: str = "") -> bool:
    """Send the contract as an attachment; False when SMTP is unavailable."""
    if not config.SMTP_HOST:
        logger.warning("[contracts] SMTP_HOST not configured, contract for %s not emailed", to)
        return False

    msg = EmailMessage()
    msg["Subject"] = SUBJECTS.get(lang, SUBJECTS["es"])
    msg["From"] = config.SMTP_FROM
    msg["To"] = to
    msg.set_content(BODIES.get(lang, BODIES["es"]).format(name=name or "", url=url))
    msg.add_attachment(pdf, maintype="application", subtype="pdf", filename=filename)

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=10) as s:
            s.starttls()
            if config.SMTP_USER:
                s.login(config.SMTP_USER, config.SMTP_PASS)
            s.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("[contracts] SMTP send to %s failed: %s", to, exc)
        return False
    return True


def deliver_contract(pdf: bytes, data: Mapping[str, Any], lang: str) -> Dict[str, Any]:
    email = str(data.get("email") or "").strip()
    if not email:
        raise ApiError(400, error="email is required for delivery")

    filename = contract_filename()
    stored = store_contract(pdf, str(data.get("lead_id") or ""), filename)
    emailed = send_contract_email(
        email, pdf, filename, stored["url"], lang=lang, name=str(data.get("customer_name") or "")
    )
    logger.info("[contracts] delivered", extra={"path": stored["path"], "emailed": emailed})
    return {"ok": True, **stored, "emailed": emailed}


__all__ = ["contract_filename", "store_contract", "send_contract_email", "deliver_contract"]
