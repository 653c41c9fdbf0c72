"""Checkout metadata normalisation.

The landing page has shipped several form revisions, each naming the same
fields differently (``mail_plan`` vs ``mailPlan``, ``shipping.address`` vs
``mail_address`` ...). Everything is resolved here into one canonical set,
preferring the first non-blank candidate in alias order, then flattened
into Stripe's string-only metadata.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from core import config

# Stripe metadata limits
MAX_KEYS = 50
MAX_KEY_LEN = 40
MAX_VALUE_LEN = 500

LEAD_ID_KEYS = ("lead_id", "leadId", "orderId", "order_id")
MAIL_ENABLED_KEYS = ("mailEnabled", "mail_enabled")
MAIL_PLAN_KEYS = ("mail", "mail_plan", "mailPlan")
SHIPPING_ADDRESS_KEYS = ("shipping.address", "shipping_address", "mail_address", "address")
SHIPPING_NOTES_KEYS = ("shipping.notes", "shipping_notes", "mail_notes", "notes")
COMPANY_NAME_KEYS = ("company.name", "company_name", "razon_social", "company")
COMPANY_TAX_ID_KEYS = ("company.tax_id", "company.nif", "tax_id", "nif", "cif")
CUSTOMER_NAME_KEYS = ("customer_name", "name", "full_name")
PHONE_KEYS = ("phone", "telefono")

TRUTHY = {"1", "true", "yes", "on"}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def first_present(*candidates: Any) -> Any:
    """Return the first candidate that is neither None nor a blank string."""
    for value in candidates:
        if not _is_blank(value):
            return value
    return None


def lookup(mapping: Optional[Mapping[str, Any]], key: str) -> Any:
    """Resolve ``key`` in ``mapping``; dotted keys walk nested dicts."""
    if not isinstance(mapping, Mapping):
        return None
    if key in mapping:
        return mapping[key]
    node: Any = mapping
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def resolve(sources: Sequence[Optional[Mapping[str, Any]]], keys: Sequence[str], scalar: bool = False) -> Any:
    """First non-blank value across ``sources`` (in order) and ``keys`` (in order).

    With ``scalar=True`` nested objects are skipped, so ``company`` only
    matches when the form sent it as a plain string.
    """
    for source in sources:
        for key in keys:
            value = lookup(source, key)
            if scalar and isinstance(value, (dict, list)):
                continue
            if not _is_blank(value):
                return value
    return None


def to_int(value: Any, default: int = 0) -> int:
    """Integer part of ``value`` (``"6.0"`` gives 6), else ``default``."""
    try:
        return int(float(str(value if value is not None else "").strip()))
    except (ValueError, OverflowError):
        return default


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value if value is not None else "").strip().lower() in TRUTHY


def normalize_mail_plan(value: Any) -> str:
    text = str(value if value is not None else "").lower()
    if "lite" in text:
        return "lite"
    if "pro" in text:
        return "pro"
    return ""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return json.dumps(value, ensure_ascii=False)


def stringify_metadata(obj: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Flatten a mapping into Stripe metadata (string keys and values only)."""
    out: Dict[str, str] = {}
    for key, value in (obj or {}).items():
        if value is None:
            continue
        if len(out) >= MAX_KEYS:
            break
        name = str(key)[:MAX_KEY_LEN]
        # first writer wins when truncated names collide
        if name in out:
            continue
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        out[name] = text[:MAX_VALUE_LEN]
    return out


@dataclass
class CheckoutMetadata:
    """Canonical checkout fields extracted from a request body."""

    lead_id: str
    plan_id: str
    months: int
    mail_enabled: bool
    mail_plan: str
    mode: str
    shipping_address: str = ""
    shipping_notes: str = ""
    company_name: str = ""
    company_tax_id: str = ""
    customer_name: str = ""
    phone: str = ""
    extra: Optional[Dict[str, Any]] = None

    @property
    def is_subscription(self) -> bool:
        return self.mode == "subscription"

    def as_dict(self) -> Dict[str, Any]:
        """Canonical keys first, then the caller's metadata.

        Caller keys never replace a canonical key. Ordering matters: when
        Stripe's key limit is hit, the caller's trailing keys are dropped.
        """
        payload: Dict[str, Any] = {
            "lead_id": self.lead_id,
            "orderId": self.lead_id,
            "planId": self.plan_id,
            "months": self.months,
            "mailEnabled": "1" if self.mail_enabled else "0",
            "mailPlan": self.mail_plan,
            "mode": self.mode,
        }
        optional = {
            "shipping_address": self.shipping_address,
            "shipping_notes": self.shipping_notes,
            "company_name": self.company_name,
            "company_tax_id": self.company_tax_id,
            "customer_name": self.customer_name,
            "phone": self.phone,
        }
        payload.update({key: value for key, value in optional.items() if value})
        for key, value in (self.extra or {}).items():
            payload.setdefault(str(key), value)
        return payload

    def as_stripe_metadata(self) -> Dict[str, str]:
        return stringify_metadata(self.as_dict())


def normalize_checkout(body: Optional[Mapping[str, Any]], plan_id: str) -> CheckoutMetadata:
    """Build the canonical field set for ``plan_id`` from a loose request body.

    The nested ``metadata`` object wins over top-level body keys.
    """
    body = body if isinstance(body, Mapping) else {}
    metadata = body.get("metadata")
    metadata = dict(metadata) if isinstance(metadata, Mapping) else {}
    sources = (metadata, body)

    plan_months = config.PLAN_MONTHS.get(plan_id, 0)
    months = to_int(metadata.get("months"), plan_months)
    if months <= 0:
        months = plan_months

    mail_enabled = any(to_bool(resolve([src], [key])) for src in sources for key in MAIL_ENABLED_KEYS)
    mode = str(first_present(body.get("payMode"), metadata.get("payMode")) or "payment").strip().lower()

    return CheckoutMetadata(
        lead_id=_as_text(resolve(sources, LEAD_ID_KEYS, scalar=True)),
        plan_id=plan_id,
        months=months,
        mail_enabled=mail_enabled,
        mail_plan=normalize_mail_plan(resolve(sources, MAIL_PLAN_KEYS, scalar=True)),
        mode=mode,
        shipping_address=_as_text(resolve(sources, SHIPPING_ADDRESS_KEYS)),
        shipping_notes=_as_text(resolve(sources, SHIPPING_NOTES_KEYS)),
        company_name=_as_text(resolve(sources, COMPANY_NAME_KEYS, scalar=True)),
        company_tax_id=_as_text(resolve(sources, COMPANY_TAX_ID_KEYS, scalar=True)),
        customer_name=_as_text(resolve(sources, CUSTOMER_NAME_KEYS, scalar=True)),
        phone=_as_text(resolve(sources, PHONE_KEYS, scalar=True)),
        extra=metadata,
    )


__all__ = [
    "CheckoutMetadata",
    "first_present",
    "lookup",
    "resolve",
    "to_int",
    "to_bool",
    "normalize_mail_plan",
    "stringify_metadata",
    "normalize_checkout",
]
