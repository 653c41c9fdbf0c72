"""Stripe Checkout Session creation for the landing page."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

import stripe

from billing.metadata import CheckoutMetadata, normalize_checkout, stringify_metadata
from billing.notify import notify_automation
from core import config
from core.errors import ApiError, ConfigurationError
from core.log import get_logger

logger = get_logger(__name__)

SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def configure_stripe() -> None:
    if not config.STRIPE_KEY:
        raise ConfigurationError("Stripe")
    stripe.api_key = config.STRIPE_KEY
    stripe.api_version = config.STRIPE_API_VERSION


def _tax_rates() -> Optional[List[str]]:
    return [config.TAX_RATE_ID] if config.TAX_RATE_ID else None


def _redirect_urls() -> Dict[str, str]:
    base = config.APP_BASE_URL
    return {
        "success_url": f"{base}/pago?status=success&session_id={SESSION_PLACEHOLDER}",
        "cancel_url": f"{base}/pago?status=failed&canceled=1",
    }


def _subscription_line_items(meta: CheckoutMetadata) -> List[Dict[str, Any]]:
    domi_price = config.PRICE_DOMI_BY_PLAN.get(meta.plan_id)
    if not domi_price:
        raise ApiError(
            400,
            error=(
                f"Missing monthly Price ID for planId={meta.plan_id}. "
                "Check env STRIPE_PRICE_DOMI_14/17/20/23."
            ),
        )
    items = [{"price": domi_price, "quantity": 1}]
    if meta.mail_enabled:
        mail_price = config.PRICE_MAIL.get(meta.mail_plan)
        if not mail_price:
            raise ApiError(
                400,
                error="Mail plan enabled but no valid plan (lite/pro) or missing env Price ID.",
            )
        items.append({"price": mail_price, "quantity": 1})
    return items


def _upfront_line_items(meta: CheckoutMetadata) -> List[Dict[str, Any]]:
    base_item = config.UPFRONT_PRICE_TABLE[meta.plan_id]
    tax_rates = _tax_rates()

    def line(name: str, unit_amount: int, quantity: int) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "price_data": {
                "currency": "eur",
                "product_data": {"name": name},
                "unit_amount": unit_amount,  # net, IVA excluded
                "tax_behavior": "exclusive",
            },
            "quantity": quantity,
        }
        if tax_rates:
            item["tax_rates"] = tax_rates
        return item

    items = [line(base_item["name"], base_item["unit_amount"], 1)]
    unit = config.MAIL_NET_EUR_CENTS.get(meta.mail_plan) if meta.mail_enabled else None
    if unit:
        label = config.MAIL_PLAN_LABELS[meta.mail_plan]
        # monthly fee x months
        items.append(line(f"Gestión de correo — {label} · {meta.months} meses", unit, meta.months))
    return items


def build_session_params(body: Optional[Mapping[str, Any]]) -> Tuple[Dict[str, Any], CheckoutMetadata]:
    """Validate the landing payload and return ``Session.create`` kwargs."""
    body = body if isinstance(body, Mapping) else {}
    plan_id = body.get("planId")
    if not isinstance(plan_id, str) or plan_id not in config.UPFRONT_PRICE_TABLE:
        raise ApiError(400, error="Invalid planId")

    meta = normalize_checkout(body, plan_id)
    if not meta.lead_id:
        raise ApiError(400, error="Missing lead_id/orderId in metadata")

    stripe_meta = meta.as_stripe_metadata()
    email = body.get("email") or None
    params: Dict[str, Any] = {
        "billing_address_collection": "required",
        "metadata": stripe_meta,
        "client_reference_id": meta.lead_id,
        "locale": "auto",
        **_redirect_urls(),
    }
    if email:
        params["customer_email"] = email

    if meta.is_subscription:
        subscription_data: Dict[str, Any] = {"metadata": stripe_meta}
        if config.TAX_RATE_ID:
            subscription_data["default_tax_rates"] = [config.TAX_RATE_ID]
        params.update(
            mode="subscription",
            line_items=_subscription_line_items(meta),
            subscription_data=subscription_data,
        )
    else:
        params.update(
            mode="payment",
            automatic_tax={"enabled": False},  # manual tax rate
            line_items=_upfront_line_items(meta),
            payment_intent_data={"metadata": stripe_meta},
        )
    return params, meta


def create_checkout_session(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    params, meta = build_session_params(body)
    configure_stripe()
    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.StripeError as exc:
        logger.error("[checkout] stripe rejected session for lead %s: %s", meta.lead_id, exc)
        raise ApiError(500, error=exc.user_message or str(exc)) from exc

    logger.info(
        "[checkout] session created",
        extra={"session_id": session.id, "lead_id": meta.lead_id, "mode": params["mode"]},
    )
    notify_automation(
        "checkout.session.created",
        {"session_id": session.id, "url": session.url, **meta.as_stripe_metadata()},
    )
    return {
        "url": session.url,
        "lead_id": meta.lead_id,
        "session_id": session.id,
        "mode": params["mode"],
    }


# ---------------------- mail add-on ----------------------
def build_mail_addon_params(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Kwargs for a mail-only subscription attached to an existing customer."""
    body = body if isinstance(body, Mapping) else {}
    customer_id = str(body.get("customerId") or "")
    if not customer_id.startswith("cus_"):
        raise ApiError(400, error="customerId(cus_...) is required")

    plan = str(body.get("plan") or "lite").strip().lower()
    price = config.PRICE_MAIL.get(plan)
    if not price:
        raise ApiError(400, error="plan must be 'lite' or 'pro'")

    metadata = body.get("metadata")
    metadata = metadata if isinstance(metadata, Mapping) else {}

    subscription_data: Dict[str, Any] = {
        "metadata": {"feature": "mail_addon_only", "mail_plan": plan, **stringify_metadata(metadata)},
    }
    if config.TAX_RATE_ID:
        subscription_data["default_tax_rates"] = [config.TAX_RATE_ID]

    # align the billing date with the existing domiciliation renewal
    trial_end = _unix_timestamp(body.get("trialEnd"))
    if trial_end:
        subscription_data["trial_end"] = trial_end
        subscription_data["proration_behavior"] = "none"

    params: Dict[str, Any] = {
        "mode": "subscription",
        "customer": customer_id,
        "line_items": [{"price": price, "quantity": 1}],
        "subscription_data": subscription_data,
        "success_url": f"{config.SITE_URL}/confirmacion?session_id={SESSION_PLACEHOLDER}&status=success&paid=1",
        "cancel_url": f"{config.SITE_URL}/pago?status=cancelled",
        "locale": "auto",
    }
    reference = metadata.get("lead_id") or metadata.get("orderId")
    if reference:
        params["client_reference_id"] = str(reference)
    return params


def create_mail_checkout(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    params = build_mail_addon_params(body)
    configure_stripe()
    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.StripeError as exc:
        logger.error("[mail-checkout] stripe rejected session for %s: %s", params["customer"], exc)
        raise ApiError(500, error=exc.user_message or str(exc)) from exc

    logger.info("[mail-checkout] session created", extra={"session_id": session.id, "customer": params["customer"]})
    return {"url": session.url, "session_id": session.id}


def _unix_timestamp(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


__all__ = [
    "configure_stripe",
    "build_session_params",
    "create_checkout_session",
    "build_mail_addon_params",
    "create_mail_checkout",
]
