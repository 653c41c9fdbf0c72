from __future__ import annotations

import json

import pytest

from billing.metadata import (
    MAX_KEYS,
    MAX_VALUE_LEN,
    first_present,
    lookup,
    normalize_checkout,
    normalize_mail_plan,
    stringify_metadata,
    to_bool,
    to_int,
)


def test_first_present_skips_none_and_blank() -> None:
    assert first_present(None, "", "   ", "x", "y") == "x"
    assert first_present(0, "x") == 0
    assert first_present(None, " ") is None


def test_lookup_walks_dotted_keys() -> None:
    data = {"shipping": {"address": "Calle Mayor 1"}, "flat.key": "direct"}
    assert lookup(data, "shipping.address") == "Calle Mayor 1"
    assert lookup(data, "flat.key") == "direct"
    assert lookup(data, "shipping.notes") is None
    assert lookup(None, "a") is None


@pytest.mark.parametrize(
    "metadata, expected",
    [
        ({"shipping": {"address": "A"}, "mail_address": "B", "address": "C"}, "A"),
        ({"shipping": {"address": "  "}, "mail_address": "B", "address": "C"}, "B"),
        ({"shipping_address": "S", "mail_address": "B"}, "S"),
        ({"address": "C"}, "C"),
    ],
)
def test_shipping_address_prefers_first_alias(metadata, expected) -> None:
    meta = normalize_checkout({"metadata": {"lead_id": "L1", **metadata}}, "p6")
    assert meta.shipping_address == expected


def test_lead_id_aliases_and_body_fallback() -> None:
    assert normalize_checkout({"metadata": {"leadId": "", "orderId": "O-9"}}, "p3").lead_id == "O-9"
    assert normalize_checkout({"metadata": {}, "lead_id": "top"}, "p3").lead_id == "top"
    assert normalize_checkout({"metadata": {"lead_id": "meta"}, "lead_id": "top"}, "p3").lead_id == "meta"


def test_company_identity_from_nested_or_flat_keys() -> None:
    meta = normalize_checkout(
        {"metadata": {"lead_id": "L", "company": {"name": "Acme SL", "nif": "B123"}}}, "p12"
    )
    assert meta.company_name == "Acme SL"
    assert meta.company_tax_id == "B123"

    flat = normalize_checkout({"metadata": {"lead_id": "L", "razon_social": "Beta SA", "cif": "A99"}}, "p12")
    assert flat.company_name == "Beta SA"
    assert flat.company_tax_id == "A99"


def test_months_mail_and_mode() -> None:
    meta = normalize_checkout(
        {"payMode": "Subscription", "metadata": {"lead_id": "L", "mail_enabled": "yes", "mailPlan": "Mail PRO"}},
        "p6",
    )
    assert meta.months == 6
    assert meta.mail_enabled is True
    assert meta.mail_plan == "pro"
    assert meta.is_subscription

    custom = normalize_checkout({"metadata": {"lead_id": "L", "months": "9", "payMode": "payment"}}, "p6")
    assert custom.months == 9
    assert custom.mode == "payment"
    assert custom.mail_enabled is False

    assert normalize_checkout({"metadata": {"lead_id": "L", "months": "abc"}}, "p24").months == 24


def test_mail_plan_and_bool_parsing() -> None:
    assert normalize_mail_plan("lite") == "lite"
    assert normalize_mail_plan("Mail Lite") == "lite"
    assert normalize_mail_plan("premium") == ""
    assert normalize_mail_plan(None) == ""
    assert to_bool("ON") and to_bool(1) and to_bool(True)
    assert not to_bool("0") and not to_bool(None)


def test_stringify_metadata_for_stripe() -> None:
    out = stringify_metadata({"a": "text", "b": 3, "c": {"x": 1}, "d": None, "e": True, "long": "x" * 900})
    assert out["a"] == "text"
    assert out["b"] == "3"
    assert json.loads(out["c"]) == {"x": 1}
    assert "d" not in out
    assert out["e"] == "true"
    assert len(out["long"]) == MAX_VALUE_LEN


def test_stripe_metadata_overlays_canonical_keys() -> None:
    meta = normalize_checkout(
        {"metadata": {"orderId": "L7", "utm": {"source": "ads"}, "mail": "lite", "mailEnabled": 1}}, "p3"
    )
    stripe_meta = meta.as_stripe_metadata()
    assert stripe_meta["lead_id"] == "L7"
    assert stripe_meta["orderId"] == "L7"
    assert stripe_meta["planId"] == "p3"
    assert stripe_meta["months"] == "3"
    assert stripe_meta["mailEnabled"] == "1"
    assert stripe_meta["mailPlan"] == "lite"
    assert stripe_meta["mode"] == "payment"
    assert json.loads(stripe_meta["utm"]) == {"source": "ads"}
    assert all(isinstance(v, str) for v in stripe_meta.values())


def test_canonical_keys_survive_oversized_metadata() -> None:
    extra = {f"utm_{i}": "x" for i in range(55)}
    extra.update({"lead_id": "rec999", "planId": "forged", "mode": "subscription"})
    stripe_meta = normalize_checkout({"metadata": extra}, "p6").as_stripe_metadata()

    assert len(stripe_meta) == MAX_KEYS
    assert stripe_meta["lead_id"] == "rec999"
    assert stripe_meta["planId"] == "p6"
    assert stripe_meta["mode"] == "payment"
    assert stripe_meta["months"] == "6"
    assert stripe_meta["mailEnabled"] == "0"
    assert "utm_0" in stripe_meta
    assert "utm_54" not in stripe_meta


def test_truncated_key_does_not_replace_earlier_one() -> None:
    out = stringify_metadata({"k" * 40: "first", "k" * 45: "second"})
    assert out == {"k" * 40: "first"}


@pytest.mark.parametrize(
    "raw, expected",
    [("6.0", 6), (6.0, 6), ("9", 9), (" 12 ", 12), ("-3", 3), (0, 3), ("abc", 3), (None, 3)],
)
def test_months_parsing_and_clamping(raw, expected) -> None:
    meta = normalize_checkout({"metadata": {"lead_id": "L", "months": raw}}, "p3")
    assert meta.months == expected


def test_to_int_truncates_decimals() -> None:
    assert to_int("6.9") == 6
    assert to_int("nan", 4) == 4
    assert to_int("inf", 4) == 4
