from __future__ import annotations

import pytest

from core import config
from core.cors import cors_headers, is_allowed_origin, match_origin


@pytest.fixture(autouse=True)
def default_origins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "CORS_ALLOWED_ORIGINS", list(config.DEFAULT_ALLOWED_ORIGINS))
    monkeypatch.setattr(config, "CORS_DEFAULT_ORIGIN", "https://ofinova-madrid.es")


def test_wildcard_matches_subdomains_with_same_scheme() -> None:
    assert match_origin("https://*.framer.app", "https://spectacular-millions-373411.framer.app")
    assert not match_origin("https://*.framer.app", "http://preview.framer.app")
    assert not match_origin("https://*.framer.app", "https://framer.app.evil.com")


def test_exact_entries_need_exact_origin() -> None:
    assert is_allowed_origin("http://localhost:3000")
    assert not is_allowed_origin("http://localhost:3001")
    assert not is_allowed_origin("")
    assert not is_allowed_origin(None)


def test_allowed_origin_is_echoed() -> None:
    headers = cors_headers("https://www.ofinova-madrid.es")
    assert headers["Access-Control-Allow-Origin"] == "https://www.ofinova-madrid.es"
    assert headers["Vary"] == "Origin"
    assert headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
    assert headers["Access-Control-Max-Age"] == "86400"


def test_disallowed_origin_falls_back_to_default() -> None:
    headers = cors_headers("https://attacker.example", ("GET", "OPTIONS"))
    assert headers["Access-Control-Allow-Origin"] == "https://ofinova-madrid.es"
    assert headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"


@pytest.mark.parametrize(
    "path, methods",
    [
        ("/api/create-checkout-session", "POST, OPTIONS"),
        ("/api/create-mail-checkout", "POST, OPTIONS"),
        ("/api/airtable-upsert-register", "POST, OPTIONS"),
        ("/api/webhook", "POST, OPTIONS"),
        ("/api/kyc/verify", "GET, OPTIONS"),
        ("/api/kyc/sign-upload", "POST, OPTIONS"),
        ("/api/contracts/generate", "GET, POST, OPTIONS"),
    ],
)
def test_preflight_answers_with_endpoint_methods(client, path: str, methods: str) -> None:
    resp = client.options(path, headers={"Origin": "https://demo.framer.app"})
    assert resp.status_code == 200
    assert resp.headers["Access-Control-Allow-Origin"] == "https://demo.framer.app"
    assert resp.headers["Access-Control-Allow-Methods"] == methods
