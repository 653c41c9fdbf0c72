from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from api.server import app as flask_app
from core import config


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeBucket:
    def __init__(self, name: str, calls: List[Dict[str, Any]]) -> None:
        self.name = name
        self.calls = calls

    def create_signed_upload_url(self, path: str) -> Dict[str, str]:
        self.calls.append({"op": "sign", "bucket": self.name, "path": path})
        return {"signed_url": f"https://supa.test/upload/{path}?token=up-tok", "token": "up-tok", "path": path}

    def upload(self, path: str, data: bytes, options: Dict[str, str]) -> None:
        self.calls.append({"op": "upload", "bucket": self.name, "path": path, "size": len(data), "options": options})

    def create_signed_url(self, path: str, expires_in: int) -> Dict[str, str]:
        self.calls.append({"op": "signed_url", "bucket": self.name, "path": path, "expires_in": expires_in})
        return {"signedURL": f"https://supa.test/download/{path}"}


@pytest.fixture()
def client():
    flask_app.config["TESTING"] = True
    return flask_app.test_client()


@pytest.fixture()
def stripe_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "STRIPE_KEY", "sk_test_123")
    monkeypatch.setattr(config, "TAX_RATE_ID", "txr_test")
    monkeypatch.setattr(config, "APP_BASE_URL", "https://app.test")
    monkeypatch.setattr(config, "SITE_URL", "https://site.test")
    monkeypatch.setattr(config, "AUTOMATION_WEBHOOK_URL", "")
    monkeypatch.setattr(
        config,
        "PRICE_DOMI_BY_PLAN",
        {"p3": "price_domi_23", "p6": "price_domi_20", "p12": "price_domi_17", "p24": ""},
    )
    monkeypatch.setattr(config, "PRICE_MAIL", {"lite": "price_mail_lite", "pro": "price_mail_pro"})


@pytest.fixture()
def stripe_sessions(monkeypatch: pytest.MonkeyPatch) -> List[Dict[str, Any]]:
    """Capture ``stripe.checkout.Session.create`` kwargs instead of calling Stripe."""
    import stripe

    created: List[Dict[str, Any]] = []

    def fake_create(**params: Any) -> SimpleNamespace:
        created.append(params)
        return SimpleNamespace(id=f"cs_test_{len(created)}", url=f"https://checkout.stripe.test/{len(created)}")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    return created


@pytest.fixture()
def supabase_calls(monkeypatch: pytest.MonkeyPatch) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def fake_create_client(url: str, key: str) -> SimpleNamespace:
        return SimpleNamespace(storage=SimpleNamespace(from_=lambda bucket: FakeBucket(bucket, calls)))

    monkeypatch.setattr(config, "SUPABASE_URL", "https://supa.test")
    monkeypatch.setattr(config, "SUPABASE_SERVICE_ROLE", "service-role")
    monkeypatch.setattr("core.storage.create_client", fake_create_client)
    return calls
