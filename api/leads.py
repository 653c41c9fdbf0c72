"""Airtable lead upsert endpoint used by the landing form."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from leads.airtable import upsert_register

leads_api = Blueprint("leads", __name__)


@leads_api.post("/api/airtable-upsert-register")
def airtable_upsert_register() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(upsert_register(body))
