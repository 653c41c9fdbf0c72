"""Lead upsert into Airtable, merged on ``lead_id``."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import requests

from core import config
from core.errors import ApiError, ConfigurationError
from core.log import get_logger

logger = get_logger(__name__)

MERGE_FIELD = "lead_id"
OPTIONAL_FIELDS = ("customer_type", "meta_stage")


def build_upsert_payload(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Validate the register payload and shape it for ``performUpsert``."""
    body = body if isinstance(body, Mapping) else {}
    lead_id = body.get("lead_id")
    register_type = body.get("register_type")
    if not lead_id or not register_type:
        raise ApiError(400, error="lead_id and register_type are required")

    fields: Dict[str, Any] = {"lead_id": lead_id, "register_type": register_type}
    for name in OPTIONAL_FIELDS:
        if body.get(name):
            fields[name] = body[name]
    return {
        "performUpsert": {"fieldsToMergeOn": [MERGE_FIELD]},
        "records": [{"fields": fields}],
    }


def table_url() -> str:
    if not (config.AIRTABLE_PAT and config.AIRTABLE_BASE_ID and config.AIRTABLE_TABLE_ID):
        raise ConfigurationError("Airtable")
    return f"{config.AIRTABLE_API_URL}/{config.AIRTABLE_BASE_ID}/{config.AIRTABLE_TABLE_ID}"


def upsert_register(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    payload = build_upsert_payload(body)
    url = table_url()
    headers = {
        "Authorization": f"Bearer {config.AIRTABLE_PAT}",
        "Content-Type": "application/json",
    }
    try:
        r = requests.patch(url, headers=headers, json=payload, timeout=config.AIRTABLE_TIMEOUT_S)
    except requests.RequestException as exc:
        logger.error("[airtable] upsert request failed: %s", exc)
        raise ApiError(500, error=str(exc)) from exc

    try:
        data = r.json()
    except ValueError:
        data = {"raw": r.text[:500]}

    if not r.ok:
        logger.warning("[airtable] HTTP %s :: %s", r.status_code, str(data)[:200])
        raise ApiError(r.status_code, airtable_error=data, hint="Check base/table IDs and PAT scopes")

    records: List[Dict[str, Any]] = []
    if isinstance(data, dict):
        records = data.get("records") or []
    upserted = [record.get("id") for record in records if isinstance(record, dict)]
    logger.info("[airtable] upserted lead", extra={"lead_id": payload["records"][0]["fields"]["lead_id"]})
    return {"ok": True, "upserted": upserted}


__all__ = ["build_upsert_payload", "table_url", "upsert_register"]
