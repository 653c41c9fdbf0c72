"""Fire-and-forget mirror of checkout payloads to the automation hook."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping

import requests

from core import config
from core.log import get_logger

logger = get_logger(__name__)


def notify_automation(event: str, payload: Mapping[str, Any]) -> bool:
    """POST ``payload`` to ``AUTOMATION_WEBHOOK_URL``; never raises.

    Returns True only when the hook answered 2xx within the timeout.
    """
    url = config.AUTOMATION_WEBHOOK_URL
    if not url:
        logger.debug("[notify] no automation hook configured, skipping %s", event)
        return False

    body: Dict[str, Any] = {
        "event": event,
        "sent_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "data": dict(payload),
    }
    try:
        r = requests.post(url, json=body, timeout=config.AUTOMATION_TIMEOUT_S)
    except requests.RequestException as exc:
        logger.warning("[notify] %s not delivered: %s", event, exc)
        return False
    if not r.ok:
        logger.warning("[notify] %s HTTP %s :: %s", event, r.status_code, r.text[:200])
        return False
    return True


__all__ = ["notify_automation"]
