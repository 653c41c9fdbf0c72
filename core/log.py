"""JSON logging for the serverless handlers.

Vercel ships stdout to its log drain line by line, so every record is a
single JSON object. Usage::

    from core.log import get_logger

    logger = get_logger(__name__)
    logger.info("[checkout] session created", extra={"session_id": session.id})
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

SENSITIVE_KEYS = ("token", "secret", "api_key", "password")


class CheckoutJsonFormatter(JsonFormatter):
    """Adds a UTC timestamp and redacts credential-looking fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        for key, value in list(log_record.items()):
            if isinstance(value, str) and any(s in key.lower() for s in SENSITIVE_KEYS):
                log_record[key] = "***REDACTED***"


def setup_logging(level: str = "INFO") -> None:
    """Install the JSON handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers:
        if isinstance(handler.formatter, CheckoutJsonFormatter):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CheckoutJsonFormatter(fmt="%(asctime)s %(name)s %(levelname)s %(message)s"))
    root.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["CheckoutJsonFormatter", "setup_logging", "get_logger"]
