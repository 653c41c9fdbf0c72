"""Origin allowlisting shared by every endpoint."""
from __future__ import annotations

import re
from typing import Dict, Iterable, Optional
from urllib.parse import urlsplit

from core import config


def match_origin(pattern: str, origin: str) -> bool:
    """Match ``origin`` against an entry such as ``https://*.framer.app``."""
    if "*" not in pattern:
        return pattern == origin
    if "://" not in pattern:
        return False
    scheme, host_pattern = pattern.split("://", 1)
    parts = urlsplit(origin)
    if not parts.scheme or parts.scheme != scheme or not parts.netloc:
        return False
    regex = "^" + re.escape(host_pattern).replace(r"\*", ".*") + "$"
    return re.match(regex, parts.netloc) is not None


def is_allowed_origin(origin: Optional[str]) -> bool:
    if not origin:
        return False
    return any(match_origin(pattern, origin) for pattern in config.CORS_ALLOWED_ORIGINS)


def cors_headers(origin: Optional[str], methods: Iterable[str] = ("POST", "OPTIONS")) -> Dict[str, str]:
    allow_origin = origin if is_allowed_origin(origin) else config.CORS_DEFAULT_ORIGIN
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Vary": "Origin",
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
    }


__all__ = ["match_origin", "is_allowed_origin", "cors_headers"]
