"""Supabase storage access for KYC uploads and generated contracts."""
from __future__ import annotations

from typing import Any

from supabase import create_client

from core import config
from core.errors import ConfigurationError


def storage_bucket(bucket: str) -> Any:
    """Return the storage file API for ``bucket`` using the service role key."""
    if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE:
        raise ConfigurationError("Supabase")
    client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE)
    return client.storage.from_(bucket)


__all__ = ["storage_bucket"]
