"""Lead records kept in Airtable."""

from .airtable import upsert_register

__all__ = ["upsert_register"]
