"""KYC document collection: token verification and signed uploads."""

from .storage import sign_upload
from .tokens import issue_token, require_order, verify_token

__all__ = ["sign_upload", "issue_token", "require_order", "verify_token"]
