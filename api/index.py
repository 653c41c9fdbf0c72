"""Vercel entry point: every /api/* path is rewritten here (see vercel.json)."""
import os
import sys

# Vercel runs this file with api/ as the working module path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from api.server import app  # noqa: E402

__all__ = ["app"]
