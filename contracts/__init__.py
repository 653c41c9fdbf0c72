"""Contract PDF generation and delivery."""

from .delivery import contract_filename, deliver_contract
from .render import render_pdf, resolve_lang

__all__ = ["contract_filename", "deliver_contract", "render_pdf", "resolve_lang"]
