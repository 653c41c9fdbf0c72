"""Contract PDF rendering.

A Jinja2 template per language produces a light block markup (``<h1>``,
``<h2>``, ``<p>`` with inline ``<b>``/``<i>``/``<br/>``); each block becomes a
reportlab paragraph on an A4 page.
"""
from __future__ import annotations

import io
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping

from jinja2 import Environment, FileSystemLoader
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from core import config

LANGUAGES = ("es", "ko")
DEFAULT_LANG = "es"
# built-in Type1 fonts have no Hangul glyphs
CID_FONTS = {"ko": "HYSMyeongJo-Medium"}

BLOCK_RE = re.compile(r"<(h1|h2|p)>(.*?)</\1>", re.S)
STYLE_FOR_TAG = {"h1": "Title", "h2": "Heading2", "p": "BodyText"}

_jinja_env = Environment(
    loader=FileSystemLoader(str(config.TEMPLATES_DIR)),
    autoescape=True,
)


def resolve_lang(value: Any) -> str:
    lang = str(value or DEFAULT_LANG).strip().lower()
    return lang if lang in LANGUAGES else DEFAULT_LANG


def render_markup(data: Mapping[str, Any], lang: str) -> str:
    """Fill the ``contract-<lang>`` template with the request data."""
    context: Dict[str, Any] = dict(data)
    context["today"] = datetime.now().strftime("%Y-%m-%d %H:%M")
    template = _jinja_env.get_template(f"contract-{lang}.html.j2")
    return template.render(**context)


def _styles(lang: str) -> Dict[str, ParagraphStyle]:
    sheet = getSampleStyleSheet()
    font = CID_FONTS.get(lang)
    styles: Dict[str, ParagraphStyle] = {}
    for tag, name in STYLE_FOR_TAG.items():
        base = sheet[name]
        if font:
            if font not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(UnicodeCIDFont(font))
            styles[tag] = ParagraphStyle(f"{name}-{lang}", parent=base, fontName=font, wordWrap="CJK")
        else:
            styles[tag] = base
    return styles


def markup_to_story(markup: str, lang: str) -> List[Any]:
    styles = _styles(lang)
    story: List[Any] = []
    for match in BLOCK_RE.finditer(markup):
        tag, text = match.group(1), " ".join(match.group(2).split())
        if tag == "h2":
            story.append(Spacer(1, 4 * mm))
        story.append(Paragraph(text, styles[tag]))
    if not story:
        raise ValueError("contract template produced no content")
    return story


def render_pdf(data: Mapping[str, Any]) -> bytes:
    """Return the contract as PDF bytes."""
    lang = resolve_lang(data.get("lang"))
    story = markup_to_story(render_markup(data, lang), lang)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=18 * mm,
        bottomMargin=18 * mm,
        title="Contrato Ofinova",
    )
    doc.build(story)
    return buffer.getvalue()


__all__ = ["LANGUAGES", "resolve_lang", "render_markup", "markup_to_story", "render_pdf"]
