"""Styled paragraph construction for target document text.

``apply_formatting`` is total: whatever the input text, it returns a
paragraph with exactly one text run. The styled builder is tried first;
if it fails or produces no runs, the minimal unstyled builder is used
with the same normalized text, so content never gets dropped because of
a formatting problem.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from letterhead.docs.model import ParagraphFormat, ParagraphNode, StyleAttributes, TextRun
from letterhead.log import get_logger
from .spec import FormattingSpec

logger = get_logger("letterhead.format")

HALF_POINTS_PER_PT = 2
TWIPS_PER_PT = 20
LINE_UNITS = 240
PERCENT = 100

_HEX6 = re.compile(r"^[0-9A-Fa-f]{6}$")
_HEX3 = re.compile(r"^[0-9A-Fa-f]{3}$")


def normalize_text(text: Optional[str]) -> str:
    """Trim text; empty or invalid input becomes a single space."""
    if not isinstance(text, str):
        logger.warning("apply_formatting called with non-string text: %r", text)
        return " "
    stripped = text.strip()
    return stripped if stripped else " "


def normalize_color(color: Optional[str]) -> Optional[str]:
    """Return an uppercase RRGGBB string, or None when not a hex color."""
    if not color:
        return None
    value = color.strip().lstrip("#")
    if _HEX3.match(value):
        value = "".join(ch * 2 for ch in value)
    if not _HEX6.match(value):
        logger.warning("Ignoring invalid color value: %r", color)
        return None
    return value.upper()


def _scaled(value, factor: int) -> Optional[int]:
    if not value:
        return None
    return int(round(value * factor))


def build_style(spec: FormattingSpec) -> StyleAttributes:
    return StyleAttributes(
        font_family=spec.font_family or None,
        size_half_points=_scaled(spec.font_size_pt, HALF_POINTS_PER_PT),
        color_hex=normalize_color(spec.color_hex),
        bold=spec.bold,
        italic=spec.italic,
        underline=True if spec.underline else None,
        character_spacing_twips=_scaled(spec.character_spacing_pt, TWIPS_PER_PT),
        scale_percent=_scaled(spec.scaling, PERCENT),
    )


def build_paragraph_format(spec: FormattingSpec) -> ParagraphFormat:
    spacing = spec.paragraph_spacing
    return ParagraphFormat(
        spacing_before_twips=_scaled(spacing.before_pt, TWIPS_PER_PT),
        spacing_after_twips=_scaled(spacing.after_pt, TWIPS_PER_PT),
        line_spacing_240ths=_scaled(spec.line_spacing, LINE_UNITS),
    )


def build_styled_paragraph(text: str, spec: FormattingSpec) -> ParagraphNode:
    run = TextRun(text=text, style=build_style(spec))
    return ParagraphNode(
        runs=(run,),
        alignment=spec.text_alignment or None,
        format=build_paragraph_format(spec),
    )


def build_minimal_paragraph(text: str) -> ParagraphNode:
    return ParagraphNode(runs=(TextRun(text=text),))


def has_runs(paragraph: Optional[ParagraphNode]) -> bool:
    return paragraph is not None and len(paragraph.runs) >= 1


def apply_formatting(text: str, spec: FormattingSpec) -> ParagraphNode:
    """Build one styled paragraph for ``text``.

    Doxygen:
    - @param text: Paragraph text; trimmed, and replaced by " " if empty.
    - @param spec: Formatting to apply.
    - @return: ParagraphNode with exactly one TextRun.
    """
    normalized = normalize_text(text)
    paragraph: Optional[ParagraphNode] = None
    try:
        paragraph = build_styled_paragraph(normalized, spec)
    except (TypeError, ValueError) as exc:
        logger.warning("Styled paragraph construction failed (%s), using unstyled run", exc)
    if not has_runs(paragraph):
        paragraph = build_minimal_paragraph(normalized)
    return paragraph


def apply_formatting_to_paragraphs(
    paragraphs: Iterable[ParagraphNode],
    spec: FormattingSpec,
) -> List[ParagraphNode]:
    """Re-style existing paragraphs by their text, dropping blank ones."""
    out: List[ParagraphNode] = []
    for para in paragraphs:
        text = para.text
        if not text.strip():
            logger.debug("Filtering out paragraph with empty text")
            continue
        out.append(apply_formatting(text, spec))
    return out
