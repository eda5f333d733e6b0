"""Target text formatting: FormattingSpec and the paragraph builder."""

from .spec import FormattingSpec, ParagraphSpacing
from .applier import (
    apply_formatting,
    apply_formatting_to_paragraphs,
    build_minimal_paragraph,
    build_styled_paragraph,
    has_runs,
    normalize_color,
    normalize_text,
)

__all__ = [
    "FormattingSpec",
    "ParagraphSpacing",
    "apply_formatting",
    "apply_formatting_to_paragraphs",
    "build_minimal_paragraph",
    "build_styled_paragraph",
    "has_runs",
    "normalize_color",
    "normalize_text",
]
