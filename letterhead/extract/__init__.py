"""Content extraction from DOCX, HTML and plain-text inputs."""

from .extractor import (
    PARSERS,
    build_paragraphs,
    choose_canonical_text,
    extract_content,
)

__all__ = [
    "PARSERS",
    "build_paragraphs",
    "choose_canonical_text",
    "extract_content",
]
