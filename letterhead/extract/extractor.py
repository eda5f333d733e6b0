"""Content extraction: document bytes to ``ExtractedContent``.

Rich documents are read twice through their parsing collaborator, once
as plain text and once as HTML markup. The longer of the plain text and
the tag-stripped markup becomes the canonical text. Images come from the
markup only.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from letterhead.docs.docx_io import parse_docx
from letterhead.docs.html_io import find_markup_images, flatten_markup, parse_html
from letterhead.docs.model import ExtractedContent, ImageAsset, ParagraphNode
from letterhead.docs.txt import decode_text, split_paragraph_texts
from letterhead.errors import ExtractionError, NoContentError
from letterhead.log import get_logger

logger = get_logger("letterhead.extract")

Parser = Callable[[bytes, str], str]

PARSERS: Dict[str, Parser] = {
    "docx": parse_docx,
    "html": parse_html,
}


def choose_canonical_text(flattened: str, raw: str) -> str:
    """Return the longer of the two renderings; a tie keeps ``flattened``."""
    flattened = flattened or ""
    raw = raw or ""
    if len(raw) > len(flattened):
        return raw
    return flattened


def build_paragraphs(text: str) -> List[ParagraphNode]:
    """One unstyled paragraph per non-blank line.

    Non-blank text without any usable line still yields a single paragraph.
    """
    texts = split_paragraph_texts(text)
    if not texts and text and text.strip():
        logger.warning("No paragraphs found from line breaks, using entire text as single paragraph")
        texts = [text.strip()]
    return [ParagraphNode.plain(t) for t in texts]


def _extract_text(data: bytes) -> ExtractedContent:
    raw_text = decode_text(data)
    paragraphs = build_paragraphs(raw_text)
    return ExtractedContent(paragraphs=paragraphs, raw_text=raw_text, images=())


def _extract_rich(data: bytes, kind: str, parser: Parser) -> ExtractedContent:
    raw = ""
    try:
        raw = parser(data, "raw")
    except ExtractionError as exc:
        # the markup pass below decides whether the input is readable at all
        logger.warning("Raw text extraction failed for %s input: %s", kind, exc)

    markup = parser(data, "markup")
    flattened = flatten_markup(markup)
    raw_text = choose_canonical_text(flattened, raw)
    if len(raw) > len(flattened):
        logger.info("Using raw text rendering (%d chars) over markup text (%d chars)", len(raw), len(flattened))

    images: List[ImageAsset] = find_markup_images(markup)
    paragraphs = build_paragraphs(raw_text)
    logger.debug(
        "Extracted %d paragraphs, %d images, %d chars from %s input",
        len(paragraphs), len(images), len(raw_text), kind,
    )
    return ExtractedContent(paragraphs=paragraphs, raw_text=raw_text, images=images)


def extract_content(
    data: bytes,
    kind: str,
    parsers: Optional[Dict[str, Parser]] = None,
) -> ExtractedContent:
    """Extract paragraphs, canonical text and images from document bytes.

    Doxygen:
    - @param data: Raw document bytes.
    - @param kind: Declared kind: "docx", "html" or "text".
    - @param parsers: Optional override of the kind → parsing collaborator table.
    - @return: Immutable ExtractedContent.
    - @throws ExtractionError: If nothing can be decoded.
    - @throws NoContentError: If decoding worked but there is no content.
    """
    if kind == "text":
        content = _extract_text(data)
    else:
        table = parsers if parsers is not None else PARSERS
        parser = table.get(kind)
        if parser is None:
            raise ExtractionError(f"No parser available for document kind: {kind}")
        content = _extract_rich(data, kind, parser)

    if not content.paragraphs and not content.raw_text.strip():
        raise NoContentError("no content")
    return content
