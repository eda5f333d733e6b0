"""HTML markup helpers built on BeautifulSoup.

- ``flatten_markup``: strip tags, ending a line after each block element.
- ``find_markup_images``: collect inline ``data:`` URI images as assets.
- ``parse_html``: the parsing collaborator for HTML inputs.
"""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, UnicodeDammit

from letterhead.errors import ExtractionError
from .model import ImageAsset

PARSE_MODES = ("raw", "markup")

BLOCK_TAGS = [
    "p", "div", "li", "tr", "td", "th", "table", "ul", "ol",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "blockquote", "pre", "section", "article", "header", "footer",
]

_DATA_URI = re.compile(r"^data:image/([\w.+-]+);base64,(.+)$", re.DOTALL)
_LEADING_INT = re.compile(r"^\s*(\d+)")


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def _int_attr(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    m = _LEADING_INT.match(str(value))
    if not m:
        return None
    number = int(m.group(1))
    return number or None


def flatten_markup(markup: str) -> str:
    """Return the text content of ``markup`` with block elements on their own lines."""
    soup = _soup(markup or "")
    for tag in soup.find_all(["script", "style", "head"]):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.append("\n")
    return soup.get_text()


def find_markup_images(markup: str) -> List[ImageAsset]:
    """Collect every ``<img>`` whose src is a base64 data URI.

    Doxygen:
    - @param markup: HTML string.
    - @return: Assets in document order; payloads stay base64-encoded.
    """
    images: List[ImageAsset] = []
    for index, img in enumerate(_soup(markup or "").find_all("img")):
        src = (img.get("src") or "").strip()
        m = _DATA_URI.match(src)
        if not m:
            continue
        mime_type, payload = m.groups()
        images.append(
            ImageAsset(
                data=payload.strip(),
                mime_type=mime_type,
                width_px=_int_attr(img.get("width")),
                height_px=_int_attr(img.get("height")),
                alt_text=img.get("alt") or f"Image {index + 1}",
            )
        )
    return images


def decode_markup(data: bytes) -> str:
    dammit = UnicodeDammit(data, ["utf-8"])
    if dammit.unicode_markup is None:
        raise ExtractionError("Could not detect the character encoding of the HTML input")
    return dammit.unicode_markup


def parse_html(data: bytes, mode: str) -> str:
    """Parsing collaborator for HTML bytes.

    ``raw`` returns the bare text content, ``markup`` returns the decoded
    document unchanged.
    """
    if mode not in PARSE_MODES:
        raise ValueError(f"Unknown parse mode: {mode}")
    markup = decode_markup(data)
    if mode == "markup":
        return markup
    soup = _soup(markup)
    for tag in soup.find_all(["script", "style", "head"]):
        tag.decompose()
    return soup.get_text()
