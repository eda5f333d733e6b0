from __future__ import annotations

import re
from typing import List

from letterhead.errors import ExtractionError

_LINE_BREAKS = re.compile(r"[\r\n]+")


def decode_text(data: bytes) -> str:
    """Decode plain-text bytes as UTF-8 (a leading BOM is dropped)."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ExtractionError(f"Text is not valid UTF-8: {exc}") from exc


def split_paragraph_texts(text: str) -> List[str]:
    """Split on runs of line breaks, trimming and dropping blank lines.

    ``\\n``, ``\\r\\n`` and longer runs of either are one delimiter.
    """
    parts: List[str] = []
    for line in _LINE_BREAKS.split(text or ""):
        stripped = line.strip()
        if stripped:
            parts.append(stripped)
    return parts
