"""Input files: kind detection, validation and loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from letterhead.errors import UnsupportedDocumentError

DOCX_MEDIA_TYPES = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
)
HTML_MEDIA_TYPES = ("text/html", "application/xhtml+xml")
TEXT_MEDIA_TYPES = ("text/plain",)

KINDS = ("docx", "html", "text")


def detect_kind(name: str, media_type: Optional[str] = None) -> str:
    """Return one of ``docx``, ``html``, ``text`` or ``unknown``.

    The extension wins; the media type is consulted only when the
    extension says nothing.
    """
    ext = os.path.splitext(name or "")[1].lower()
    if ext in (".docx",):
        return "docx"
    if ext in (".html", ".htm", ".xhtml"):
        return "html"
    if ext in (".txt", ".text"):
        return "text"
    mt = (media_type or "").split(";")[0].strip().lower()
    if mt in DOCX_MEDIA_TYPES:
        return "docx"
    if mt in HTML_MEDIA_TYPES:
        return "html"
    if mt in TEXT_MEDIA_TYPES:
        return "text"
    return "unknown"


def is_docx_file(name: str, media_type: Optional[str] = None) -> bool:
    """Word-processing check used by the upload boundary.

    Doxygen:
    - @param name: File name including extension.
    - @param media_type: Declared media type; empty means "not declared".
    - @return: True if the extension is .docx or the media type is a Word type.
    """
    ext = os.path.splitext(name or "")[1].lower()
    if ext == ".docx":
        return True
    return (media_type or "") in DOCX_MEDIA_TYPES


@dataclass(frozen=True)
class DocumentFile:
    name: str
    data: bytes = field(repr=False)
    size: int = -1
    media_type: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError("DocumentFile.data must be bytes")
        object.__setattr__(self, "data", bytes(self.data))
        if self.size < 0:
            object.__setattr__(self, "size", len(self.data))

    @property
    def kind(self) -> str:
        return detect_kind(self.name, self.media_type)


def validate_document_file(doc: DocumentFile) -> str:
    """Return the document kind, raising if it is not supported."""
    kind = doc.kind
    if kind not in KINDS:
        raise UnsupportedDocumentError(
            f"Unsupported file type: {doc.name} (expected .docx, .html or .txt)"
        )
    return kind


def load_document_file(path: str, media_type: Optional[str] = None) -> DocumentFile:
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "rb") as f:
        data = f.read()
    return DocumentFile(name=os.path.basename(path), data=data, size=len(data), media_type=media_type)


def format_file_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    value = round(value, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[i]}"
