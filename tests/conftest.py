import base64
import io
from typing import List, Optional

import pytest
from docx import Document as DocxDocument
from docx.shared import Inches
from PIL import Image

from letterhead.docs import DocumentFile


def png_bytes(width: int = 30, height: int = 20, color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def make_docx(paragraphs: List[str], image: Optional[bytes] = None, alt: Optional[str] = None) -> bytes:
    doc = DocxDocument()
    if image is not None:
        doc.add_picture(io.BytesIO(image), width=Inches(1))
        if alt:
            doc.inline_shapes[0]._inline.xpath(".//wp:docPr")[0].set("descr", alt)
    for text in paragraphs:
        doc.add_paragraph(text)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def docx_file(name: str, paragraphs: List[str], **kwargs) -> DocumentFile:
    return DocumentFile(name=name, data=make_docx(paragraphs, **kwargs))


def text_file(name: str, text: str) -> DocumentFile:
    return DocumentFile(name=name, data=text.encode("utf-8"))


def data_uri(data: bytes, mime: str = "png") -> str:
    return f"data:image/{mime};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def letterhead_docx() -> DocumentFile:
    return docx_file("letterhead.docx", ["ACME Corp", "123 Main St"])


@pytest.fixture
def target_docx() -> DocumentFile:
    return docx_file("letter.docx", ["Dear Customer,", "Thanks for your business."])
