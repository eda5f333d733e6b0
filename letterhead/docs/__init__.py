"""Document layer: node model, input files, and format collaborators.

Exposes:
- Data model: ParagraphNode, TextRun, ImageRun, BreakRun, StyleAttributes,
  ParagraphFormat, ImageAsset, ExtractedContent, MergedDocument
- Files: DocumentFile, load_document_file, detect_kind
- Collaborators: parse_docx / parse_html (reading), render_docx / write_docx (writing)
"""

from .model import (
    ALIGNMENTS,
    BreakRun,
    ExtractedContent,
    ImageAsset,
    ImageRun,
    MergedDocument,
    ParagraphFormat,
    ParagraphNode,
    RunNode,
    StyleAttributes,
    TextRun,
)
from .files import (
    DocumentFile,
    detect_kind,
    format_file_size,
    is_docx_file,
    load_document_file,
    validate_document_file,
)
from .docx_io import parse_docx, render_docx, write_docx
from .html_io import find_markup_images, flatten_markup, parse_html

__all__ = [
    "ALIGNMENTS",
    "BreakRun",
    "ExtractedContent",
    "ImageAsset",
    "ImageRun",
    "MergedDocument",
    "ParagraphFormat",
    "ParagraphNode",
    "RunNode",
    "StyleAttributes",
    "TextRun",
    "DocumentFile",
    "detect_kind",
    "format_file_size",
    "is_docx_file",
    "load_document_file",
    "validate_document_file",
    "parse_docx",
    "render_docx",
    "write_docx",
    "find_markup_images",
    "flatten_markup",
    "parse_html",
]
