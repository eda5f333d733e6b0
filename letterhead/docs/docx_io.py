"""DOCX reading and writing on top of python-docx.

Reading serves the extractor as a parsing collaborator with two modes:
``raw`` (plain text, one blank line after every paragraph) and ``markup``
(one ``<p>`` per paragraph, inline pictures as base64 ``<img>`` tags).
Writing turns a sequence of ``ParagraphNode`` into a .docx package.
"""

from __future__ import annotations

import base64
import html
import io
from typing import Iterator, List, Optional, Sequence

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Pt, RGBColor, Twips
from docx.table import Table
from docx.text.hyperlink import Hyperlink
from docx.text.paragraph import Paragraph

from letterhead.errors import ExtractionError
from letterhead.log import get_logger
from .model import BreakRun, ImageRun, MergedDocument, ParagraphNode, TextRun

logger = get_logger("letterhead.docx")

PARSE_MODES = ("raw", "markup")
EMU_PER_PX = 9525

_EMBED = qn("r:embed")

_ALIGNMENT = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}

# rPr children that must follow w:spacing / w:w in schema order
_AFTER_SPACING = (
    "w:w", "w:kern", "w:position", "w:sz", "w:szCs", "w:highlight", "w:u",
    "w:effect", "w:bdr", "w:shd", "w:fitText", "w:vertAlign", "w:rtl",
    "w:cs", "w:em", "w:lang", "w:eastAsianLayout", "w:specVanish", "w:oMath",
)


def _open(data: bytes):
    try:
        return DocxDocument(io.BytesIO(data))
    except Exception as exc:
        raise ExtractionError(f"Failed to parse Word document: {exc}") from exc


def _iter_paragraphs(container) -> Iterator[Paragraph]:
    """Yield paragraphs in document order, descending into tables."""
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            seen = set()
            for row in block.rows:
                for cell in row.cells:
                    # merged cells repeat across the grid
                    if cell._tc in seen:
                        continue
                    seen.add(cell._tc)
                    yield from _iter_paragraphs(cell)
        else:
            yield block


def _iter_runs(paragraph: Paragraph):
    for item in paragraph.iter_inner_content():
        if isinstance(item, Hyperlink):
            yield from item.runs
        else:
            yield item


def _image_tags(run) -> List[str]:
    """Return ``<img>`` tags for every picture embedded in this run."""
    tags: List[str] = []
    for drawing in run._r.xpath(".//w:drawing"):
        alt: Optional[str] = None
        doc_pr = drawing.xpath(".//wp:docPr")
        if doc_pr:
            alt = doc_pr[0].get("descr") or doc_pr[0].get("title") or None
        size_attrs = ""
        extent = drawing.xpath(".//wp:extent")
        if extent:
            width = round(int(extent[0].get("cx", "0")) / EMU_PER_PX)
            height = round(int(extent[0].get("cy", "0")) / EMU_PER_PX)
            if width > 0 and height > 0:
                size_attrs = f' width="{width}" height="{height}"'
        for blip in drawing.xpath(".//a:blip"):
            rId = blip.get(_EMBED)
            if not rId:
                continue
            try:
                part = run.part.related_parts[rId]
            except KeyError:
                logger.warning("Picture relationship %s not found, skipping", rId)
                continue
            content_type = getattr(part, "content_type", "") or "image/png"
            payload = base64.b64encode(part.blob).decode("ascii")
            alt_attr = f' alt="{html.escape(alt, quote=True)}"' if alt else ""
            tags.append(f'<img src="data:{content_type};base64,{payload}"{alt_attr}{size_attrs} />')
    return tags


def _paragraph_markup(paragraph: Paragraph) -> str:
    parts: List[str] = []
    for run in _iter_runs(paragraph):
        parts.extend(_image_tags(run))
        if run.text:
            parts.append(html.escape(run.text).replace("\n", "<br />"))
    return f"<p>{''.join(parts)}</p>"


def parse_docx(data: bytes, mode: str) -> str:
    """Parsing collaborator for .docx bytes.

    Doxygen:
    - @param data: Raw .docx package bytes.
    - @param mode: "raw" for plain text or "markup" for HTML.
    - @return: The rendering requested by ``mode``.
    - @throws ExtractionError: If the bytes are not a readable .docx package.
    """
    if mode not in PARSE_MODES:
        raise ValueError(f"Unknown parse mode: {mode}")
    doc = _open(data)
    paragraphs = list(_iter_paragraphs(doc))
    if mode == "raw":
        return "".join(f"{p.text}\n\n" for p in paragraphs)
    return "\n".join(_paragraph_markup(p) for p in paragraphs)


def _set_run_property(run, tag: str, value: int) -> None:
    rPr = run._r.get_or_add_rPr()
    for existing in rPr.findall(qn(tag)):
        rPr.remove(existing)
    el = OxmlElement(tag)
    el.set(qn("w:val"), str(value))
    rPr.insert_element_before(el, *[t for t in _AFTER_SPACING if t != tag])


def _add_text_run(p: Paragraph, node: TextRun) -> None:
    run = p.add_run(node.text)
    style = node.style
    if style.is_plain():
        return
    font = run.font
    if style.font_family:
        font.name = style.font_family
    if style.bold is not None:
        font.bold = style.bold
    if style.italic is not None:
        font.italic = style.italic
    if style.color_hex:
        font.color.rgb = RGBColor.from_string(style.color_hex)
    if style.character_spacing_twips:
        _set_run_property(run, "w:spacing", style.character_spacing_twips)
    if style.scale_percent:
        _set_run_property(run, "w:w", style.scale_percent)
    if style.size_half_points:
        font.size = Pt(style.size_half_points / 2)
    if style.underline:
        font.underline = True


def _add_image_run(p: Paragraph, node: ImageRun) -> None:
    run = p.add_run()
    try:
        run.add_picture(
            io.BytesIO(node.data),
            width=Emu(node.width_px * EMU_PER_PX),
            height=Emu(node.height_px * EMU_PER_PX),
        )
    except Exception as exc:
        # fallback: put a placeholder text instead of the picture
        label = node.asset.alt_text or f"{node.mime_type} image"
        logger.warning("Could not embed picture %r: %s", label, exc)
        run.text = f"[image: {label}]"


def _apply_paragraph_format(p: Paragraph, node: ParagraphNode) -> None:
    if node.alignment:
        p.alignment = _ALIGNMENT[node.alignment]
    fmt = node.format
    pf = p.paragraph_format
    if fmt.spacing_before_twips is not None:
        pf.space_before = Twips(fmt.spacing_before_twips)
    if fmt.spacing_after_twips is not None:
        pf.space_after = Twips(fmt.spacing_after_twips)
    if fmt.line_spacing_240ths:
        pf.line_spacing = fmt.line_spacing_240ths / 240


def build_docx(nodes: Sequence[ParagraphNode], title: Optional[str] = None):
    d = DocxDocument()
    if title:
        d.core_properties.title = title
    for node in nodes:
        p = d.add_paragraph()
        _apply_paragraph_format(p, node)
        for run in node.runs:
            if isinstance(run, TextRun):
                _add_text_run(p, run)
            elif isinstance(run, ImageRun):
                _add_image_run(p, run)
            elif isinstance(run, BreakRun):
                p.add_run().add_break(WD_BREAK.PAGE)
    return d


def render_docx(nodes: Sequence[ParagraphNode], title: Optional[str] = None) -> bytes:
    """Serialize paragraph nodes into .docx bytes."""
    buf = io.BytesIO()
    build_docx(nodes, title=title).save(buf)
    return buf.getvalue()


def write_docx(doc: MergedDocument, out_path: str) -> str:
    build_docx(doc.nodes, title=doc.source_name).save(out_path)
    return out_path
