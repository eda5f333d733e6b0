import pytest

from letterhead.errors import ExtractionError, NoContentError
from letterhead.extract import build_paragraphs, choose_canonical_text, extract_content

from conftest import data_uri, make_docx, png_bytes


def test_plain_text_one_paragraph_per_non_blank_line():
    content = extract_content(b"First line\r\n\r\n  Second line  \n\n\nThird", "text")
    assert content.paragraph_texts() == ["First line", "Second line", "Third"]
    assert content.images == ()
    assert content.raw_text.startswith("First line")


@pytest.mark.parametrize(
    "text",
    ["x", "  padded  ", "a\nb", "\n\n\nonly\n\n", "no breaks at all but long text", "\t tab \t"],
)
def test_non_blank_text_yields_at_least_one_paragraph(text):
    assert len(build_paragraphs(text)) >= 1
    content = extract_content(text.encode("utf-8"), "text")
    assert len(content.paragraphs) >= 1


def test_extracted_paragraphs_are_unstyled_single_runs():
    content = extract_content(b"Hello\nWorld", "text")
    for para in content.paragraphs:
        assert len(para.runs) == 1
        assert para.runs[0].style.is_plain()


@pytest.mark.parametrize("data", [b"", b"   \n\r\n  "])
def test_blank_text_raises_no_content(data):
    with pytest.raises(NoContentError):
        extract_content(data, "text")


def test_invalid_utf8_text_raises():
    with pytest.raises(ExtractionError):
        extract_content(b"\xff\xfe\xfa broken", "text")


def test_choose_canonical_text_prefers_longer_and_flattened_on_tie():
    assert choose_canonical_text("short", "much longer text") == "much longer text"
    assert choose_canonical_text("much longer text", "short") == "much longer text"
    flattened, raw = "abc", "xyz"
    assert choose_canonical_text(flattened, raw) is flattened
    assert choose_canonical_text("", "") == ""


def test_docx_extraction_reads_paragraphs_in_order():
    data = make_docx(["ACME Corp", "", "123 Main St"])
    content = extract_content(data, "docx")
    assert content.paragraph_texts() == ["ACME Corp", "123 Main St"]
    assert content.images == ()


def test_docx_extraction_collects_inline_images_from_markup():
    data = make_docx(["Letterhead"], image=png_bytes(30, 20), alt="Company logo")
    content = extract_content(data, "docx")
    assert len(content.images) == 1
    image = content.images[0]
    assert image.mime_type == "png"
    assert image.alt_text == "Company logo"
    # 1 inch wide at 96 px per inch
    assert image.width_px == 96
    assert image.height_px == 64
    assert isinstance(image.data, str)
    assert content.paragraph_texts() == ["Letterhead"]


def test_docx_extraction_includes_table_text():
    import io

    from docx import Document as DocxDocument

    doc = DocxDocument()
    doc.add_paragraph("Before table")
    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Left cell"
    table.cell(0, 1).text = "Right cell"
    buf = io.BytesIO()
    doc.save(buf)
    content = extract_content(buf.getvalue(), "docx")
    assert content.paragraph_texts() == ["Before table", "Left cell", "Right cell"]


def test_corrupt_docx_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_content(b"this is not a zip package", "docx")


def test_html_extraction_images_and_text():
    good = data_uri(png_bytes(10, 10))
    html = (
        "<html><body><p>ACME <b>Corp</b></p><div>Main St<br>Springfield</div>"
        f'<img src="{good}" alt="logo" width="120" height="40">'
        '<img src="https://example.com/remote.png">'
        "</body></html>"
    ).encode("utf-8")
    content = extract_content(html, "html")
    assert content.paragraph_texts() == ["ACME Corp", "Main St", "Springfield"]
    assert len(content.images) == 1
    assert content.images[0].alt_text == "logo"
    assert (content.images[0].width_px, content.images[0].height_px) == (120, 40)


def test_longer_raw_rendering_wins_over_truncated_markup():
    def parser(data, mode):
        if mode == "raw":
            return "Line one\nLine two\nLine three"
        return "<p>Line one</p>"

    content = extract_content(b"ignored", "docx", parsers={"docx": parser})
    assert content.paragraph_texts() == ["Line one", "Line two", "Line three"]


def test_longer_markup_wins_over_truncated_raw_text():
    def parser(data, mode):
        if mode == "raw":
            return "Line one"
        return "<p>Line one</p>\n<p>Line two</p>"

    content = extract_content(b"ignored", "docx", parsers={"docx": parser})
    assert content.paragraph_texts() == ["Line one", "Line two"]


def test_raw_text_failure_falls_back_to_markup():
    def parser(data, mode):
        if mode == "raw":
            raise ExtractionError("raw pass broke")
        return "<p>Still readable</p>"

    content = extract_content(b"ignored", "docx", parsers={"docx": parser})
    assert content.paragraph_texts() == ["Still readable"]


def test_unknown_kind_raises():
    with pytest.raises(ExtractionError):
        extract_content(b"%PDF-1.7", "pdf")
