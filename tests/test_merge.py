import pytest

from letterhead.docs import DocumentFile, ExtractedContent, ParagraphNode, render_docx
from letterhead.docs.model import TextRun
from letterhead.errors import (
    CompositionError,
    EmptyLetterheadError,
    EmptyTargetError,
    UnsupportedDocumentError,
)
from letterhead.extract import extract_content
from letterhead.formatting import FormattingSpec
from letterhead.pipeline import (
    PAGE_SIZE,
    Letterhead,
    compose_nodes,
    merge_one,
    select_letterhead_paragraphs,
    validate_composition,
)

from conftest import data_uri, docx_file, png_bytes, text_file


def _target(count: int, name: str = "long.docx") -> DocumentFile:
    return docx_file(name, [f"Paragraph {i}" for i in range(1, count + 1)])


def test_concrete_scenario_order(letterhead_docx, target_docx):
    merged = merge_one(letterhead_docx, target_docx, FormattingSpec())
    assert merged.texts() == [
        "ACME Corp",
        "123 Main St",
        "",
        "",
        "Dear Customer,",
        "Thanks for your business.",
    ]
    assert merged.source_name == "merged_letter.docx"
    assert merged.page_break_count() == 0


def test_plain_text_inputs_merge_the_same_way():
    merged = merge_one(
        text_file("letterhead.txt", "ACME Corp\n123 Main St"),
        text_file("letter.txt", "Dear Customer,\r\n\r\nThanks for your business."),
    )
    assert merged.texts() == ["ACME Corp", "123 Main St", "", "", "Dear Customer,", "Thanks for your business."]


def test_letterhead_keeps_source_styling_and_target_is_formatted(letterhead_docx, target_docx):
    spec = FormattingSpec(font_family="Georgia", bold=True, text_alignment="center")
    merged = merge_one(letterhead_docx, target_docx, spec)
    letterhead_nodes = merged.nodes[:2]
    body_nodes = merged.nodes[4:]
    for node in letterhead_nodes:
        assert node.runs[0].style.is_plain()
        assert node.alignment is None
    for node in body_nodes:
        assert node.runs[0].style.font_family == "Georgia"
        assert node.runs[0].style.bold is True
        assert node.alignment == "center"


def test_node_count_for_45_target_paragraphs(letterhead_docx):
    merged = merge_one(letterhead_docx, _target(45))
    I, L, T = 0, 2, 45
    expected = I + L + 2 + T + ((T - 1) // PAGE_SIZE) * (I + L + 2 + 1)
    assert len(merged.nodes) == expected == 59
    assert merged.page_break_count() == 2


def test_node_count_for_20_target_paragraphs_has_no_repeat(letterhead_docx):
    merged = merge_one(letterhead_docx, _target(20))
    assert len(merged.nodes) == 2 + 2 + 20
    assert merged.page_break_count() == 0


def test_node_count_with_letterhead_image():
    letterhead = docx_file("lh.docx", ["ACME Corp", "123 Main St"], image=png_bytes(), alt="logo")
    merged = merge_one(letterhead, _target(45))
    I, L, T = 1, 2, 45
    assert len(merged.nodes) == I + L + 2 + T + 2 * (I + L + 2 + 1)
    assert merged.image_count() == 3
    first = merged.nodes[0]
    assert first.has_image
    assert first.alignment == "center"


def test_letterhead_repeats_after_every_page_of_target_paragraphs(letterhead_docx):
    merged = merge_one(letterhead_docx, _target(45))
    nodes = merged.nodes
    # header(2) + spacers(2) + 20 body paragraphs
    assert nodes[24].is_page_break
    assert [n.text for n in nodes[25:29]] == ["ACME Corp", "123 Main St", "", ""]
    assert nodes[29].text == "Paragraph 21"
    # letterhead nodes are reused, not rebuilt
    assert nodes[25] is nodes[0]
    assert nodes[26] is nodes[1]
    assert nodes[-1].text == "Paragraph 45"


def test_merge_is_deterministic(letterhead_docx):
    target = _target(27)
    spec = FormattingSpec(italic=True)
    first = merge_one(letterhead_docx, target, spec)
    second = merge_one(letterhead_docx, target, spec)
    assert first.texts() == second.texts()
    assert [len(n.runs) for n in first.nodes] == [len(n.runs) for n in second.nodes]
    assert first.nodes == second.nodes


def test_serialize_and_reextract_recovers_target_text(letterhead_docx):
    target = _target(25)
    merged = merge_one(letterhead_docx, target, FormattingSpec(font_size_pt=11, underline=True))
    content = extract_content(render_docx(merged.nodes), "docx")
    expected = [t for t in merged.texts() if t.strip()]
    assert content.paragraph_texts() == expected
    recovered = [t for t in content.paragraph_texts() if t.startswith("Paragraph")]
    assert recovered == [f"Paragraph {i}" for i in range(1, 26)]


def test_empty_letterhead_raises():
    with pytest.raises(EmptyLetterheadError):
        merge_one(text_file("empty.txt", ""), text_file("t.txt", "Body"))


def test_letterhead_docx_without_text_raises():
    with pytest.raises(EmptyLetterheadError):
        merge_one(docx_file("blank.docx", ["", "   "]), text_file("t.txt", "Body"))


def test_empty_target_raises(letterhead_docx):
    with pytest.raises(EmptyTargetError):
        merge_one(letterhead_docx, docx_file("empty.docx", []))


def test_unsupported_target_kind_raises(letterhead_docx):
    with pytest.raises(UnsupportedDocumentError):
        merge_one(letterhead_docx, DocumentFile(name="scan.pdf", data=b"%PDF-1.7"))


def test_corrupt_letterhead_image_is_skipped():
    good = data_uri(png_bytes(16, 16))
    html = (
        "<p>ACME Corp</p>"
        f'<img src="{good}" alt="logo">'
        '<img src="data:image/png;base64,@@@not-base64@@@" alt="broken">'
    )
    letterhead = DocumentFile(name="letterhead.html", data=html.encode("utf-8"))
    merged = merge_one(letterhead, text_file("t.txt", "Body text"))
    assert merged.image_count() == 1
    assert len(merged.diagnostics) == 1
    assert "broken" in merged.diagnostics[0]
    assert merged.texts() == ["ACME Corp", "", "", "Body text"]


def test_select_letterhead_paragraphs_strategies():
    parsed = ExtractedContent(paragraphs=[ParagraphNode.plain("Parsed")], raw_text="ignored")
    assert [p.text for p in select_letterhead_paragraphs(parsed)] == ["Parsed"]

    from_raw = ExtractedContent(paragraphs=(), raw_text="Line A\r\n\r\nLine B")
    assert [p.text for p in select_letterhead_paragraphs(from_raw)] == ["Line A", "Line B"]

    with pytest.raises(EmptyLetterheadError):
        select_letterhead_paragraphs(ExtractedContent(paragraphs=(), raw_text="  \n "))


def test_compose_rejects_spacer_only_output():
    letterhead = Letterhead(images=(), paragraphs=(ParagraphNode.spacer(),))
    nodes = compose_nodes(letterhead, [ParagraphNode(runs=(TextRun(text="   "),))])
    with pytest.raises(CompositionError):
        validate_composition(nodes)
    with pytest.raises(CompositionError):
        validate_composition([])


def test_custom_page_size():
    letterhead = Letterhead(images=(), paragraphs=(ParagraphNode.plain("Head"),))
    body = [ParagraphNode.plain(str(i)) for i in range(7)]
    nodes = compose_nodes(letterhead, body, page_size=3)
    # (7 - 1) // 3 == 2 repeats of head + 2 spacers + break
    assert len(nodes) == 1 + 2 + 7 + 2 * 4
    with pytest.raises(ValueError):
        compose_nodes(letterhead, body, page_size=0)
