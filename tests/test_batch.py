import pytest
from docx import Document as DocxDocument

from letterhead.errors import BatchError, EmptyTargetError
from letterhead.pipeline import export_merged, merge_many

from conftest import docx_file, text_file


def test_merge_many_reports_progress_before_each_file(letterhead_docx):
    targets = [docx_file("a.docx", ["Alpha"]), docx_file("b.docx", ["Beta"])]
    calls = []
    merged = merge_many(letterhead_docx, targets, on_progress=lambda i, n: calls.append((i, n)))
    assert calls == [(1, 2), (2, 2)]
    assert [m.source_name for m in merged] == ["merged_a.docx", "merged_b.docx"]
    assert merged[1].texts()[-1] == "Beta"


def test_merge_many_aborts_on_first_failure(letterhead_docx):
    targets = [
        docx_file("ok.docx", ["Fine"]),
        text_file("empty.txt", "   "),
        docx_file("never.docx", ["Not reached"]),
    ]
    calls = []
    with pytest.raises(BatchError) as info:
        merge_many(letterhead_docx, targets, on_progress=lambda i, n: calls.append(i))
    err = info.value
    assert err.index == 2
    assert err.name == "empty.txt"
    assert isinstance(err.cause, EmptyTargetError)
    assert err.__cause__ is err.cause
    assert calls == [1, 2]


def test_merge_many_with_no_targets(letterhead_docx):
    assert merge_many(letterhead_docx, []) == []


def test_export_merged_writes_docx_files(tmp_path, letterhead_docx, target_docx):
    merged = merge_many(letterhead_docx, [target_docx, text_file("notes.txt", "Plain body")])
    paths = export_merged(merged, str(tmp_path / "out"))
    assert [p.split("/")[-1] for p in paths] == ["merged_letter.docx", "merged_notes.docx"]
    reopened = DocxDocument(paths[0])
    texts = [p.text for p in reopened.paragraphs]
    assert texts == ["ACME Corp", "123 Main St", "", "", "Dear Customer,", "Thanks for your business."]
    assert reopened.core_properties.title == "merged_letter.docx"


def test_merge_many_wraps_unexpected_errors(monkeypatch, letterhead_docx, target_docx):
    def _broken(text, spec):
        raise KeyError("rId9")

    monkeypatch.setattr("letterhead.pipeline.merge.apply_formatting", _broken)
    with pytest.raises(BatchError) as info:
        merge_many(letterhead_docx, [target_docx])
    assert info.value.index == 1
    assert isinstance(info.value.cause, KeyError)
    assert info.value.__cause__ is info.value.cause
