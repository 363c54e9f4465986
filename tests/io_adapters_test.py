import json

import pytest

from opinion_reflow.adapters import emit_json, io_json
from opinion_reflow.models import Chapter, Footnote, Page, Paragraph, ParsedDocument, TextRun

RUNS = [{"text": "Syllabus", "x": 280, "y": 650, "fontSize": 12}, {"text": " ", "x": 0, "y": 0}]


def _write(tmp_path, data, name="runs.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_reads_object_form(tmp_path):
    path = _write(tmp_path, {"sourceUrl": "https://example.test/a.pdf", "pages": [{"height": 792, "runs": RUNS}]})
    payload = io_json.read(str(path))
    assert payload["type"] == "page_runs"
    assert payload["source_url"] == "https://example.test/a.pdf"
    assert payload["pages"] == [Page(792.0, (TextRun("Syllabus", 280.0, 650.0, 12.0),), 1)]


def test_reads_list_form_with_page_limit(tmp_path):
    path = _write(tmp_path, [{"height": 792, "runs": RUNS}, {"height": 792, "runs": []}])
    payload = io_json.read(str(path), max_pages=1)
    assert payload["source_url"] == ""
    assert len(payload["pages"]) == 1


def test_missing_fields_are_coerced(tmp_path):
    path = _write(tmp_path, [{"runs": [{"text": "x", "x": "bad", "font_size": -9}]}])
    (page,) = io_json.read(str(path))["pages"]
    assert page.height == 0.0
    assert page.runs == (TextRun("x", 0.0, 0.0, 9.0),)


@pytest.mark.parametrize("content", ["{not json", json.dumps({"pages": 3}), json.dumps([1, 2])])
def test_malformed_input_raises(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        io_json.read(str(path))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        io_json.read(str(tmp_path / "absent.json"))


def _document():
    chapter = Chapter(
        "dissenting-thomas",
        "Thomas, dissenting",
        "Thomas",
        [Paragraph("I would affirm.{{fn:1}}")],
        [Footnote(1, "See ante, at 3–4.")],
    )
    return ParsedDocument("Bost v. Illinois", "24-568", "January 14, 2026", "", [chapter])


def test_emit_writes_file(tmp_path):
    out = tmp_path / "nested" / "doc.json"
    emit_json.write(_document(), str(out))
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["caseTitle"] == "Bost v. Illinois"
    assert data["chapters"][0]["footnotes"][0]["text"] == "See ante, at 3–4."
    assert "3–4" in out.read_text(encoding="utf-8")


@pytest.mark.parametrize("target", [None, "-"])
def test_emit_writes_stdout(capsys, target):
    emit_json.write(_document(), target)
    assert json.loads(capsys.readouterr().out)["docketNumber"] == "24-568"


def test_pdf_adapter_flips_y_axis(tmp_path):
    fitz = pytest.importorskip("fitz")
    from opinion_reflow.adapters import io_pdf

    path = tmp_path / "slip.pdf"
    doc = fitz.open()
    page = doc.new_page(width=612, height=792)
    page.insert_text((72, 100), "Syllabus", fontsize=12)
    doc.save(str(path))
    doc.close()

    payload = io_pdf.read(str(path))
    (parsed,) = payload["pages"]
    (run,) = parsed.runs
    assert payload["type"] == "page_runs"
    assert parsed.height == 792.0
    assert parsed.number == 1
    assert run.text == "Syllabus"
    assert run.x == pytest.approx(72.0, abs=1.0)
    assert run.y == pytest.approx(692.0, abs=1.0)
    assert run.font_size == pytest.approx(12.0)


def test_pdf_adapter_rejects_other_files(tmp_path):
    pytest.importorskip("fitz")
    from opinion_reflow.adapters import io_pdf

    with pytest.raises(FileNotFoundError):
        io_pdf.read(str(tmp_path / "absent.pdf"))
    other = tmp_path / "runs.txt"
    other.write_text("x")
    with pytest.raises(ValueError):
        io_pdf.read(str(other))


def test_pdf_span_without_origin_uses_bbox_bottom():
    pytest.importorskip("fitz")
    from opinion_reflow.adapters import io_pdf

    span = {"text": "Held", "bbox": (72.0, 88.0, 100.0, 100.0), "size": 12.0}
    run = io_pdf._run(span, 792.0)
    assert run == TextRun("Held", 72.0, 692.0, 12.0)
