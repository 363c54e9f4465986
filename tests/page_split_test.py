import pytest

from opinion_reflow.models import Line
from opinion_reflow.page_split import (
    body_margin,
    find_separator,
    heading_level,
    parse_page,
    split_body,
    split_footnotes,
)


def _line(text: str, x: float = 72.0, size: float = 12.0, y: float = 500.0) -> Line:
    return Line(text=text, avg_font_size=size, start_x=x, y=y)


@pytest.mark.parametrize(
    "label, level",
    [("I", 1), ("IV", 1), ("IX", 1), ("XII", None), ("A", 2), ("3", 3), ("12", 3), ("Held", None)],
)
def test_heading_level(label: str, level: int | None) -> None:
    assert heading_level(label) == level


def test_centered_labels_become_heading_markers() -> None:
    lines = [
        _line("Text before."),
        _line("II", x=300),
        _line("B", x=300),
        _line("1", x=300),
        _line("Text after."),
    ]
    assert split_body(lines, 12, 72) == [
        "Text before.",
        "",
        "{{h1:II}}",
        "",
        "",
        "{{h2:B}}",
        "",
        "",
        "{{h3:1}}",
        "",
        "Text after.",
    ]


def test_centered_label_at_reduced_font_is_not_a_heading() -> None:
    assert split_body([_line("II", x=300, size=9.0)], 12, 72) == ["II"]


def test_indented_line_opens_a_paragraph() -> None:
    lines = [_line("First line."), _line("Second paragraph.", x=90), _line("continues.")]
    assert split_body(lines, 12, 72) == ["First line.", "", "Second paragraph.", "continues."]


def test_leading_indent_does_not_emit_blank_line() -> None:
    assert split_body([_line("Opening.", x=90)], 12, 72) == ["Opening."]


def test_body_margin_uses_body_font_lines_only() -> None:
    lines = [_line("a"), _line("b"), _line("c", x=90), _line("fn", x=60, size=9.0)] + [
        _line("fn", x=60, size=9.0) for _ in range(4)
    ]
    assert body_margin(lines, 12) == 72
    assert body_margin(lines, 0) == 0


def test_find_separator() -> None:
    lines = [_line("Body."), _line("———", size=9.0), _line("1", size=6.0)]
    assert find_separator(lines, 12) == 1
    assert find_separator(lines[:1], 12) is None


def test_split_footnotes_tracks_numbers_and_continuation() -> None:
    lines = [
        _line("of the statute.", size=9.0),
        _line("2", size=6.0),
        _line("See 10 U. S. C. §101.", size=9.0),
        _line("12", size=9.0),
        _line("3", size=6.0),
        _line("Text three.", size=9.0),
    ]
    footnotes, continuation = split_footnotes(lines, 12)
    assert footnotes == {2: "See 10 U. S. C. §101. 12", 3: "Text three."}
    assert continuation == "of the statute."


def test_parse_page_splits_body_and_footnotes(majority_page) -> None:
    result = parse_page(majority_page)
    assert result.header is not None and result.header.id == "opinion-majority"
    assert result.body_lines == [
        "JUSTICE SOTOMAYOR delivered the opinion of the Court.",
        "",
        "The question presented is whether the statute applies.{{fn:1}}",
        "We hold that it does.",
        "The judgment is reversed.",
    ]
    assert result.footnotes == {1: "The statute was amended in 2015."}
    assert result.footnote_continuation == ""


def test_parse_page_without_runs_is_empty(make_page) -> None:
    result = parse_page(make_page([]))
    assert result.header is None
    assert result.body_lines == []
    assert result.footnotes == {}
