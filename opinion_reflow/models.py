"""Document model shared by every stage.

Page-side types (``TextRun``, ``Page``, ``Line``, ``PageResult``) describe
what was seen on a rendered page; document-side types (``Chapter``,
``Paragraph``, ``Footnote``, ``ParsedDocument``) describe the reflowable
result handed to a renderer. ``to_dict`` emits the camelCase keys renderers
consume.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

UNKNOWN_CASE = "Unknown Case"


def _coerce_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class TextRun:
    """A positioned glyph run; origin bottom-left, y increasing upward."""

    text: str
    x: float
    y: float
    font_size: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TextRun:
        size = data.get("fontSize", data.get("font_size"))
        return cls(
            text=str(data.get("text") or ""),
            x=_coerce_float(data.get("x")),
            y=_coerce_float(data.get("y")),
            font_size=abs(_coerce_float(size)),
        )


def _coerce_number(value: Any, default: int) -> int:
    try:
        return int(value) or default
    except (TypeError, ValueError, OverflowError):
        return default


def _coerce_runs(raw: Any) -> tuple[TextRun, ...]:
    """Runs from ``raw``, skipping entries that are neither runs nor mappings."""
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        return ()
    runs = (
        run if isinstance(run, TextRun) else TextRun.from_mapping(run)
        for run in raw
        if isinstance(run, (TextRun, Mapping))
    )
    return tuple(r for r in runs if r.text.strip())


@dataclass(frozen=True)
class Page:
    height: float
    runs: tuple[TextRun, ...] = ()
    number: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], number: int = 0) -> Page:
        return cls(
            height=_coerce_float(data.get("height")),
            runs=_coerce_runs(data.get("runs")),
            number=_coerce_number(data.get("number"), number),
        )


def coerce_pages(pages: Sequence[Page | Mapping[str, Any]] | None) -> list[Page]:
    """Normalize caller input into ``Page`` objects, numbering from 1.

    Entries that are neither pages nor mappings are dropped; the remaining
    pages keep their position in the input as their default number.
    """
    if isinstance(pages, (str, bytes, Mapping)) or not isinstance(pages, Iterable):
        return []
    return [
        (
            Page(p.height, _coerce_runs(p.runs), p.number or i)
            if isinstance(p, Page)
            else Page.from_mapping(p, number=i)
        )
        for i, p in enumerate(pages, start=1)
        if isinstance(p, (Page, Mapping))
    ]


@dataclass(frozen=True)
class Line:
    """Runs merged by visual adjacency into one rendered line."""

    text: str
    avg_font_size: float
    start_x: float
    y: float


@dataclass(frozen=True)
class SectionHeader:
    raw_text: str
    id: str
    title: str
    author: str | None = None


@dataclass
class PageResult:
    header: SectionHeader | None
    body_lines: list[str] = field(default_factory=list)
    footnotes: dict[int, str] = field(default_factory=dict)
    footnote_continuation: str = ""


@dataclass(frozen=True)
class Footnote:
    id: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text}


@dataclass(frozen=True)
class Paragraph:
    """Paragraph text, possibly carrying inline markers (see ``markers``)."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass
class Chapter:
    id: str
    title: str
    author: str | None = None
    paragraphs: list[Paragraph] = field(default_factory=list)
    footnotes: list[Footnote] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "paragraphs": [p.to_dict() for p in self.paragraphs],
            "footnotes": [f.to_dict() for f in self.footnotes],
        }


@dataclass
class ParsedDocument:
    case_title: str = UNKNOWN_CASE
    docket_number: str = ""
    decided_date: str = ""
    source_url: str = ""
    chapters: list[Chapter] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "caseTitle": self.case_title,
            "docketNumber": self.docket_number,
            "decidedDate": self.decided_date,
            "sourceUrl": self.source_url,
            "chapters": [c.to_dict() for c in self.chapters],
        }
