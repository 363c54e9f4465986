"""PDF IO adapter: PyMuPDF spans to positioned text runs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF
import ftfy

from opinion_reflow.models import Page, TextRun


def _spans(page_dict: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    for block in page_dict.get("blocks", []):
        for line in block.get("lines", []):
            yield from line.get("spans", [])


def _baseline(span: Mapping[str, Any]) -> tuple[float, float]:
    """Baseline start of ``span``; the bbox bottom-left when no origin is given."""
    origin = span.get("origin")
    if origin:
        return float(origin[0]), float(origin[1])
    x0, _, _, y1 = span.get("bbox") or (0.0, 0.0, 0.0, 0.0)
    return float(x0), float(y1)


def _run(span: Mapping[str, Any], height: float) -> TextRun | None:
    text = ftfy.fix_text(span.get("text") or "")
    if not text.strip():
        return None
    x, y = _baseline(span)
    # PyMuPDF measures y downward from the top edge.
    return TextRun(text=text, x=float(x), y=height - float(y), font_size=float(span.get("size") or 0.0))


def page_from_fitz(page: "fitz.Page", number: int) -> Page:
    height = float(page.rect.height)
    runs = (_run(s, height) for s in _spans(page.get_text("dict")))
    return Page(height=height, runs=tuple(r for r in runs if r is not None), number=number)


def _pages(doc: Iterable["fitz.Page"], max_pages: int | None) -> Iterator[Page]:
    for number, page in enumerate(doc, start=1):
        if max_pages and number > max_pages:
            break
        yield page_from_fitz(page, number)


def read(path: str, max_pages: int | None = None) -> dict[str, Any]:
    """Return a ``page_runs`` payload for the PDF at ``path``."""
    pdf = Path(path)
    if not pdf.exists():
        raise FileNotFoundError(f"no such file: {path}")
    if pdf.suffix.lower() != ".pdf":
        raise ValueError(f"not a PDF: {path}")
    with fitz.open(str(pdf)) as doc:
        pages = list(_pages(doc, max_pages))
    return {"type": "page_runs", "source_path": str(pdf.resolve()), "pages": pages}
