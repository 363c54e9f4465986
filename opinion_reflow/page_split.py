"""Per-page split of assembled lines into body text and footnotes."""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Sequence

from opinion_reflow import markers
from opinion_reflow.config import DEFAULT_LAYOUT, DEFAULT_REGISTRY, AuthorRegistry, LayoutConfig
from opinion_reflow.headers import classify_header, header_band_text
from opinion_reflow.lines import SEPARATOR_RE, page_lines, round_half_up
from opinion_reflow.models import Line, Page, PageResult

logger = logging.getLogger(__name__)

_FOOTNOTE_NUMBER = re.compile(r"^\d{1,2}$")

# Centered heading labels, checked in order: level 1, 2, 3.
HEADING_LEVELS: tuple[tuple[int, re.Pattern[str]], ...] = (
    (1, re.compile(r"^(I{1,4}V?|VI{0,3}|IX|X{0,3})$")),
    (2, re.compile(r"^[A-Z]$")),
    (3, re.compile(r"^\d{1,2}$")),
)


def find_separator(lines: Sequence[Line], body_fs: float, layout: LayoutConfig = DEFAULT_LAYOUT) -> int | None:
    """Index of the footnote separator line, or None."""
    return next(
        (
            i
            for i, line in enumerate(lines)
            if SEPARATOR_RE.match(line.text.strip())
            and line.avg_font_size > 0
            and body_fs > 0
            and line.avg_font_size < body_fs - layout.separator_font_delta
        ),
        None,
    )


def body_margin(lines: Sequence[Line], body_fs: float, layout: LayoutConfig = DEFAULT_LAYOUT) -> int:
    """Most frequent rounded start-x among body-font lines."""
    if body_fs <= 0:
        return 0
    starts = Counter(
        round_half_up(line.start_x)
        for line in lines
        if line.avg_font_size > 0 and line.avg_font_size >= body_fs - layout.separator_font_delta
    )
    return starts.most_common(1)[0][0] if starts else 0


def heading_level(text: str) -> int | None:
    return next((level for level, pattern in HEADING_LEVELS if pattern.match(text)), None)


def split_body(
    lines: Sequence[Line],
    body_fs: float,
    margin: float,
    layout: LayoutConfig = DEFAULT_LAYOUT,
) -> list[str]:
    """Body lines with heading markers and blank-line paragraph breaks."""
    out: list[str] = []
    for line in lines:
        text = line.text.strip()
        indent = line.start_x - margin
        body_font = abs(line.avg_font_size - body_fs) < layout.body_font_tolerance
        centered = margin > 0 and indent > layout.centered_indent and body_font
        level = heading_level(text) if centered else None
        if level is not None:
            out.extend(["", markers.heading(level, text), ""])
            continue
        indented = margin > 0 and layout.paragraph_indent < indent < layout.centered_indent and body_font
        if indented and out:
            out.append("")
        out.append(line.text)
    return out


def split_footnotes(
    lines: Sequence[Line], body_fs: float, layout: LayoutConfig = DEFAULT_LAYOUT
) -> tuple[dict[int, str], str]:
    """Footnotes keyed by number, plus text continued from the previous page.

    A new footnote starts only at a standalone 1-2 digit line set well below
    footnote text size; footnote text itself may open with numerals.
    """
    footnotes: dict[int, str] = {}
    continuation: list[str] = []
    current_id, current_text = 0, []
    for line in lines:
        text = line.text.strip()
        if _FOOTNOTE_NUMBER.match(text) and line.avg_font_size < body_fs - layout.footnote_number_font_delta:
            if current_id > 0:
                footnotes[current_id] = " ".join(current_text).strip()
            current_id, current_text = int(text), []
            continue
        if SEPARATOR_RE.match(text):
            continue
        (current_text if current_id > 0 else continuation).append(text)
    if current_id > 0:
        footnotes[current_id] = " ".join(current_text).strip()
    return footnotes, " ".join(continuation).strip()


def parse_page(
    page: Page,
    authors: AuthorRegistry = DEFAULT_REGISTRY,
    layout: LayoutConfig = DEFAULT_LAYOUT,
) -> PageResult:
    """Classify the header of ``page`` and split its text into body and footnotes."""
    header = classify_header(header_band_text(page, layout), authors)
    lines, body_fs = page_lines(page, layout)
    sep = find_separator(lines, body_fs, layout)
    body = lines if sep is None else lines[:sep]
    footnotes, continuation = split_footnotes(lines[sep + 1 :], body_fs, layout) if sep is not None else ({}, "")
    logger.debug(
        "page %d: header=%s lines=%d footnotes=%d",
        page.number,
        header.id if header else None,
        len(lines),
        len(footnotes),
    )
    return PageResult(
        header=header,
        body_lines=split_body(body, body_fs, body_margin(lines, body_fs, layout), layout),
        footnotes=footnotes,
        footnote_continuation=continuation,
    )
