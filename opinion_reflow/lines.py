"""Line assembly from positioned text runs.

Runs are ordered top-to-bottom, left-to-right and merged into visual lines.
Two rendering artifacts are repaired on the way:

* small caps: a name like ``JUSTICE`` arrives as ``J`` at body size followed
  by ``USTICE`` at a reduced size; those runs are joined without a space.
* superscript footnote references float between baselines; they are snapped
  onto the nearest body line and emitted as ``{{fn:N}}`` markers.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import replace
from typing import Iterable, Sequence

from opinion_reflow import markers
from opinion_reflow.config import DEFAULT_LAYOUT, LayoutConfig
from opinion_reflow.models import Line, Page, TextRun

SEPARATOR_RE = re.compile(r"^[—―]{2,}$")
_SHORT_NUMBER = re.compile(r"^\d{1,2}$")
_ALL_CAPS = re.compile(r"^[A-Z]+$")
_TOP_MARGIN_ARTIFACTS = (
    re.compile(r"^Cite as:"),
    re.compile(r"^\d+$"),
    re.compile(r"^\(Slip Opinion\)"),
)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _reading_order(run: TextRun) -> tuple[int, float]:
    # Rounding absorbs sub-point baseline jitter within one visual line.
    return (-round_half_up(run.y), run.x)


def _is_top_margin_artifact(run: TextRun, height: float, layout: LayoutConfig) -> bool:
    if run.y <= height - layout.top_margin:
        return False
    text = run.text.strip()
    return any(p.search(text) for p in _TOP_MARGIN_ARTIFACTS)


def body_runs(page: Page, layout: LayoutConfig = DEFAULT_LAYOUT) -> list[TextRun]:
    """Runs below the header band and above the footer zone, in reading order."""
    band_low = page.height * layout.header_band_low
    kept = (
        r
        for r in page.runs
        if r.text.strip()
        and r.y < band_low
        and r.y >= layout.footer_cutoff
        and not _is_top_margin_artifact(r, page.height, layout)
    )
    return sorted(kept, key=_reading_order)


def body_font_size(runs: Iterable[TextRun], layout: LayoutConfig = DEFAULT_LAYOUT) -> int:
    """Largest font size that occurs often enough to be body text.

    Footnote-heavy pages can have more footnote-size runs than body-size
    runs, so the modal size is only a fallback.
    """
    counts = Counter(round_half_up(r.font_size) for r in runs)
    frequent = [size for size, n in counts.items() if n >= layout.body_font_min_count]
    if frequent:
        return max(frequent)
    return counts.most_common(1)[0][0] if counts else 0


def separator_y(runs: Iterable[TextRun], body_fs: float, layout: LayoutConfig = DEFAULT_LAYOUT) -> float | None:
    """Baseline of the rule separating body text from footnotes, if any."""
    if body_fs <= 0:
        return None
    return next(
        (
            r.y
            for r in runs
            if SEPARATOR_RE.match(r.text.strip())
            and r.font_size < body_fs - layout.separator_font_delta
        ),
        None,
    )


def _looks_superscript(run: TextRun, body_fs: float, layout: LayoutConfig) -> bool:
    return (
        body_fs > 0
        and _SHORT_NUMBER.match(run.text.strip()) is not None
        and run.font_size < body_fs - layout.superscript_font_delta
    )


def is_footnote_ref(
    run: TextRun, body_fs: float, sep_y: float | None, layout: LayoutConfig = DEFAULT_LAYOUT
) -> bool:
    above_separator = sep_y is None or run.y > sep_y + layout.separator_clearance
    return above_separator and _looks_superscript(run, body_fs, layout)


def snap_superscripts(
    runs: Sequence[TextRun],
    body_fs: float,
    sep_y: float | None,
    layout: LayoutConfig = DEFAULT_LAYOUT,
) -> list[TextRun]:
    """Move floating footnote references onto their owning line, then re-sort.

    Snapping proceeds in reading order and later candidates see the already
    snapped positions of earlier ones.
    """
    items = list(runs)
    window = layout.superscript_window
    for idx, item in enumerate(items):
        if not is_footnote_ref(item, body_fs, sep_y, layout):
            continue
        neighbours = [
            items[j]
            for j in range(max(0, idx - window), min(len(items), idx + window))
            if j != idx and not _looks_superscript(items[j], body_fs, layout)
        ]
        on_line = any(
            abs(round_half_up(o.y) - round_half_up(item.y)) <= layout.superscript_line_tolerance
            for o in neighbours
        )
        if on_line or not neighbours:
            continue
        nearest = min(neighbours, key=lambda o: abs(o.y - item.y))
        items[idx] = replace(item, y=nearest.y)
    return sorted(items, key=_reading_order)


def _is_small_caps_tail(run: TextRun, text: str, buffer: str, last_fs: float, layout: LayoutConfig) -> bool:
    return (
        _ALL_CAPS.match(text) is not None
        and run.font_size < last_fs - layout.small_caps_delta
        and buffer[-1:].isupper()
    )


def assemble_lines(
    runs: Sequence[TextRun],
    body_fs: float,
    sep_y: float | None,
    layout: LayoutConfig = DEFAULT_LAYOUT,
) -> list[Line]:
    """Merge ordered runs into lines, tracking mean font size and indent."""
    lines: list[Line] = []
    buffer, start_x, line_y = "", 0.0, 0.0
    sizes: list[float] = []
    last_y: float | None = None
    last_fs = 0.0

    def flush() -> None:
        if buffer.strip():
            avg = sum(sizes) / len(sizes) if sizes else 0.0
            lines.append(Line(buffer.strip(), avg, start_x, line_y))

    for run in runs:
        text = run.text.strip()
        ref = is_footnote_ref(run, body_fs, sep_y, layout)
        if last_y is not None and abs(run.y - last_y) > layout.line_gap:
            flush()
            buffer = markers.footnote_ref(text) if ref else run.text
            start_x, line_y, sizes = run.x, run.y, [run.font_size]
        else:
            if not buffer:
                start_x, line_y = run.x, run.y
            if ref:
                buffer += markers.footnote_ref(text)
            elif text and _is_small_caps_tail(run, text, buffer, last_fs, layout):
                buffer += text
            else:
                buffer += ("" if not buffer or buffer.endswith(" ") else " ") + run.text
            sizes.append(run.font_size)
        last_y, last_fs = run.y, run.font_size
    flush()
    return lines


def page_lines(page: Page, layout: LayoutConfig = DEFAULT_LAYOUT) -> tuple[list[Line], int]:
    """Assemble the body-area lines of ``page`` and return them with the body font size."""
    runs = body_runs(page, layout)
    body_fs = body_font_size(runs, layout)
    sep_y = separator_y(runs, body_fs, layout)
    snapped = snap_superscripts(runs, body_fs, sep_y, layout)
    return assemble_lines(snapped, body_fs, sep_y, layout), body_fs
