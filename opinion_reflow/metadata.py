"""Case metadata recovered from the opening pages.

The case title is read off page 1 geometry: the caption sits between the
court banner and the certiorari/docket line. When the banner is missing the
first body lines are searched for a ``<party> v. <party>`` caption instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from opinion_reflow.boilerplate import COURT_BANNER
from opinion_reflow.models import UNKNOWN_CASE, PageResult, TextRun

logger = logging.getLogger(__name__)

CAPTION_SEARCH_DEPTH = 100.0
TITLE_LINE_TOLERANCE = 3.0
FALLBACK_LINES = 20
METADATA_PAGES = 3

_CAPTION_END = re.compile(r"^(CERTIORARI|ON WRIT|No\.\s)")
_TEXT_CAPTION = re.compile(r"^(.+?)\s+v\s*\.\s+(.+?)(?:\s{2,}|$)")
_ET_AL = re.compile(r"\bET AL\b(?:\s*\.)?", re.IGNORECASE)
_DOCKET = re.compile(r"No\.\s*([\d\-–]+)")
_DECIDED = re.compile(r"Decided\s+(\w+\s+\d+,\s+\d{4})")
_BRACKETED_DATE = re.compile(r"\[(\w+\s+\d+,\s+\d{4})\]")


@dataclass(frozen=True)
class CaseMetadata:
    case_title: str = UNKNOWN_CASE
    docket_number: str = ""
    decided_date: str = ""


def _normalize_title(text: str) -> str:
    text = re.sub(r"\s+", " ", text)
    text = _ET_AL.sub("et al.", text)
    text = re.sub(r"\s+v\s*\.\s*", " v. ", text)
    text = re.sub(r"\s+v\s+(?=[A-Z])", " v. ", text, count=1)
    text = re.sub(r"\.\s*\.", ".", text)
    text = re.sub(r"\s+", " ", text).strip()
    return re.sub(r"[,\s]+$", "", text)


def _group_lines(runs: Iterable[TextRun], tolerance: float = TITLE_LINE_TOLERANCE) -> list[str]:
    lines: list[str] = []
    current, last_y = "", None
    for run in runs:
        text = run.text.strip()
        if last_y is not None and abs(run.y - last_y) > tolerance:
            if current.strip():
                lines.append(current.strip())
            current = text
        else:
            current += (" " if current else "") + text
        last_y = run.y
    if current.strip():
        lines.append(current.strip())
    return lines


def case_title_from_runs(runs: Sequence[TextRun]) -> str:
    """Title from the caption block under the court banner on page 1."""
    ordered = sorted((r for r in runs if r.text.strip()), key=lambda r: (-r.y, r.x))
    banner_y = next((r.y for r in ordered if COURT_BANNER in r.text), None)
    if banner_y is None:
        return UNKNOWN_CASE

    floor = banner_y - CAPTION_SEARCH_DEPTH
    end_y = next((r.y for r in ordered if r.y < banner_y and _CAPTION_END.match(r.text.strip())), None)
    if end_y is not None:
        floor = max(floor, end_y)

    caption = [r for r in ordered if floor < r.y < banner_y and r.text.strip() != "Syllabus"]
    if not caption:
        return UNKNOWN_CASE
    return _normalize_title(" ".join(_group_lines(caption))) or UNKNOWN_CASE


def case_title_from_text(text: str) -> str:
    """Fallback title from the first body lines."""
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:FALLBACK_LINES]:
        match = _TEXT_CAPTION.match(line)
        if match:
            title = _normalize_title(f"{match.group(1)} v. {match.group(2)}")
            return title or UNKNOWN_CASE
    return UNKNOWN_CASE


def docket_number(text: str) -> str:
    match = _DOCKET.search(text)
    return match.group(1).replace("–", "-") if match else ""


def decided_date(text: str) -> str:
    match = _DECIDED.search(text) or _BRACKETED_DATE.search(text)
    return match.group(1) if match else ""


def opening_text(pages: Sequence[PageResult], count: int = METADATA_PAGES) -> str:
    return "\n".join("\n".join(p.body_lines) for p in pages[:count])


def extract_metadata(first_page_runs: Sequence[TextRun], pages: Sequence[PageResult]) -> CaseMetadata:
    text = opening_text(pages)
    title = case_title_from_runs(first_page_runs)
    if title == UNKNOWN_CASE:
        logger.debug("court banner not found on page 1; searching body text for a caption")
        title = case_title_from_text(text)
    return CaseMetadata(title, docket_number(text), decided_date(text))
