"""Section header classification.

Every page of a slip opinion carries a running label in a fixed band near
the top ("Syllabus", "Opinion of the Court", "T HOMAS , J., dissenting").
The label decides which chapter the page belongs to. Rules are evaluated
in precedence order and the first one that yields a header wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from opinion_reflow.config import DEFAULT_LAYOUT, DEFAULT_REGISTRY, AuthorRegistry, LayoutConfig
from opinion_reflow.models import Page, SectionHeader, TextRun

logger = logging.getLogger(__name__)

_SPLIT_NAME = re.compile(r"^([A-Z])\s+([A-Z]{2,})$")
_DIRECT_NAME = re.compile(r"^([A-Z]{2,})$")
_CHIEF = re.compile(r"C\.\s*J\.")
_OPINION_OF = re.compile(r"^Opinion of\s+([A-Z]\s*[A-Z]+)\s*,\s*(?:C\.\s*)?J\.$")
_SEPARATE_OPINION = re.compile(
    r"^([A-Z]\s*[A-Z]+)\s*,\s*(?:C\.\s*)?J\.\s*,\s*"
    r"(?i:(concurring|dissenting)(?:\s+in\s+(?:the\s+)?(?:judgment|part))?)"
)

Classifier = Callable[[str, AuthorRegistry], Optional[SectionHeader]]


@dataclass(frozen=True)
class HeaderRule:
    name: str
    precedence: int
    classify: Classifier


def resolve_author(token: str, authors: AuthorRegistry) -> str | None:
    """Return the registry surname for a drop-cap split or direct token."""
    text = token.strip()
    split = _SPLIT_NAME.match(text)
    if split and split.group(1) + split.group(2) in authors:
        return split.group(1) + split.group(2)
    direct = _DIRECT_NAME.match(text)
    if direct and direct.group(1) in authors:
        return direct.group(1)
    return None


def _syllabus(raw: str, _: AuthorRegistry) -> SectionHeader | None:
    return SectionHeader(raw, "syllabus", "Syllabus") if raw == "Syllabus" else None


def _opinion_of_the_court(raw: str, _: AuthorRegistry) -> SectionHeader | None:
    if raw != "Opinion of the Court":
        return None
    return SectionHeader(raw, "opinion-majority", "Opinion of the Court")


def _per_curiam(raw: str, _: AuthorRegistry) -> SectionHeader | None:
    if not re.fullmatch(r"Per Curiam", raw, re.IGNORECASE):
        return None
    return SectionHeader(raw, "opinion-per-curiam", "Per Curiam")


def _opinion_of_justice(raw: str, authors: AuthorRegistry) -> SectionHeader | None:
    match = _OPINION_OF.match(raw)
    name = resolve_author(match.group(1), authors) if match else None
    if name is None:
        return None
    author = authors.display_name(name)
    # The Chief Justice writing for the Court is the majority opinion.
    if _CHIEF.search(raw):
        return SectionHeader(raw, "opinion-majority", "Opinion of the Court", author)
    return SectionHeader(raw, f"opinion-{name.lower()}", f"Opinion of {author}", author)


def _separate_opinion(raw: str, authors: AuthorRegistry) -> SectionHeader | None:
    match = _SEPARATE_OPINION.match(raw)
    name = resolve_author(match.group(1), authors) if match else None
    if name is None or match is None:
        return None
    kind = match.group(2).lower()
    author = authors.display_name(name)
    return SectionHeader(raw, f"{kind}-{name.lower()}", f"{author}, {kind}", author)


DEFAULT_RULES: tuple[HeaderRule, ...] = (
    HeaderRule("syllabus", 10, _syllabus),
    HeaderRule("opinion_of_the_court", 20, _opinion_of_the_court),
    HeaderRule("per_curiam", 30, _per_curiam),
    HeaderRule("opinion_of_justice", 40, _opinion_of_justice),
    HeaderRule("separate_opinion", 50, _separate_opinion),
)


def classify_header(
    text: str,
    authors: AuthorRegistry = DEFAULT_REGISTRY,
    rules: Iterable[HeaderRule] = DEFAULT_RULES,
) -> SectionHeader | None:
    """Return the chapter identity for a header-band label, or None."""
    raw = text.strip()
    if not raw:
        return None
    ordered = sorted(rules, key=lambda r: r.precedence)
    header = next((h for h in (r.classify(raw, authors) for r in ordered) if h), None)
    if header is None:
        logger.debug("unrecognized section header: %r", raw)
    return header


def in_header_band(run: TextRun, height: float, layout: LayoutConfig = DEFAULT_LAYOUT) -> bool:
    return height * layout.header_band_low <= run.y <= height * layout.header_band_high


def header_band_text(page: Page, layout: LayoutConfig = DEFAULT_LAYOUT) -> str:
    """Join the header-band runs of ``page`` left to right."""
    band = sorted((r for r in page.runs if in_header_band(r, page.height, layout)), key=lambda r: r.x)
    return " ".join(r.text.strip() for r in band)
