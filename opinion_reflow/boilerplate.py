"""Boilerplate tagging for the leading paragraphs of a chapter.

Every chapter opens with fixed caption and procedural text: the court
banner, case caption, certiorari line, docket/argued/decided line and the
line naming the delivering or dissenting justice. Those paragraphs are
wrapped in ``{{bp:...}}`` markers, the justice/joinder line in
``{{bpj:...}}``, so a renderer can de-emphasize them.

Tagging runs in two phases:

1. The first three paragraphs are checked for text that must be cut apart
   before it can be tagged: the syllabus disclaimer, the revision notice and
   a court-banner blob that swallowed the whole caption.
2. An end-of-boilerplate anchor (delivery line, joinder line or
   "Per Curiam.") is searched for in the first 15 paragraphs. Without one
   (the Syllabus has no delivery line), a short run of caption-like lines is
   tagged instead.

A chapter that already carries boilerplate markers is returned unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from opinion_reflow import markers
from opinion_reflow.models import Paragraph

logger = logging.getLogger(__name__)

COURT_BANNER = "SUPREME COURT OF THE UNITED STATES"

PHASE_ONE_LIMIT = 3
SCAN_LIMIT = 15
MERGED_BODY_LENGTH = 500
CAPTION_MAX_LENGTH = 250
PROCEDURAL_MAX_LENGTH = 350

_SYLLABUS_NOTE = re.compile(r"^NOTE: Where it is feasible")
# Detroit Timber & Lumber, 200 U.S. 321, 337 closes the disclaimer.
_NOTE_ANCHOR = re.compile(r"\b321,\s*337\.\s*")
_REVISION_NOTICE = re.compile(r"^NOTICE: This opinion")
_DECIDED = re.compile(r"Decided\s+\w+\s+\d{1,2},\s+\d{4}\s*")
_CERT_ANCHOR = re.compile(r"\s+(CERTIORARI\b|ON WRIT OF\b)")
_DOCKET_ANCHOR = re.compile(r"\s+(Nos?\.\s+\d)")
_SYLLABUS_LABEL = re.compile(r"^Syllabus\s*")


@dataclass(frozen=True)
class AnchorRule:
    """A paragraph shape that ends the boilerplate block."""

    name: str
    patterns: tuple[re.Pattern[str], ...]

    def matches(self, text: str) -> bool:
        return all(p.search(text) for p in self.patterns)


END_ANCHORS: tuple[AnchorRule, ...] = (
    AnchorRule(
        "delivery_line",
        (
            re.compile(r"^(THE )?(CHIEF )?JUSTICE\b"),
            re.compile(r"delivered|announced|concurring|dissenting"),
        ),
    ),
    AnchorRule(
        "joinder_line",
        (re.compile(r"\bjoin\b", re.IGNORECASE), re.compile(r"concurring|dissenting")),
    ),
    AnchorRule("per_curiam", (re.compile(r"^Per Curiam\b", re.IGNORECASE),)),
)

_CAPTION = (re.compile(r"\bv\.\s*$"), re.compile(r"^[A-Z][A-Z\s.,]+\bv\s*\.\s"))
_CERT_LINE = (re.compile(r"CERTIORARI\b"), re.compile(r"PETITIONER"), re.compile(r"ON WRIT OF"))
_DOCKET_LINE = (re.compile(r"^Nos?\.\s+\d{2}[–\-]\d+"), re.compile(r"Argued\s+\w+\s+\d"))


def _any(patterns: Sequence[re.Pattern[str]], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def split_at_decided(text: str) -> tuple[str, str] | None:
    """Cut ``text`` after its "Decided <date>"; None when there is no date."""
    match = _DECIDED.search(text)
    if match is None:
        return None
    return text[: match.end()].strip(), text[match.end() :].strip()


def split_court_header(text: str) -> tuple[list[str], str]:
    """Carve a banner-led header blob into boilerplate parts and trailing body.

    ``"SUPREME COURT ... Syllabus BOST v. ILLINOIS CERTIORARI TO ... No. 24–568.
    Argued ...—Decided January 14, 2026 <body>"`` yields the banner, the
    caption, the certiorari line and the docket line, plus ``<body>``.
    """
    decided = split_at_decided(text)
    remaining, body = decided if decided else (text, "")

    parts: list[str] = []
    if COURT_BANNER in remaining:
        end = remaining.index(COURT_BANNER) + len(COURT_BANNER)
        parts.append(remaining[:end].strip())
        remaining = remaining[end:].strip()

    remaining = _SYLLABUS_LABEL.sub("", remaining)

    cert = _CERT_ANCHOR.search(remaining)
    if cert:
        before, remaining = remaining[: cert.start()].strip(), remaining[cert.start() :].strip()
        if before:
            parts.append(before)

    docket = _DOCKET_ANCHOR.search(remaining)
    if docket:
        before, after = remaining[: docket.start()].strip(), remaining[docket.start() :].strip()
        parts.extend(p for p in (before, after) if p)
    elif remaining:
        parts.append(remaining)
    return parts, body


def _split_note(text: str) -> list[str]:
    anchor = _NOTE_ANCHOR.search(text)
    if anchor is None:
        return [markers.boilerplate(text)]
    end = text.find(".", anchor.start() + 4) + 1
    note, rest = text[:end].strip(), text[end:].strip()
    return [markers.boilerplate(note)] + ([rest] if rest else [])


def _phase_one(texts: list[str]) -> list[str]:
    i = 0
    while i < min(len(texts), PHASE_ONE_LIMIT):
        text = texts[i]
        if markers.is_marked(text):
            pass
        elif _SYLLABUS_NOTE.match(text):
            texts[i : i + 1] = _split_note(text)
        elif _REVISION_NOTICE.match(text):
            texts[i] = markers.boilerplate(text)
        elif text.startswith(COURT_BANNER):
            parts, body = split_court_header(text)
            texts[i : i + 1] = [markers.boilerplate(p) for p in parts] + ([body] if body else [])
            i += max(len(parts) - 1, 0)
        i += 1
    return texts


def find_end_anchor(texts: Sequence[str], limit: int = SCAN_LIMIT) -> int | None:
    """Index of the first delivery/joinder/per-curiam paragraph."""
    for i, text in enumerate(texts[:limit]):
        if markers.is_marked(text):
            continue
        rule = next((r for r in END_ANCHORS if r.matches(text)), None)
        if rule is not None:
            logger.debug("boilerplate ends at paragraph %d (%s)", i, rule.name)
            return i
    return None


def _tag_through_anchor(texts: list[str], anchor: int) -> list[str]:
    i = 0
    while i <= anchor and i < len(texts):
        text = texts[i]
        if markers.is_marked(text):
            pass
        elif i == anchor:
            texts[i] = markers.justice_line(text)
        elif len(text) < MERGED_BODY_LENGTH:
            texts[i] = markers.boilerplate(text)
        else:
            decided = split_at_decided(text)
            if decided:
                prefix, body = decided
                texts[i : i + 1] = [markers.boilerplate(prefix)] + ([body] if body else [])
                if body:
                    anchor += 1
                    i += 1
        i += 1
    return texts


def _caption_kind(text: str) -> str | None:
    """Return "caption" for a case-name line, "procedural" for cert/docket lines."""
    procedural = len(text) < PROCEDURAL_MAX_LENGTH and (
        _any(_CERT_LINE, text) or _any(_DOCKET_LINE, text)
    )
    if procedural:
        return "procedural"
    if len(text) < CAPTION_MAX_LENGTH and _any(_CAPTION, text):
        return "caption"
    return None


def _tag_caption_prefix(texts: list[str], limit: int) -> list[str]:
    for i in range(min(limit, len(texts))):
        text = texts[i]
        if markers.is_marked(text):
            continue
        kind = _caption_kind(text)
        if kind is not None:
            texts[i] = markers.boilerplate(text)
            if kind == "caption":
                continue
            break
        decided = split_at_decided(text)
        if decided:
            prefix, body = decided
            texts[i : i + 1] = [markers.boilerplate(prefix)] + ([body] if body else [])
        break
    return texts


def tag_boilerplate(paragraphs: Sequence[Paragraph]) -> list[Paragraph]:
    """Return ``paragraphs`` with the leading boilerplate block marked."""
    if any(markers.is_boilerplate(p.text) for p in paragraphs):
        return list(paragraphs)
    texts = _phase_one([p.text for p in paragraphs])
    limit = min(len(texts), SCAN_LIMIT)
    anchor = find_end_anchor(texts, limit)
    if anchor is not None:
        texts = _tag_through_anchor(texts, anchor)
    else:
        texts = _tag_caption_prefix(texts, limit)
    return [Paragraph(t) for t in texts]
