"""Paragraph assembly for a chapter's line blob."""

from __future__ import annotations

import logging
import re
from typing import Collection, Iterable, Sequence

from opinion_reflow import markers
from opinion_reflow.chapters import ChapterDraft
from opinion_reflow.config import DEFAULT_REGISTRY, AuthorRegistry
from opinion_reflow.models import Chapter, Footnote, Paragraph
from opinion_reflow.text_cleaning import (
    collapse_whitespace,
    dehyphenate,
    fix_small_caps,
    is_running_header,
)

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")
_TERMINAL = re.compile(r"[.!?;:'\")”]\s*$")
_MIN_LENGTH = 3


def _continues(previous: str, candidate: str) -> bool:
    """True when ``candidate`` resumes a sentence cut by a page or column break."""
    return (
        not markers.is_heading(previous)
        and candidate[:1].islower()
        and _TERMINAL.search(previous) is None
    )


def build_paragraphs(text: str, authors: AuthorRegistry = DEFAULT_REGISTRY) -> list[Paragraph]:
    """Split ``text`` on blank lines and repair each candidate paragraph."""
    out: list[str] = []
    for raw in _PARAGRAPH_BREAK.split(text):
        candidate = collapse_whitespace(raw)
        if not candidate:
            continue
        if markers.is_heading(candidate):
            out.append(candidate)
            continue
        if len(candidate) < _MIN_LENGTH:
            continue
        candidate = dehyphenate(candidate)
        if is_running_header(candidate):
            continue
        candidate = fix_small_caps(candidate, authors)
        if out and _continues(out[-1], candidate):
            out[-1] = dehyphenate(f"{out[-1]} {candidate}")
        else:
            out.append(candidate)
    return [Paragraph(p) for p in out]


def drop_unresolved_refs(paragraphs: Iterable[Paragraph], ids: Collection[int]) -> list[Paragraph]:
    """Remove footnote-reference markers whose id has no footnote in the chapter."""

    def _resolve(match: re.Match[str]) -> str:
        if int(match.group(1)) in ids:
            return match.group(0)
        logger.debug("dropping unresolved footnote reference %s", match.group(1))
        return ""

    resolved = (markers.FOOTNOTE_REF_RE.sub(_resolve, p.text).strip() for p in paragraphs)
    return [Paragraph(text) for text in resolved if text]


def finalize_footnotes(footnotes: dict[int, str]) -> list[Footnote]:
    return [Footnote(fn_id, dehyphenate(text)) for fn_id, text in sorted(footnotes.items())]


def build_chapter(draft: ChapterDraft, authors: AuthorRegistry = DEFAULT_REGISTRY) -> Chapter:
    footnotes = finalize_footnotes(draft.footnotes)
    paragraphs = drop_unresolved_refs(
        build_paragraphs(draft.text, authors), {f.id for f in footnotes}
    )
    return Chapter(
        id=draft.header.id,
        title=draft.header.title,
        author=draft.header.author,
        paragraphs=paragraphs,
        footnotes=footnotes,
    )


def build_chapters(drafts: Sequence[ChapterDraft], authors: AuthorRegistry = DEFAULT_REGISTRY) -> list[Chapter]:
    return [build_chapter(d, authors) for d in drafts]
