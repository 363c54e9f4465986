"""Aggregation of consecutive same-header pages into chapters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from opinion_reflow.models import PageResult, SectionHeader

logger = logging.getLogger(__name__)

PREAMBLE = SectionHeader("Preamble", "preamble", "Preamble")
SINGLE_OPINION = SectionHeader("Opinion", "opinion", "Opinion")


@dataclass
class ChapterDraft:
    """Body lines and footnotes collected for one chapter, before paragraphs."""

    header: SectionHeader
    lines: list[str] = field(default_factory=list)
    footnotes: dict[int, str] = field(default_factory=dict)
    synthetic: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class _AggregationState:
    """Top-to-bottom accumulator threaded through the page walk."""

    header: SectionHeader | None = None
    lines: list[str] = field(default_factory=list)
    footnotes: dict[int, str] = field(default_factory=dict)
    drafts: list[ChapterDraft] = field(default_factory=list)

    def flush(self, header: SectionHeader) -> None:
        self.drafts.append(ChapterDraft(_unique(header, self.drafts), self.lines, self.footnotes))
        self.lines, self.footnotes = [], {}

    def add_continuation(self, text: str) -> None:
        # Known limitation: assumes the continued footnote is the highest one seen.
        if not text or not self.footnotes:
            return
        last = max(self.footnotes)
        self.footnotes[last] = f"{self.footnotes[last]} {text}".strip()

    def add_footnotes(self, footnotes: dict[int, str]) -> None:
        for fn_id, text in footnotes.items():
            existing = self.footnotes.get(fn_id)
            self.footnotes[fn_id] = f"{existing} {text}" if existing else text


def _unique(header: SectionHeader, drafts: Sequence[ChapterDraft]) -> SectionHeader:
    """Suffix the id of a header that reappears after a different chapter."""
    taken = {d.header.id for d in drafts}
    if header.id not in taken:
        return header
    n = 2
    while f"{header.id}-{n}" in taken:
        n += 1
    return SectionHeader(header.raw_text, f"{header.id}-{n}", header.title, header.author)


def _single_opinion(pages: Sequence[PageResult]) -> ChapterDraft:
    lines = [line for i, p in enumerate(pages) for line in ([""] if i else []) + p.body_lines]
    return ChapterDraft(SINGLE_OPINION, lines, {}, synthetic=True)


def aggregate_chapters(pages: Iterable[PageResult]) -> list[ChapterDraft]:
    """Group pages, in order, into chapter drafts.

    Pages without a recognized header fold into the open chapter. Body text
    seen before the first header becomes a Preamble chapter.
    """
    ordered = list(pages)
    state = _AggregationState()
    for page in ordered:
        header = page.header
        if header and (state.header is None or header.id != state.header.id):
            if state.header is not None:
                state.flush(state.header)
            elif state.lines:
                logger.debug("flushing preamble of %d lines", len(state.lines))
                state.flush(PREAMBLE)
            state.header = header
            state.lines, state.footnotes = [], {}
        state.lines.extend(page.body_lines)
        state.add_continuation(page.footnote_continuation)
        state.add_footnotes(page.footnotes)

    if state.header is not None and state.lines:
        state.flush(state.header)
    if not state.drafts:
        logger.debug("no chapters recognized; synthesizing a single opinion")
        return [_single_opinion(ordered)]
    return state.drafts
