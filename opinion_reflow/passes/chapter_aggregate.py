from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from opinion_reflow.chapters import aggregate_chapters
from opinion_reflow.framework import Artifact, register, with_metrics


@dataclass(frozen=True)
class _ChapterAggregatePass:
    """Group page results into chapter drafts keyed by running header."""

    name = "chapter_aggregate"
    input_type = dict
    output_type = dict

    def __call__(self, a: Artifact) -> Artifact:
        doc = a.payload
        if not isinstance(doc, Mapping) or doc.get("type") != "page_results":
            return a
        drafts = aggregate_chapters(doc.get("page_results") or [])
        synthetic = any(d.synthetic for d in drafts)
        meta = with_metrics(a.meta, self.name, chapters=len(drafts), synthetic=synthetic)
        payload = {**doc, "type": "chapter_drafts", "drafts": drafts, "synthetic": synthetic}
        return Artifact(payload=payload, meta=meta)


chapter_aggregate = register(_ChapterAggregatePass())
