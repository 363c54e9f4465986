from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from opinion_reflow.config import AuthorRegistry
from opinion_reflow.framework import Artifact, register, with_metrics
from opinion_reflow.paragraphs import build_chapters


@dataclass(frozen=True)
class _ParagraphBuildPass:
    """Split each chapter draft into repaired paragraphs and final footnotes."""

    name = "paragraph_build"
    input_type = dict
    output_type = dict

    authors: Mapping[str, str] | None = None

    def __call__(self, a: Artifact) -> Artifact:
        doc = a.payload
        if not isinstance(doc, Mapping) or doc.get("type") != "chapter_drafts":
            return a
        chapters = build_chapters(doc.get("drafts") or [], AuthorRegistry.from_mapping(self.authors))
        meta = with_metrics(
            a.meta,
            self.name,
            paragraphs=sum(len(c.paragraphs) for c in chapters),
            footnotes=sum(len(c.footnotes) for c in chapters),
        )
        payload = {**doc, "type": "chapters", "chapters": chapters}
        return Artifact(payload=payload, meta=meta)


paragraph_build = register(_ParagraphBuildPass())
