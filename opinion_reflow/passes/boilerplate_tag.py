from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from opinion_reflow import markers
from opinion_reflow.boilerplate import tag_boilerplate
from opinion_reflow.framework import Artifact, register, with_metrics
from opinion_reflow.models import Chapter


def _tag(chapter: Chapter) -> Chapter:
    return replace(chapter, paragraphs=tag_boilerplate(chapter.paragraphs))


def _tagged(chapters: list[Chapter]) -> int:
    return sum(1 for c in chapters for p in c.paragraphs if markers.is_boilerplate(p.text))


@dataclass(frozen=True)
class _BoilerplateTagPass:
    """Mark each chapter's opening caption and procedural paragraphs.

    A document that fell back to a single synthetic chapter is left alone:
    without a recognized header there is no reliable opening block.
    """

    name = "boilerplate_tag"
    input_type = dict
    output_type = dict

    def __call__(self, a: Artifact) -> Artifact:
        doc = a.payload
        if not isinstance(doc, Mapping) or doc.get("type") != "chapters":
            return a
        chapters = list(doc.get("chapters") or [])
        if not doc.get("synthetic"):
            chapters = [_tag(c) for c in chapters]
        meta = with_metrics(a.meta, self.name, tagged=_tagged(chapters))
        return Artifact(payload={**doc, "chapters": chapters}, meta=meta)


boilerplate_tag = register(_BoilerplateTagPass())
