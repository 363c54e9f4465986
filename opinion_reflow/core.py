from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import fields, is_dataclass, replace
from functools import reduce
from typing import Any, Final

from opinion_reflow.config import PipelineSpec
from opinion_reflow.framework import Artifact, Pass, registry
from opinion_reflow.metadata import CaseMetadata
from opinion_reflow.models import Chapter, Page, ParsedDocument

DEFAULT_PIPELINE: Final[tuple[str, ...]] = (
    "page_parse",
    "chapter_aggregate",
    "paragraph_build",
    "boilerplate_tag",
    "metadata_extract",
)

Timer = Callable[[], float]
_Timed = tuple[Artifact, dict[str, float]]


def default_spec() -> PipelineSpec:
    return PipelineSpec(pipeline=list(DEFAULT_PIPELINE))


def _pass_steps(spec: PipelineSpec) -> list[str]:
    """Return pipeline steps, defaulting when empty; error on unknown ones."""
    steps = list(spec.pipeline) or list(DEFAULT_PIPELINE)
    regs = registry()
    unknown = [s for s in steps if s not in regs]
    if unknown:
        raise KeyError(f"unknown steps: {unknown}")
    return steps


def _prepare_pass(pass_obj: Pass, overrides: Mapping[str, Any]) -> Pass:
    """Return a copy of ``pass_obj`` with matching dataclass fields replaced."""
    if not overrides or not is_dataclass(pass_obj):
        return pass_obj
    names = {f.name for f in fields(pass_obj)}
    updates = {k: v for k, v in overrides.items() if k in names}
    return replace(pass_obj, **updates) if updates else pass_obj


def _step_options(spec: PipelineSpec, name: str, max_pages: int | None) -> dict[str, Any]:
    """Per-step options with the top-level roster and page limit folded in."""
    opts = dict(spec.options.get(name, {}))
    if spec.authors and "authors" not in opts:
        opts["authors"] = dict(spec.authors)
    if max_pages is not None:
        opts["max_pages"] = max_pages
    return opts


def configure_passes(spec: PipelineSpec, max_pages: int | None = None) -> list[Pass]:
    return [
        _prepare_pass(registry()[name], _step_options(spec, name, max_pages))
        for name in _pass_steps(spec)
    ]


def _input_artifact(pages: Any, source_url: str) -> Artifact:
    if isinstance(pages, Mapping):
        payload = dict(pages)
        payload.setdefault("type", "page_runs")
    else:
        payload = {"type": "page_runs", "pages": list(pages or [])}
    if source_url:
        payload["source_url"] = source_url
    return Artifact(payload=payload, meta={"metrics": {}})


def _time_step(timer: Timer | None) -> Callable[[_Timed, Pass], _Timed]:
    def _apply(acc: _Timed, p: Pass) -> _Timed:
        a, timings = acc
        if timer is None:
            return p(a), timings
        t0 = timer()
        a = p(a)
        return a, {**timings, p.name: timer() - t0}

    return _apply


def to_document(payload: Any) -> ParsedDocument:
    """Assemble a ``ParsedDocument`` from a final payload, filling sentinels."""
    doc = payload if isinstance(payload, Mapping) else {}
    metadata = doc.get("metadata") or CaseMetadata()
    chapters = [c for c in doc.get("chapters") or [] if isinstance(c, Chapter)]
    return ParsedDocument(
        case_title=metadata.case_title,
        docket_number=metadata.docket_number,
        decided_date=metadata.decided_date,
        source_url=str(doc.get("source_url") or ""),
        chapters=chapters,
    )


def run_parse(
    pages: Sequence[Page | Mapping[str, Any]] | Mapping[str, Any] | None,
    source_url: str = "",
    spec: PipelineSpec | None = None,
    max_pages: int | None = None,
    timer: Timer | None = None,
) -> tuple[ParsedDocument, Artifact, dict[str, float]]:
    """Run the configured passes over ``pages``.

    Returns the document, the final artifact (for metrics) and per-pass
    timings. Timings are only recorded when a ``timer`` is supplied.
    """
    passes = configure_passes(spec or default_spec(), max_pages)
    artifact, timings = reduce(_time_step(timer), passes, (_input_artifact(pages, source_url), {}))
    return to_document(artifact.payload), artifact, timings


def parse_document(
    pages: Sequence[Page | Mapping[str, Any]] | Mapping[str, Any] | None,
    source_url: str = "",
    spec: PipelineSpec | None = None,
    max_pages: int | None = None,
) -> ParsedDocument:
    """Recover the chapter/paragraph/footnote structure of a slip opinion."""
    doc, _, _ = run_parse(pages, source_url, spec, max_pages)
    return doc


def run_inspect() -> dict[str, dict[str, str]]:
    """Return a lightweight view of the registry for CLI/tests."""
    return {
        name: {"input": str(p.input_type), "output": str(p.output_type)}
        for name, p in registry().items()
    }
