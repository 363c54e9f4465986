"""Turn positioned runs into per-page header, body lines and footnotes.

Accepts ``{"type": "page_runs", "pages": [...], "source_url": ...}`` or a
bare list of pages. Pages may be ``Page`` objects or mappings in the JSON
shape read by :mod:`opinion_reflow.adapters.io_json`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from opinion_reflow.config import AuthorRegistry, LayoutConfig
from opinion_reflow.framework import Artifact, register, with_metrics
from opinion_reflow.models import Page, coerce_pages
from opinion_reflow.page_split import parse_page


def _page_runs(payload: Any) -> dict[str, Any] | None:
    if isinstance(payload, Mapping) and payload.get("type") == "page_runs":
        return dict(payload)
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        return {"type": "page_runs", "pages": list(payload), "source_url": ""}
    return None


def limit_pages(pages: Sequence[Page], max_pages: int | None) -> list[Page]:
    return list(pages[:max_pages]) if max_pages and max_pages > 0 else list(pages)


@dataclass(frozen=True)
class _PageParsePass:
    name = "page_parse"
    input_type = dict
    output_type = dict

    max_pages: int | None = None
    authors: Mapping[str, str] | None = None
    layout: Mapping[str, Any] | None = None

    def __call__(self, a: Artifact) -> Artifact:
        doc = _page_runs(a.payload)
        if doc is None:
            return a
        pages = limit_pages(coerce_pages(doc.get("pages")), self.max_pages)
        authors = AuthorRegistry.from_mapping(self.authors)
        layout = LayoutConfig.from_options(self.layout)
        results = [parse_page(page, authors, layout) for page in pages]
        meta = with_metrics(
            a.meta,
            self.name,
            pages=len(pages),
            headers=sum(1 for r in results if r.header is not None),
            footnotes=sum(len(r.footnotes) for r in results),
        )
        payload = {
            **doc,
            "type": "page_results",
            "source_url": str(doc.get("source_url") or ""),
            "pages": pages,
            "page_results": results,
        }
        return Artifact(payload=payload, meta=meta)


page_parse = register(_PageParsePass())
