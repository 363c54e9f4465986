"""JSON IO adapter for pre-extracted text runs.

Accepted shapes::

    {"pages": [{"height": 792, "runs": [{"text": "...", "x": 72, "y": 600, "fontSize": 12}]}]}
    [{"height": 792, "runs": [...]}]
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from opinion_reflow.models import coerce_pages


def _raw_pages(data: Any) -> list[Any]:
    pages = data.get("pages") if isinstance(data, Mapping) else data
    if not isinstance(pages, list) or not all(isinstance(p, Mapping) for p in pages):
        raise ValueError("expected a list of pages or an object with a 'pages' list")
    return pages


def read(path: str, max_pages: int | None = None) -> dict[str, Any]:
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"no such file: {path}")
    try:
        data = json.loads(src.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"malformed JSON in {path}: {exc}") from exc
    pages = coerce_pages(_raw_pages(data))
    if max_pages and max_pages > 0:
        pages = pages[:max_pages]
    source_url = data.get("source_url", data.get("sourceUrl", "")) if isinstance(data, Mapping) else ""
    return {
        "type": "page_runs",
        "source_path": str(src.resolve()),
        "source_url": str(source_url or ""),
        "pages": pages,
    }
