from __future__ import annotations

import json
import sys
from pathlib import Path

from opinion_reflow.models import ParsedDocument


def dumps(doc: ParsedDocument) -> str:
    return json.dumps(doc.to_dict(), ensure_ascii=False, indent=2)


def write(doc: ParsedDocument, path: str | None = None) -> None:
    """Write ``doc`` as JSON to ``path``, or to stdout when no path is given."""
    text = dumps(doc)
    if path is None or path == "-":
        sys.stdout.write(text + "\n")
        return
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
