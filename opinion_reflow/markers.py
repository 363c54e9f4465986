"""Inline marker grammar embedded in paragraph text.

- heading: ``{{h1:I}}``, ``{{h2:A}}``, ``{{h3:1}}``
- footnote reference: ``{{fn:3}}``
- boilerplate line: ``{{bp:...}}``
- distinguished justice/joinder line: ``{{bpj:...}}``

Legal prose never contains ``{{``, so a leading ``{{`` marks a paragraph
as already classified.
"""

from __future__ import annotations

import re

HEADING_RE = re.compile(r"^\{\{h([1-3]):(.+)\}\}$")
FOOTNOTE_REF_RE = re.compile(r"\{\{fn:(\d+)\}\}")
BOILERPLATE_RE = re.compile(r"^\{\{bpj?:")


def heading(level: int, label: str) -> str:
    return f"{{{{h{level}:{label}}}}}"


def footnote_ref(number: int | str) -> str:
    return f"{{{{fn:{int(number)}}}}}"


def boilerplate(text: str) -> str:
    return f"{{{{bp:{text}}}}}"


def justice_line(text: str) -> str:
    return f"{{{{bpj:{text}}}}}"


def is_marked(text: str) -> bool:
    return text.startswith("{{")


def is_heading(text: str) -> bool:
    return HEADING_RE.match(text) is not None


def is_boilerplate(text: str) -> bool:
    return BOILERPLATE_RE.match(text) is not None


def footnote_refs(text: str) -> list[int]:
    return [int(n) for n in FOOTNOTE_REF_RE.findall(text)]
