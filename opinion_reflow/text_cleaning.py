"""text_cleaning

Public API (stable):
- dehyphenate
- fix_small_caps
- is_running_header
- collapse_whitespace

Notes:
- Functions are pure and idempotent on their own output.
- Only hyphens with whitespace after them are treated as line-break
  hyphenation; ``well-known`` is a real compound and stays as is.
"""

from __future__ import annotations

import re
from functools import lru_cache

from opinion_reflow.config import DEFAULT_REGISTRY, AuthorRegistry

# ---------------------------------------------------------------------------
# De-hyphenation
# ---------------------------------------------------------------------------

# "find - {{fn:2}} ings" -> "findings{{fn:2}}"
_MARKER_SPLIT_RE = re.compile(r"(\w+)\s*-\s+(\{\{fn:\d+\}\})\s+([a-z]\w*)")
# "con - 1 solidated" -> "consolidated" (bare reference number mid-word)
_NUMBER_SPLIT_RE = re.compile(r"(\w)\s*-\s+\d+\s+([a-z])")
# "Eco - nomic", "con- stitution"
_LINE_SPLIT_RE = re.compile(r"(\w)\s*-\s+([a-z])")

_WHITESPACE_RE = re.compile(r"\s+")


def dehyphenate(text: str) -> str:
    """Rejoin words hyphenated across a line break."""
    text = _MARKER_SPLIT_RE.sub(lambda m: m.group(1) + m.group(3) + m.group(2), text)
    text = _NUMBER_SPLIT_RE.sub(r"\1\2", text)
    return _LINE_SPLIT_RE.sub(r"\1\2", text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


# ---------------------------------------------------------------------------
# Running headers leaking into body text
# ---------------------------------------------------------------------------

_RUNNING_HEADERS = (
    re.compile(r"^\d+\s+[A-Z\s]+v\.\s+[A-Z\s]+$"),  # "4 BOST v. ILLINOIS"
    re.compile(r"^Cite as:"),
    re.compile(r"^SUPREME COURT OF THE UNITED STATES$"),
)


def is_running_header(text: str) -> bool:
    return any(p.search(text) for p in _RUNNING_HEADERS)


# ---------------------------------------------------------------------------
# Small caps
# ---------------------------------------------------------------------------

_STRUCTURAL_SPLITS = (
    (re.compile(r"J\s+USTICE"), "JUSTICE"),
    (re.compile(r"C\s+HIEF"), "CHIEF"),
)
_ORPHANS = (
    (re.compile(r"\bUSTICE\b"), "JUSTICE"),
    (re.compile(r"\bHIEF\b"), "CHIEF"),
)
_MIN_REMAINDER = 4


@lru_cache(maxsize=8)
def _name_rules(
    authors: AuthorRegistry,
) -> tuple[tuple[tuple[re.Pattern[str], str], ...], tuple[tuple[re.Pattern[str], str], ...]]:
    surnames = authors.surnames()
    split = tuple(
        (re.compile(rf"{re.escape(n[0])}\s+{re.escape(n[1:])}\b"), n) for n in surnames
    )
    # A bare remainder is only trusted right before a name boundary.
    remainder = tuple(
        (re.compile(rf"\b{re.escape(n[1:])}\b(?=\s*[,.'’\s])"), n)
        for n in surnames
        if len(n) - 1 >= _MIN_REMAINDER
    )
    return split, remainder


def _apply(text: str, rules: tuple[tuple[re.Pattern[str], str], ...]) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def fix_small_caps(text: str, authors: AuthorRegistry = DEFAULT_REGISTRY) -> str:
    """Collapse small-caps renderings back into whole words.

    "J USTICE T HOMAS" -> "JUSTICE THOMAS", "USTICE GORSUCH" -> "JUSTICE GORSUCH".
    """
    split_names, remainders = _name_rules(authors)
    text = _apply(text, _STRUCTURAL_SPLITS)
    text = _apply(text, split_names)
    text = _apply(text, _ORPHANS)
    return _apply(text, remainders)
