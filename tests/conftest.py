from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from opinion_reflow.models import Page, TextRun  # noqa: E402

PAGE_HEIGHT = 792.0
HEADER_Y = 650.0
WORD_SPACING = 40.0


def run(text: str, x: float, y: float, font_size: float = 12.0) -> TextRun:
    return TextRun(text=text, x=x, y=y, font_size=font_size)


def words(text: str, x: float, y: float, font_size: float = 12.0) -> list[TextRun]:
    """One run per word, laid out left to right from ``x``."""
    return [run(w, x + i * WORD_SPACING, y, font_size) for i, w in enumerate(text.split())]


def page(runs: Sequence[TextRun], height: float = PAGE_HEIGHT, number: int = 0) -> Page:
    return Page(height=height, runs=tuple(runs), number=number)


def _syllabus_page() -> Page:
    body = (
        (90, 600, "The petitioners challenged the Illinois statute under"),
        (72, 586, "which the State counts mail ballots received after"),
        (90, 572, "the close of Election Day, and they sought relief."),
        (90, 558, "The District Court dismissed the suit for lack of standing."),
        (72, 544, "The Court of Appeals affirmed."),
        (72, 530, "Held: The petitioners have standing."),
        (72, 516, "Candidates have a concrete interest in the rules."),
    )
    runs = [run("Syllabus", 280, HEADER_Y)]
    for x, y, text in body:
        runs.extend(words(text, x, y))
    return page(runs)


def _majority_page() -> Page:
    runs = [
        run("Opinion of the Court", 240, HEADER_Y),
        run("J", 72, 600),
        run("USTICE", 80, 600, 9.5),
        run("S", 130, 600),
        run("OTOMAYOR", 138, 600, 9.5),
        *words("delivered the opinion of the Court.", 220, 600),
        *words("The question presented is whether the statute applies.", 90, 586),
        run("1", 400, 590, 7.0),
        *words("We hold that it does.", 72, 572),
        *words("The judgment is reversed.", 72, 558),
        run("——————", 72, 300, 9.0),
        run("1", 72, 290, 6.0),
        *words("The statute was amended in 2015.", 80, 284, 9.0),
    ]
    return page(runs)


def _dissent_page() -> Page:
    runs = [
        run("T", 200, HEADER_Y, 11.0),
        run("HOMAS", 210, HEADER_Y, 9.0),
        run(",", 250, HEADER_Y, 11.0),
        run("J., dissenting", 260, HEADER_Y, 11.0),
        *words("JUSTICE THOMAS, with whom JUSTICE ALITO joins, dissenting.", 72, 600),
        *words("The Court errs today.", 90, 586),
        *words("I would affirm the judgment below.", 72, 572),
    ]
    return page(runs)


@pytest.fixture
def syllabus_page() -> Page:
    return _syllabus_page()


@pytest.fixture
def majority_page() -> Page:
    return _majority_page()


@pytest.fixture
def dissent_page() -> Page:
    return _dissent_page()


@pytest.fixture
def opinion_pages() -> list[Page]:
    """Three-page slip opinion: syllabus, majority with one footnote, dissent."""
    return [_syllabus_page(), _majority_page(), _dissent_page()]


@pytest.fixture
def make_run() -> Callable[..., TextRun]:
    return run


@pytest.fixture
def make_words() -> Callable[..., list[TextRun]]:
    return words


@pytest.fixture
def make_page() -> Callable[..., Page]:
    return page
