import pytest

from opinion_reflow.config import AuthorRegistry
from opinion_reflow.text_cleaning import (
    collapse_whitespace,
    dehyphenate,
    fix_small_caps,
    is_running_header,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Eco - nomic", "Economic"),
        ("con- stitution", "constitution"),
        ("find - {{fn:2}} ings", "findings{{fn:2}}"),
        ("con - 1 solidated", "consolidated"),
        ("well-known", "well-known"),
        ("revenue-Raising", "revenue-Raising"),
        ("The eco - nomic impact", "The economic impact"),
        ("pages 10 - 12", "pages 10 - 12"),
    ],
)
def test_dehyphenate(raw: str, expected: str) -> None:
    assert dehyphenate(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("J USTICE THOMAS", "JUSTICE THOMAS"),
        ("C HIEF JUSTICE", "CHIEF JUSTICE"),
        ("R OBERTS", "ROBERTS"),
        ("T HOMAS", "THOMAS"),
        ("G ORSUCH", "GORSUCH"),
        ("K AVANAUGH", "KAVANAUGH"),
        ("B ARRETT", "BARRETT"),
        ("USTICE GORSUCH", "JUSTICE GORSUCH"),
        ("HIEF JUSTICE", "CHIEF JUSTICE"),
        ("JUSTICE OTOMAYOR, dissenting", "JUSTICE SOTOMAYOR, dissenting"),
        ("The court held that", "The court held that"),
    ],
)
def test_fix_small_caps(raw: str, expected: str) -> None:
    assert fix_small_caps(raw) == expected


def test_short_remainders_are_not_expanded() -> None:
    # "LITO" is long enough; a three-letter remainder would not be.
    assert fix_small_caps("JUSTICE LITO, concurring") == "JUSTICE ALITO, concurring"
    bench = AuthorRegistry(roster={"LEE": "Lee"})
    assert fix_small_caps("EE, dissenting", bench) == "EE, dissenting"
    assert fix_small_caps("L EE, dissenting", bench) == "LEE, dissenting"


def test_remainder_requires_name_boundary() -> None:
    assert fix_small_caps("HOMASTON") == "HOMASTON"
    assert fix_small_caps("HOMAS' view") == "THOMAS' view"


@pytest.mark.parametrize(
    "text",
    [
        "4 BOST v. ILLINOIS STATE BOARD OF ELECTIONS",
        "Cite as: 607 U. S. ___ (2026)",
        "SUPREME COURT OF THE UNITED STATES",
    ],
)
def test_running_headers(text: str) -> None:
    assert is_running_header(text)


def test_body_text_is_not_a_running_header() -> None:
    assert not is_running_header("The SUPREME COURT OF THE UNITED STATES held otherwise.")


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  a \n b\t c ") == "a b c"
