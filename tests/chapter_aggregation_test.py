from opinion_reflow.chapters import aggregate_chapters
from opinion_reflow.headers import classify_header
from opinion_reflow.models import PageResult

SYLLABUS = classify_header("Syllabus")
MAJORITY = classify_header("Opinion of the Court")
DISSENT = classify_header("T HOMAS , J., dissenting")


def test_pages_group_by_header_in_order() -> None:
    pages = [
        PageResult(SYLLABUS, ["Syllabus text."]),
        PageResult(None, ["More syllabus."]),
        PageResult(MAJORITY, ["Majority text."]),
        PageResult(DISSENT, ["Dissent text."]),
    ]
    drafts = aggregate_chapters(pages)
    assert [d.header.id for d in drafts] == ["syllabus", "opinion-majority", "dissenting-thomas"]
    assert drafts[0].text == "Syllabus text.\nMore syllabus."
    assert not any(d.synthetic for d in drafts)


def test_body_before_first_header_becomes_preamble() -> None:
    drafts = aggregate_chapters(
        [PageResult(None, ["Cover page."]), PageResult(MAJORITY, ["Opinion."])]
    )
    assert [(d.header.id, d.header.title) for d in drafts] == [
        ("preamble", "Preamble"),
        ("opinion-majority", "Opinion of the Court"),
    ]


def test_final_chapter_without_lines_is_not_flushed() -> None:
    drafts = aggregate_chapters(
        [PageResult(MAJORITY, ["Opinion."]), PageResult(DISSENT, [])]
    )
    assert [d.header.id for d in drafts] == ["opinion-majority"]


def test_continuation_appends_to_highest_footnote() -> None:
    pages = [
        PageResult(MAJORITY, ["a"], {1: "First.", 2: "Second begins"}),
        PageResult(None, ["b"], {3: "Third."}, "and ends here."),
    ]
    (draft,) = aggregate_chapters(pages)
    assert draft.footnotes == {1: "First.", 2: "Second begins and ends here.", 3: "Third."}


def test_continuation_without_prior_footnote_is_dropped() -> None:
    (draft,) = aggregate_chapters([PageResult(MAJORITY, ["a"], {}, "orphan text")])
    assert draft.footnotes == {}


def test_repeated_footnote_id_appends() -> None:
    pages = [
        PageResult(MAJORITY, ["a"], {4: "Start of note."}),
        PageResult(None, ["b"], {4: "More of note."}),
    ]
    (draft,) = aggregate_chapters(pages)
    assert draft.footnotes == {4: "Start of note. More of note."}


def test_footnotes_do_not_leak_across_chapters() -> None:
    pages = [
        PageResult(MAJORITY, ["a"], {1: "Majority note."}),
        PageResult(DISSENT, ["b"], {}, "stray continuation"),
    ]
    majority, dissent = aggregate_chapters(pages)
    assert majority.footnotes == {1: "Majority note."}
    assert dissent.footnotes == {}


def test_reappearing_header_gets_unique_id() -> None:
    pages = [
        PageResult(MAJORITY, ["a"]),
        PageResult(DISSENT, ["b"]),
        PageResult(MAJORITY, ["c"]),
    ]
    assert [d.header.id for d in aggregate_chapters(pages)] == [
        "opinion-majority",
        "dissenting-thomas",
        "opinion-majority-2",
    ]


def test_no_headers_synthesizes_single_chapter() -> None:
    pages = [PageResult(None, ["Page one."], {1: "note"}), PageResult(None, ["Page two."])]
    (draft,) = aggregate_chapters(pages)
    assert (draft.header.id, draft.header.title) == ("opinion", "Opinion")
    assert draft.synthetic
    assert draft.lines == ["Page one.", "", "Page two."]
    assert draft.footnotes == {}


def test_empty_document_yields_one_empty_chapter() -> None:
    (draft,) = aggregate_chapters([])
    assert draft.synthetic and draft.lines == []
