"""Tests for the text diff engine."""

import pytest
from hypothesis import given, strategies as st

from dictionary_wiki.core.diff.engine import (
    Operation,
    Span,
    deletion_view,
    diff_text,
    has_changed,
    insertion_view,
    render_markup,
)


def _side(spans: tuple[Span, ...], skip: Operation) -> str:
    return "".join(s.text for s in spans if s.operation is not skip)


@pytest.mark.parametrize(
    ("a", "b"),
    [
        ("", "abc"),
        ("abc", ""),
        ("The cat sat.", "The dog sat."),
        ("<p>Used in reports.</p>", "<p>Used in regulatory reports and dashboards.</p>"),
        ("mississippi", "missouri"),
        ("line one\nline two\n", "line one\nline 2\nline three\n"),
    ],
)
def test_diff_reconstructs_both_sides(a: str, b: str) -> None:
    spans = diff_text(a, b)
    assert _side(spans, Operation.INSERT) == a
    assert _side(spans, Operation.DELETE) == b


@given(st.text(), st.text())
def test_diff_reconstructs_any_pair(a: str, b: str) -> None:
    spans = diff_text(a, b)
    assert _side(spans, Operation.INSERT) == a
    assert _side(spans, Operation.DELETE) == b
    assert has_changed(a, b) is (a != b)


def test_identical_text_is_one_equal_span() -> None:
    assert diff_text("same", "same") == (Span(Operation.EQUAL, "same"),)


def test_empty_against_empty_is_single_empty_equal() -> None:
    assert diff_text("", "") == (Span(Operation.EQUAL, ""),)


def test_no_adjacent_equal_spans_and_no_empty_spans() -> None:
    spans = diff_text("The quick brown fox", "The quick red fox jumps")
    for left, right in zip(spans, spans[1:], strict=False):
        assert not (left.operation is Operation.EQUAL and right.operation is Operation.EQUAL)
    assert all(s.text for s in spans)


def test_deletions_come_before_insertions_between_equalities() -> None:
    spans = diff_text("The cat sat.", "The dog sat.")
    ops = [s.operation for s in spans]
    assert ops == [Operation.EQUAL, Operation.DELETE, Operation.INSERT, Operation.EQUAL]
    assert spans[1].text == "cat"
    assert spans[2].text == "dog"


def test_insertions_land_on_word_boundaries() -> None:
    spans = diff_text(
        "Authorization decision date for inpatient stays",
        "Authorization determination date for all inpatient stays",
    )
    assert Span(Operation.INSERT, "all ") in spans
    assert Span(Operation.EQUAL, "inpatient stays") in spans


def test_cleanup_folds_coincidental_short_equalities() -> None:
    # Raw edit scripts keep the shared "a"; cleanup folds it into one edit.
    spans = diff_text("abcdefaghijkl", "uvwxyzamnopqr")
    assert spans == (
        Span(Operation.DELETE, "abcdefaghijkl"),
        Span(Operation.INSERT, "uvwxyzamnopqr"),
    )


def test_views_split_before_and_after() -> None:
    spans = diff_text("The cat sat.", "The dog sat.")
    assert "".join(s.text for s in deletion_view(spans)) == "The cat sat."
    assert "".join(s.text for s in insertion_view(spans)) == "The dog sat."


def test_has_changed() -> None:
    assert has_changed("a", "b")
    assert not has_changed("same", "same")
    assert not has_changed("", "")


def test_render_markup_wraps_edits() -> None:
    spans = diff_text("The cat sat.", "The dog sat.")
    assert render_markup(spans) == "The <del>cat</del><ins>dog</ins> sat."
