"""Tests for bookmark tracking."""

from dictionary_wiki.core.bookmarks import BookmarkSet


def test_toggle_returns_new_state() -> None:
    marks = BookmarkSet()
    assert marks.toggle("1.1.1") is True
    assert "1.1.1" in marks
    assert marks.toggle("1.1.1") is False
    assert not marks.is_bookmarked("1.1.1")


def test_initial_ids_are_deduplicated_in_order() -> None:
    marks = BookmarkSet(["b", "a", "b"])
    assert marks.to_list() == ["b", "a"]
    assert len(marks) == 2


def test_add_and_discard_are_idempotent() -> None:
    marks = BookmarkSet()
    marks.add("x")
    marks.add("x")
    marks.discard("x")
    marks.discard("x")
    assert marks.to_list() == []
