"""Tests for full-text search."""

from dictionary_wiki.core.search.searcher import search_definitions
from dictionary_wiki.core.tree.primitives import Tree
from dictionary_wiki.models.definition import Definition


def test_search_matches_bodies(sample_tree: Tree) -> None:
    results, total = search_definitions(sample_tree, "fee_schedules")
    assert total == 1
    assert results[0].definition.id == "2.1"
    assert "**FEE_SCHEDULES**" in results[0].snippet


def test_search_ranks_name_hits_first(sample_tree: Tree) -> None:
    results, _total = search_definitions(sample_tree, "claim")
    # Claims (name) outranks definitions that only mention claims in bodies.
    assert results[0].definition.id == "1.2"


def test_search_excludes_archived_by_default(sample_tree: Tree) -> None:
    results, _ = search_definitions(sample_tree, "adjudication")
    assert results == []
    results, total = search_definitions(sample_tree, "adjudication", include_archived=True)
    assert total == 1
    assert results[0].definition.id == "1.2.1"


def test_search_breadcrumbs(sample_tree: Tree) -> None:
    results, _ = search_definitions(sample_tree, "Service Type")
    assert [c.name for c in results[0].breadcrumbs] == ["Member Management", "Authorizations"]


def test_search_empty_query(sample_tree: Tree) -> None:
    assert search_definitions(sample_tree, "   ") == ([], 0)


def test_search_pagination(sample_tree: Tree) -> None:
    all_results, total = search_definitions(sample_tree, "p", limit=50)
    page, page_total = search_definitions(sample_tree, "p", limit=2, offset=1)
    assert page_total == total
    assert [r.definition.id for r in page] == [r.definition.id for r in all_results[1:3]]


def test_snippet_marks_name_hit(sample_tree: Tree) -> None:
    results, _ = search_definitions(sample_tree, "rates")
    assert results[0].snippet == "Contracted **Rates**"
    assert results[0].score == 3.0 + 2.0


def test_snippet_marks_hit_after_case_folding_expansion() -> None:
    # "İ" lowercases to two characters.
    tree = (Definition(id="x", name="İstanbul Contracted Rates", module="Provider"),)
    results, _ = search_definitions(tree, "rates")
    assert results[0].snippet == "İstanbul Contracted **Rates**"
