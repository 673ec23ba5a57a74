"""Tests for markdown rendering of definition subtrees."""

from dictionary_wiki.core.tree.markdown import render_subtree_as_markdown
from dictionary_wiki.core.tree.primitives import Tree, find


def test_render_includes_descendants_and_bodies(sample_tree: Tree) -> None:
    md = render_subtree_as_markdown(find(sample_tree, "1.1"))
    lines = md.splitlines()
    assert lines[0] == "- Authorizations (id=1.1)"
    assert "    - Auth Decision Date (id=1.1.1)" in lines
    assert "      keywords: authorization, decision date, SLA" in lines
    assert "      > Description:" in lines
    assert "    - Service Type Mapping (id=1.1.2)" in lines


def test_render_without_bodies(sample_tree: Tree) -> None:
    md = render_subtree_as_markdown(find(sample_tree, "2"), include_bodies=False)
    assert "Description" not in md
    assert "- Contracted Rates (id=2.1)" in md


def test_render_marks_archived(sample_tree: Tree) -> None:
    md = render_subtree_as_markdown(find(sample_tree, "1.2"))
    assert "- Claim Adjudication Status [archived] (id=1.2.1)" in md


def test_render_truncates_at_max_depth(sample_tree: Tree) -> None:
    md = render_subtree_as_markdown(find(sample_tree, "1"), max_depth=1)
    assert "Auth Decision Date" not in md
    assert "    - Authorizations (id=1.1)" in md
    assert "        - ... (2 more children, id=1.1)" in md
    assert "        - ... (1 more child, id=1.2)" in md


def test_render_depth_zero_shows_only_node(sample_tree: Tree) -> None:
    md = render_subtree_as_markdown(find(sample_tree, "1.1.1"), max_depth=0)
    assert md.startswith("- Auth Decision Date (id=1.1.1)\n")
    assert "more child" not in md
