"""Tests for serialization and JSON export."""

import pytest

from dictionary_wiki.core.export.exporter import (
    build_json_export,
    definition_to_dict,
    expand_selection,
    select_for_export,
)
from dictionary_wiki.core.tree.primitives import Tree, find
from dictionary_wiki.errors import NotFoundError


def test_definition_to_dict_uses_camel_case(sample_tree: Tree) -> None:
    data = definition_to_dict(find(sample_tree, "2.1"))
    assert data["technicalDetails"] == "<p>Stored in <code>FEE_SCHEDULES</code>.</p>"
    assert data["isArchived"] is False
    assert data["relatedDefinitions"] == []
    assert "children" not in data
    assert "isBookmarked" not in data


def test_definition_to_dict_nests_children(sample_tree: Tree) -> None:
    data = definition_to_dict(find(sample_tree, "1.1"))
    assert [c["id"] for c in data["children"]] == ["1.1.1", "1.1.2"]
    assert data["children"][0]["revisions"][0]["ticketId"] == "MPM-1234"


def test_expand_selection_takes_descendants(sample_tree: Tree) -> None:
    assert expand_selection(sample_tree, "1.1") == ("1.1", "1.1.1", "1.1.2")
    assert expand_selection(sample_tree, "2.2") == ("2.2",)


def test_expand_selection_unknown_id(sample_tree: Tree) -> None:
    with pytest.raises(NotFoundError):
        expand_selection(sample_tree, "missing")


def test_select_for_export_is_preorder(sample_tree: Tree) -> None:
    selected = select_for_export(sample_tree, {"2.1", "1.1.2", "1"})
    assert [d.id for d in selected] == ["1", "1.1.2", "2.1"]


def test_build_json_export_envelope(sample_tree: Tree) -> None:
    export = build_json_export(
        select_for_export(sample_tree, {"1.1", "1.1.1"}),
        exported_on="2024-03-01",
        origin="https://wiki.example.com",
    )
    assert export["disclaimer"] == (
        "This is a copy of definitions as of 2024-03-01. "
        "Please go to https://wiki.example.com to view the updated definitions."
    )
    assert [d["id"] for d in export["data"]] == ["1.1", "1.1.1"]
    # Entries are flat; descendants only appear when selected themselves.
    assert all("children" not in d for d in export["data"])
