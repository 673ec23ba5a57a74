"""Tests for supporting table references."""

import pytest

from dictionary_wiki.core.supporting_tables import (
    SupportingTableRegistry,
    definition_table_ids,
    referenced_table_ids,
)
from dictionary_wiki.errors import NotFoundError
from dictionary_wiki.models.definition import Definition, SupportingTable, SupportingTableRef
from dictionary_wiki.seed import seed_supporting_tables


def test_referenced_table_ids_finds_markers() -> None:
    markup = (
        '<p>See <a href="#" data-supporting-table-id="cms-compliance">CMS</a> and '
        "<a data-supporting-table-id='vw-authactiontime'>view</a> and "
        '<a data-supporting-table-id="cms-compliance">again</a>.</p>'
    )
    assert referenced_table_ids(markup) == ("cms-compliance", "vw-authactiontime")


def test_definition_table_ids_merges_refs_and_bodies() -> None:
    d = Definition(
        id="x",
        name="X",
        module="M",
        technical_details='<a data-supporting-table-id="timestamp-changed">t</a>',
        supporting_tables=(SupportingTableRef(id="auth-status-codes", name="Codes"),),
    )
    assert definition_table_ids(d) == ("auth-status-codes", "timestamp-changed")


def test_registry_resolve() -> None:
    registry = SupportingTableRegistry(seed_supporting_tables())
    table = registry.resolve("auth-status-codes")
    assert table.headers == ("Code", "Description", "Is Final Status?")
    assert "cms-compliance" in registry
    with pytest.raises(NotFoundError) as exc:
        registry.resolve("nope")
    assert exc.value.kind == "Supporting table"


def test_registry_for_definition_skips_dangling() -> None:
    registry = SupportingTableRegistry([SupportingTable(id="a", name="A")])
    d = Definition(
        id="x",
        name="X",
        module="M",
        supporting_tables=(SupportingTableRef(id="a", name="A"), SupportingTableRef(id="b", name="B")),
    )
    assert [t.id for t in registry.for_definition(d)] == ["a"]
