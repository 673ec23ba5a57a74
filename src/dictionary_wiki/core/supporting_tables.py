"""Supporting tables referenced from rich-text bodies by inline markers."""

import re
from collections.abc import Iterable

from dictionary_wiki.errors import NotFoundError
from dictionary_wiki.models.definition import TEXT_FIELDS, Definition, SupportingTable

# Bodies link to a table with an anchor carrying this attribute.
_MARKER_RE = re.compile(r"""data-supporting-table-id=["']([^"']+)["']""")


def referenced_table_ids(markup: str) -> tuple[str, ...]:
    """Table ids marked in a body, first occurrence order, without repeats."""
    return tuple(dict.fromkeys(_MARKER_RE.findall(markup)))


def definition_table_ids(definition: Definition) -> tuple[str, ...]:
    """Table ids referenced by a definition's refs list and its bodies."""
    ids = [ref.id for ref in definition.supporting_tables]
    for field, _label in TEXT_FIELDS:
        ids.extend(referenced_table_ids(getattr(definition, field)))
    return tuple(dict.fromkeys(ids))


class SupportingTableRegistry:
    """Id to table lookup."""

    def __init__(self, tables: Iterable[SupportingTable] = ()) -> None:
        self._tables = {t.id: t for t in tables}

    def __contains__(self, table_id: object) -> bool:
        return table_id in self._tables

    @property
    def tables(self) -> tuple[SupportingTable, ...]:
        return tuple(self._tables.values())

    def resolve(self, table_id: str) -> SupportingTable:
        try:
            return self._tables[table_id]
        except KeyError:
            raise NotFoundError(table_id, kind="Supporting table") from None

    def for_definition(self, definition: Definition) -> tuple[SupportingTable, ...]:
        """Resolvable tables for a definition; dangling references are skipped."""
        return tuple(
            self._tables[table_id]
            for table_id in definition_table_ids(definition)
            if table_id in self._tables
        )
