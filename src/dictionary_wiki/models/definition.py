"""Domain models for the data-dictionary wiki."""

from __future__ import annotations

import enum
from dataclasses import dataclass

# Fields that ``DefinitionStore.update`` is allowed to replace.
CONTENT_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "module",
        "keywords",
        "description",
        "technical_details",
        "examples",
        "usage",
        "supporting_tables",
        "attachments",
        "notes",
        "related_definitions",
    }
)

# Rich-text bodies compared between revisions, with their display labels.
TEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("description", "Description"),
    ("technical_details", "Technical Details"),
    ("examples", "Examples"),
    ("usage", "Usage"),
)


@dataclass(frozen=True)
class SupportingTableRef:
    """Pointer from a definition to a supporting table."""

    id: str
    name: str


@dataclass(frozen=True)
class SupportingTable:
    """A named tabular dataset referenced from rich-text bodies."""

    id: str
    name: str
    description: str = ""
    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class Attachment:
    """A file attached to a definition."""

    name: str
    url: str
    size: str = ""
    type: str = "FILE"


@dataclass(frozen=True)
class Note:
    """A user note on a definition."""

    id: str
    author: str
    date: str
    content: str
    author_id: str = ""
    avatar: str = ""
    is_shared: bool = False


@dataclass(frozen=True)
class Snapshot:
    """Content of a definition as it was when a revision was recorded."""

    name: str
    module: str
    keywords: tuple[str, ...] = ()
    description: str = ""
    technical_details: str = ""
    examples: str = ""
    usage: str = ""
    is_archived: bool = False
    supporting_tables: tuple[SupportingTableRef, ...] = ()


@dataclass(frozen=True)
class Revision:
    """An immutable historical record of a definition."""

    ticket_id: str
    date: str
    developer: str
    description: str
    snapshot: Snapshot


@dataclass(frozen=True)
class Definition:
    """A node in the definition tree: a module container or a concept."""

    id: str
    name: str
    module: str
    keywords: tuple[str, ...] = ()
    description: str = ""
    technical_details: str = ""
    examples: str = ""
    usage: str = ""
    revisions: tuple[Revision, ...] = ()
    is_archived: bool = False
    supporting_tables: tuple[SupportingTableRef, ...] = ()
    attachments: tuple[Attachment, ...] = ()
    notes: tuple[Note, ...] = ()
    related_definitions: tuple[str, ...] = ()
    children: tuple[Definition, ...] | None = None
    # Set by view projection only; never persisted.
    is_bookmarked: bool = False

    @property
    def is_module(self) -> bool:
        return bool(self.children)

    def snapshot(self) -> Snapshot:
        """Capture the current content fields."""
        return Snapshot(
            name=self.name,
            module=self.module,
            keywords=self.keywords,
            description=self.description,
            technical_details=self.technical_details,
            examples=self.examples,
            usage=self.usage,
            is_archived=self.is_archived,
            supporting_tables=self.supporting_tables,
        )


@dataclass(frozen=True)
class Notification:
    """A change notice for a bookmarked definition."""

    id: str
    definition_id: str
    definition_name: str
    message: str
    date: str
    read: bool = False


class ActivityType(enum.StrEnum):
    VIEW = "View"
    EDIT = "Edit"
    CREATE = "Create"
    DOWNLOAD = "Download"
    BOOKMARK = "Bookmark"
    ARCHIVE = "Archive"
    DUPLICATE = "Duplicate"
    SEARCH = "Search"


@dataclass(frozen=True)
class ActivityEntry:
    """One user action recorded in the activity log.

    Search entries carry the query as ``definition_name`` and no definition id.
    """

    id: str
    user_name: str
    definition_id: str
    definition_name: str
    activity_type: ActivityType
    occurred_date: str


@dataclass(frozen=True)
class Breadcrumb:
    """A single ancestor in a breadcrumb trail."""

    definition_id: str
    name: str
    depth: int


@dataclass(frozen=True)
class SearchResult:
    """A full-text search hit with context."""

    definition: Definition
    snippet: str
    breadcrumbs: tuple[Breadcrumb, ...] = ()
    score: float = 0.0
