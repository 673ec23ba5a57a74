"""Serialize definitions back to JSON documents and build export payloads."""

from collections.abc import Collection, Iterable
from typing import Any

from dictionary_wiki.core.tree.primitives import Tree, collect_ids, find, iter_preorder
from dictionary_wiki.errors import NotFoundError
from dictionary_wiki.models.definition import (
    ActivityEntry,
    Definition,
    Notification,
    Revision,
    Snapshot,
    SupportingTableRef,
)


def _table_refs(refs: tuple[SupportingTableRef, ...]) -> list[dict[str, str]]:
    return [{"id": r.id, "name": r.name} for r in refs]


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    return {
        "name": snapshot.name,
        "module": snapshot.module,
        "keywords": list(snapshot.keywords),
        "description": snapshot.description,
        "technicalDetails": snapshot.technical_details,
        "examples": snapshot.examples,
        "usage": snapshot.usage,
        "isArchived": snapshot.is_archived,
        "supportingTables": _table_refs(snapshot.supporting_tables),
    }


def revision_to_dict(revision: Revision) -> dict[str, Any]:
    return {
        "ticketId": revision.ticket_id,
        "date": revision.date,
        "developer": revision.developer,
        "description": revision.description,
        "snapshot": snapshot_to_dict(revision.snapshot),
    }


def definition_to_dict(definition: Definition, *, include_children: bool = True) -> dict[str, Any]:
    """Convert a definition to its persisted camelCase form.

    The ``is_bookmarked`` view annotation is never written.
    """
    data: dict[str, Any] = {
        "id": definition.id,
        "name": definition.name,
        "module": definition.module,
        "keywords": list(definition.keywords),
        "description": definition.description,
        "technicalDetails": definition.technical_details,
        "examples": definition.examples,
        "usage": definition.usage,
        "revisions": [revision_to_dict(r) for r in definition.revisions],
        "isArchived": definition.is_archived,
        "supportingTables": _table_refs(definition.supporting_tables),
        "attachments": [
            {"name": a.name, "url": a.url, "size": a.size, "type": a.type}
            for a in definition.attachments
        ],
        "notes": [
            {
                "id": n.id,
                "authorId": n.author_id,
                "author": n.author,
                "avatar": n.avatar,
                "date": n.date,
                "content": n.content,
                "isShared": n.is_shared,
            }
            for n in definition.notes
        ],
        "relatedDefinitions": list(definition.related_definitions),
    }
    if include_children and definition.children is not None:
        data["children"] = [definition_to_dict(c) for c in definition.children]
    return data


def tree_to_data(tree: Tree) -> list[dict[str, Any]]:
    """Convert the whole tree to the document stored under "definitions"."""
    return [definition_to_dict(node) for node in tree]


def notification_to_dict(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "definitionId": notification.definition_id,
        "definitionName": notification.definition_name,
        "message": notification.message,
        "date": notification.date,
        "read": notification.read,
    }


def activity_to_dict(entry: ActivityEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "userName": entry.user_name,
        "definitionId": entry.definition_id,
        "definitionName": entry.definition_name,
        "activityType": entry.activity_type.value,
        "occurredDate": entry.occurred_date,
    }


def select_for_export(tree: Tree, selection: Collection[str]) -> tuple[Definition, ...]:
    """Nodes whose id is selected, in pre-order."""
    return tuple(node for node in iter_preorder(tree) if node.id in selection)


def expand_selection(tree: Tree, definition_id: str) -> tuple[str, ...]:
    """Ids toggled by selecting a node for export: the node and its descendants."""
    node = find(tree, definition_id)
    if node is None:
        raise NotFoundError(definition_id)
    return collect_ids(node)


def build_json_export(
    definitions: Iterable[Definition],
    *,
    exported_on: str,
    origin: str,
) -> dict[str, Any]:
    """Wrap selected definitions in the export envelope.

    Each entry is exported flat; its descendants appear as their own
    entries when they were selected too.
    """
    return {
        "disclaimer": (
            f"This is a copy of definitions as of {exported_on}. "
            f"Please go to {origin} to view the updated definitions."
        ),
        "data": [definition_to_dict(d, include_children=False) for d in definitions],
    }
