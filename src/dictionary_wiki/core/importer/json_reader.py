"""Parse persisted JSON documents into domain models."""

from typing import Any

from dictionary_wiki.errors import CorruptStateError
from dictionary_wiki.models.definition import (
    ActivityEntry,
    ActivityType,
    Attachment,
    Definition,
    Note,
    Notification,
    Revision,
    Snapshot,
    SupportingTable,
    SupportingTableRef,
)


def _object(raw: Any, *, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        msg = f"{what} must be an object, got {type(raw).__name__}: {raw!r:.120}"
        raise CorruptStateError(msg)
    return raw


def _items(raw: dict[str, Any], key: str, *, what: str) -> list[Any]:
    """The list under ``key``; absent or null counts as empty."""
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"{what} key {key!r} must be a list, got {type(value).__name__}"
        raise CorruptStateError(msg)
    return value


def _require(raw: dict[str, Any], key: str, *, what: str) -> Any:
    try:
        return _object(raw, what=what)[key]
    except KeyError:
        msg = f"{what} is missing required key {key!r}: {raw!r:.120}"
        raise CorruptStateError(msg) from None


def _examples(raw: dict[str, Any]) -> str:
    # Older documents call the field usageExamples.
    return raw.get("examples") or raw.get("usageExamples") or ""


def _table_refs(raw: dict[str, Any], *, what: str) -> tuple[SupportingTableRef, ...]:
    refs = []
    for r in _items(raw, "supportingTables", what=what):
        table_id = _require(r, "id", what="Table reference")
        refs.append(SupportingTableRef(id=table_id, name=r.get("name", table_id)))
    return tuple(refs)


def parse_snapshot(raw: dict[str, Any]) -> Snapshot:
    raw = _object(raw, what="Snapshot")
    return Snapshot(
        name=_require(raw, "name", what="Snapshot"),
        module=raw.get("module", ""),
        keywords=tuple(_items(raw, "keywords", what="Snapshot")),
        description=raw.get("description", ""),
        technical_details=raw.get("technicalDetails", ""),
        examples=_examples(raw),
        usage=raw.get("usage", ""),
        is_archived=bool(raw.get("isArchived", False)),
        supporting_tables=_table_refs(raw, what="Snapshot"),
    )


def parse_revision(raw: dict[str, Any]) -> Revision:
    raw = _object(raw, what="Revision")
    return Revision(
        ticket_id=_require(raw, "ticketId", what="Revision"),
        date=_require(raw, "date", what="Revision"),
        developer=raw.get("developer", ""),
        description=raw.get("description", ""),
        snapshot=parse_snapshot(_require(raw, "snapshot", what="Revision")),
    )


def parse_note(raw: dict[str, Any]) -> Note:
    raw = _object(raw, what="Note")
    return Note(
        id=_require(raw, "id", what="Note"),
        author=raw.get("author", ""),
        date=raw.get("date", ""),
        content=raw.get("content", ""),
        author_id=raw.get("authorId", ""),
        avatar=raw.get("avatar", ""),
        is_shared=bool(raw.get("isShared", False)),
    )


def parse_attachment(raw: dict[str, Any]) -> Attachment:
    raw = _object(raw, what="Attachment")
    return Attachment(
        name=_require(raw, "name", what="Attachment"),
        url=raw.get("url", ""),
        size=raw.get("size", ""),
        type=raw.get("type", "FILE"),
    )


def parse_definition(raw: dict[str, Any]) -> Definition:
    """Parse one definition dict, recursing into its children."""
    raw = _object(raw, what="Definition")
    return Definition(
        id=str(_require(raw, "id", what="Definition")),
        name=_require(raw, "name", what="Definition"),
        module=raw.get("module", ""),
        keywords=tuple(_items(raw, "keywords", what="Definition")),
        description=raw.get("description", ""),
        technical_details=raw.get("technicalDetails", ""),
        examples=_examples(raw),
        usage=raw.get("usage", ""),
        revisions=tuple(parse_revision(r) for r in _items(raw, "revisions", what="Definition")),
        is_archived=bool(raw.get("isArchived", False)),
        supporting_tables=_table_refs(raw, what="Definition"),
        attachments=tuple(
            parse_attachment(a) for a in _items(raw, "attachments", what="Definition")
        ),
        notes=tuple(parse_note(n) for n in _items(raw, "notes", what="Definition")),
        related_definitions=tuple(_items(raw, "relatedDefinitions", what="Definition")),
        children=(
            tuple(parse_definition(c) for c in _items(raw, "children", what="Definition"))
            if raw.get("children") is not None
            else None
        ),
    )


def parse_definition_tree(data: list[dict[str, Any]]) -> tuple[Definition, ...]:
    """Parse the persisted ``definitions`` document.

    Args:
        data: List of top-level definition dicts (as stored under "definitions").

    Returns:
        Tuple of top-level Definitions with nested children.

    Raises:
        CorruptStateError: If the document or any entry has the wrong shape.
    """
    if not isinstance(data, list):
        msg = f"Definitions document must be a list, got {type(data).__name__}"
        raise CorruptStateError(msg)
    return tuple(parse_definition(raw) for raw in data)


def parse_notifications(data: list[dict[str, Any]]) -> tuple[Notification, ...]:
    if not isinstance(data, list):
        msg = f"Notifications document must be a list, got {type(data).__name__}"
        raise CorruptStateError(msg)
    notifications = []
    for raw in data:
        raw = _object(raw, what="Notification")
        notifications.append(
            Notification(
                id=str(_require(raw, "id", what="Notification")),
                definition_id=raw.get("definitionId", ""),
                definition_name=raw.get("definitionName", ""),
                message=raw.get("message", ""),
                date=raw.get("date", ""),
                read=bool(raw.get("read", False)),
            )
        )
    return tuple(notifications)


def parse_activity_log(data: list[dict[str, Any]]) -> tuple[ActivityEntry, ...]:
    if not isinstance(data, list):
        msg = f"Activity log document must be a list, got {type(data).__name__}"
        raise CorruptStateError(msg)
    entries = []
    for raw in data:
        raw = _object(raw, what="Activity entry")
        kind = _require(raw, "activityType", what="Activity entry")
        try:
            activity_type = ActivityType(kind)
        except ValueError:
            msg = f"Activity entry has unknown activityType {kind!r}"
            raise CorruptStateError(msg) from None
        entries.append(
            ActivityEntry(
                id=str(_require(raw, "id", what="Activity entry")),
                user_name=raw.get("userName", ""),
                definition_id=raw.get("definitionId", ""),
                definition_name=raw.get("definitionName", ""),
                activity_type=activity_type,
                occurred_date=_require(raw, "occurredDate", what="Activity entry"),
            )
        )
    return tuple(entries)


def parse_supporting_table(raw: dict[str, Any]) -> SupportingTable:
    table_id = _require(raw, "id", what="Supporting table")
    return SupportingTable(
        id=table_id,
        name=raw.get("name", table_id),
        description=raw.get("description", ""),
        headers=tuple(str(h) for h in _items(raw, "headers", what="Supporting table")),
        rows=tuple(
            tuple("" if cell is None else str(cell) for cell in row)
            for row in _items(raw, "rows", what="Supporting table")
        ),
    )
