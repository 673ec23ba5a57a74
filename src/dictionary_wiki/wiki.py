"""Session facade: the definition store plus everything kept alongside it.

A ``Wiki`` loads its state from a key-value store, applies operations and
writes back the documents each operation touched.
"""

import uuid
from collections.abc import Callable, Collection, Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from dictionary_wiki.config import (
    ACTIVITY_LOGS_KEY,
    ANALYTICS_SEARCHES_KEY,
    ANALYTICS_VIEWS_KEY,
    BOOKMARKS_KEY,
    DEFINITIONS_KEY,
    EXPORT_ORIGIN,
    NOTIFICATIONS_KEY,
    SEARCH_RESULT_LIMIT,
    USER_NAME,
)
from dictionary_wiki.core.activity import ActivityLog, time_frame_bounds
from dictionary_wiki.core.analytics import UsageAnalytics
from dictionary_wiki.core.bookmarks import BookmarkSet
from dictionary_wiki.core.export.exporter import (
    activity_to_dict,
    build_json_export,
    expand_selection,
    notification_to_dict,
    tree_to_data,
)
from dictionary_wiki.core.importer.json_reader import (
    parse_activity_log,
    parse_definition_tree,
    parse_notifications,
)
from dictionary_wiki.core.related import resolve_suggestions
from dictionary_wiki.core.revisions.comparison import (
    RevisionComparison,
    compare_revisions,
    find_revision,
)
from dictionary_wiki.core.revisions.notifications import NotificationLog, build_update_notification
from dictionary_wiki.core.search.projection import FilterState, project
from dictionary_wiki.core.search.searcher import search_definitions
from dictionary_wiki.core.store.definition_store import DefinitionStore
from dictionary_wiki.core.supporting_tables import SupportingTableRegistry
from dictionary_wiki.core.templates import apply_template
from dictionary_wiki.core.tree.primitives import Tree
from dictionary_wiki.errors import CorruptStateError, NotFoundError, ValidationFailedError, WikiError
from dictionary_wiki.models.definition import (
    ActivityEntry,
    ActivityType,
    Definition,
    Note,
    Revision,
    SearchResult,
    SupportingTable,
)
from dictionary_wiki.protocols import AssistantProtocol, KeyValueStoreProtocol
from dictionary_wiki.seed import seed_notifications, seed_supporting_tables, seed_tree


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _short_id() -> str:
    return uuid.uuid4().hex[:12]


class Wiki:
    """One user's view of the dictionary: tree, bookmarks, notifications, analytics."""

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        *,
        assistant: AssistantProtocol | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
        user_name: str = USER_NAME,
    ) -> None:
        self.kv = store
        self.assistant = assistant
        self.user_name = user_name
        self._clock = clock or _utcnow
        self.definitions = DefinitionStore(id_factory=id_factory)
        self.bookmarks = BookmarkSet()
        self.notifications = NotificationLog()
        self.analytics = UsageAnalytics()
        self.activity = ActivityLog()
        self.tables = SupportingTableRegistry(seed_supporting_tables())

    # --- Persistence ---

    def load(self) -> None:
        """Read every document; absent or corrupt trees fall back to the seed."""
        raw_tree = self.kv.get(DEFINITIONS_KEY)
        if raw_tree is None:
            logger.debug("No stored definitions, using seed data")
            self.definitions.reconcile(seed_tree())
        else:
            try:
                self.definitions.reconcile(parse_definition_tree(raw_tree))
            except CorruptStateError as e:
                logger.warning("Stored definitions rejected ({}), using seed data", e)
                self.definitions.reconcile(seed_tree())

        raw_notifications = self.kv.get(NOTIFICATIONS_KEY)
        if raw_notifications is None:
            self.notifications = NotificationLog(seed_notifications())
        else:
            try:
                self.notifications = NotificationLog(parse_notifications(raw_notifications))
            except CorruptStateError as e:
                logger.warning("Stored notifications rejected ({}), starting empty", e)
                self.notifications = NotificationLog()

        self.bookmarks = BookmarkSet(self.kv.get(BOOKMARKS_KEY) or [])
        self.analytics = UsageAnalytics(
            searches=self.kv.get(ANALYTICS_SEARCHES_KEY) or {},
            views=self.kv.get(ANALYTICS_VIEWS_KEY) or {},
        )

        raw_activity = self.kv.get(ACTIVITY_LOGS_KEY)
        try:
            entries = parse_activity_log([] if raw_activity is None else raw_activity)
            self.activity = ActivityLog(entries)
        except CorruptStateError as e:
            logger.warning("Stored activity log rejected ({}), starting empty", e)
            self.activity = ActivityLog()
        logger.debug(
            "Loaded {} definitions, {} notifications, {} bookmarks, {} activity entries",
            len(self.definitions.flatten()),
            len(self.notifications.items),
            len(self.bookmarks),
            len(self.activity),
        )

    def _document(self, key: str) -> Any:
        if key == DEFINITIONS_KEY:
            return tree_to_data(self.definitions.tree)
        if key == NOTIFICATIONS_KEY:
            return [notification_to_dict(n) for n in self.notifications.items]
        if key == BOOKMARKS_KEY:
            return self.bookmarks.to_list()
        if key == ANALYTICS_SEARCHES_KEY:
            return self.analytics.searches
        if key == ANALYTICS_VIEWS_KEY:
            return self.analytics.views
        if key == ACTIVITY_LOGS_KEY:
            return [activity_to_dict(e) for e in self.activity.items]
        msg = f"Unknown document key: {key!r}"
        raise ValueError(msg)

    def _persist(self, *keys: str) -> None:
        for key in keys:
            self.kv.set(key, self._document(key))

    def save(self) -> None:
        """Write every document."""
        self._persist(
            DEFINITIONS_KEY,
            NOTIFICATIONS_KEY,
            BOOKMARKS_KEY,
            ANALYTICS_SEARCHES_KEY,
            ANALYTICS_VIEWS_KEY,
            ACTIVITY_LOGS_KEY,
        )

    def _now(self) -> str:
        return self._clock().isoformat()

    def _log(self, activity_type: ActivityType, definition_id: str, definition_name: str) -> None:
        self.activity.record(
            ActivityEntry(
                id=_short_id(),
                user_name=self.user_name,
                definition_id=definition_id,
                definition_name=definition_name,
                activity_type=activity_type,
                occurred_date=self._now(),
            )
        )

    def _log_definition(self, activity_type: ActivityType, definition: Definition) -> None:
        self._log(activity_type, definition.id, definition.name)

    # --- Reading ---

    @property
    def tree(self) -> Tree:
        return self.definitions.tree

    def get(self, definition_id: str) -> Definition:
        return self.definitions.get(definition_id)

    def view(self, definition_id: str) -> Definition:
        """Fetch a definition for display and count the view."""
        definition = self.definitions.get(definition_id)
        self.analytics.track_view(definition.id, definition.name)
        self._log_definition(ActivityType.VIEW, definition)
        self._persist(ANALYTICS_VIEWS_KEY, ACTIVITY_LOGS_KEY)
        return definition

    def project(self, filters: FilterState | None = None) -> Tree:
        return project(self.definitions.tree, filters or FilterState(), self.bookmarks.is_bookmarked)

    def search(
        self,
        query: str,
        *,
        include_archived: bool = False,
        limit: int = SEARCH_RESULT_LIMIT,
        offset: int = 0,
    ) -> tuple[list[SearchResult], int]:
        """Full-text search; the query is counted in the search analytics and logged."""
        self.analytics.track_search(query)
        if query.strip():
            self._log(ActivityType.SEARCH, "", query.strip())
        self._persist(ANALYTICS_SEARCHES_KEY, ACTIVITY_LOGS_KEY)
        return search_definitions(
            self.definitions.tree,
            query,
            include_archived=include_archived,
            limit=limit,
            offset=offset,
        )

    def supporting_tables_for(self, definition_id: str) -> tuple[SupportingTable, ...]:
        return self.tables.for_definition(self.definitions.get(definition_id))

    # --- Mutations ---

    def update(self, definition_id: str, changes: Mapping[str, Any]) -> Definition:
        """Apply content changes; bookmarked definitions raise a notification."""
        result = self.definitions.update(definition_id, changes)
        self._log_definition(ActivityType.EDIT, result.updated)
        keys = [DEFINITIONS_KEY, ACTIVITY_LOGS_KEY]
        if self.bookmarks.is_bookmarked(definition_id):
            notification = build_update_notification(
                result.previous,
                result.updated,
                notification_id=_short_id(),
                date=self._now(),
            )
            self.notifications.add(notification)
            keys.append(NOTIFICATIONS_KEY)
            logger.debug("Notified: {}", notification.message)
        self._persist(*keys)
        return result.updated

    def create(
        self,
        module_name: str,
        content: Mapping[str, Any],
        *,
        template: str | None = None,
    ) -> Definition:
        """Create a definition; ``template`` prefills any field ``content`` leaves out."""
        if template is not None:
            content = apply_template(template, content)
        definition = self.definitions.create(module_name, content)
        self._log_definition(ActivityType.CREATE, definition)
        self._persist(DEFINITIONS_KEY, ACTIVITY_LOGS_KEY)
        return definition

    def duplicate(self, definition_id: str) -> Definition:
        definition = self.definitions.duplicate(definition_id)
        self._log_definition(ActivityType.DUPLICATE, definition)
        self._persist(DEFINITIONS_KEY, ACTIVITY_LOGS_KEY)
        return definition

    def archive(self, definition_id: str, archived: bool = True) -> Definition:
        definition = self.definitions.archive(definition_id, archived)
        self._log_definition(ActivityType.ARCHIVE, definition)
        self._persist(DEFINITIONS_KEY, ACTIVITY_LOGS_KEY)
        return definition

    def bulk_archive(self, ids: Collection[str], archived: bool = True) -> None:
        self.definitions.bulk_archive(ids, archived)
        for definition_id in dict.fromkeys(ids):
            self._log_definition(ActivityType.ARCHIVE, self.definitions.get(definition_id))
        self._persist(DEFINITIONS_KEY, ACTIVITY_LOGS_KEY)

    def delete(self, definition_id: str) -> tuple[str, ...]:
        """Delete a subtree; bookmarks on removed definitions go with it."""
        removed = self.definitions.delete(definition_id)
        for removed_id in removed:
            self.bookmarks.discard(removed_id)
        self._persist(DEFINITIONS_KEY, BOOKMARKS_KEY)
        return removed

    def add_revision(
        self,
        definition_id: str,
        *,
        ticket_id: str,
        developer: str,
        description: str,
    ) -> Revision:
        revision = self.definitions.add_revision(
            definition_id,
            ticket_id=ticket_id,
            developer=developer,
            description=description,
            date=self._now(),
        )
        self._log_definition(ActivityType.EDIT, self.definitions.get(definition_id))
        self._persist(DEFINITIONS_KEY, ACTIVITY_LOGS_KEY)
        return revision

    # --- Bookmarks and notifications ---

    def toggle_bookmark(self, definition_id: str) -> bool:
        definition = self.definitions.get(definition_id)
        state = self.bookmarks.toggle(definition_id)
        self._log_definition(ActivityType.BOOKMARK, definition)
        self._persist(BOOKMARKS_KEY, ACTIVITY_LOGS_KEY)
        return state

    def mark_notification_read(self, notification_id: str) -> None:
        self.notifications.mark_read(notification_id)
        self._persist(NOTIFICATIONS_KEY)

    def mark_all_notifications_read(self) -> None:
        self.notifications.mark_all_read()
        self._persist(NOTIFICATIONS_KEY)

    def delete_notification(self, notification_id: str) -> None:
        self.notifications.remove(notification_id)
        self._persist(NOTIFICATIONS_KEY)

    # --- Notes ---

    def add_note(
        self,
        definition_id: str,
        content: str,
        *,
        author: str,
        author_id: str = "",
        avatar: str = "",
        is_shared: bool = False,
    ) -> Note:
        """Append a note to a definition."""
        if not content.strip():
            msg = "Note cannot be empty."
            raise ValidationFailedError(msg)
        definition = self.definitions.get(definition_id)
        note = Note(
            id=_short_id(),
            author=author,
            date=self._now(),
            content=content,
            author_id=author_id,
            avatar=avatar,
            is_shared=is_shared,
        )
        self.update(definition_id, {"notes": (*definition.notes, note)})
        return note

    def delete_note(self, definition_id: str, note_id: str) -> None:
        definition = self.definitions.get(definition_id)
        remaining = tuple(n for n in definition.notes if n.id != note_id)
        if len(remaining) == len(definition.notes):
            raise NotFoundError(note_id, kind="Note")
        self.update(definition_id, {"notes": remaining})

    # --- Related definitions and assistant ---

    def _require_assistant(self) -> AssistantProtocol:
        if self.assistant is None:
            msg = "No assistant configured"
            raise WikiError(msg)
        return self.assistant

    def suggest_related(self, definition_id: str) -> tuple[Definition, ...]:
        """Ask the assistant for related definitions and resolve them in the tree."""
        definition = self.definitions.get(definition_id)
        names = self._require_assistant().suggest_definitions(
            name=definition.name,
            description=definition.description,
            keywords=list(definition.keywords),
        )
        resolved = resolve_suggestions(self.definitions.tree, definition, names)
        logger.debug("Assistant suggested {} names, {} resolved", len(names), len(resolved))
        return resolved

    def link_related(self, definition_id: str, related_ids: Collection[str]) -> Definition:
        """Add ``related_ids`` to a definition's related list."""
        definition = self.definitions.get(definition_id)
        for related_id in related_ids:
            self.definitions.get(related_id)
        merged = tuple(
            dict.fromkeys(
                r for r in (*definition.related_definitions, *related_ids) if r != definition_id
            )
        )
        return self.update(definition_id, {"related_definitions": merged})

    def draft_definition(self, source_text: str, module_name: str) -> Definition:
        """Create a definition from an assistant draft of ``source_text``."""
        if not source_text.strip():
            msg = "Nothing to draft from"
            raise ValidationFailedError(msg)
        draft = self._require_assistant().draft_definition(source_text)
        return self.create(
            module_name,
            {"name": draft.name, "description": draft.description, "keywords": draft.keywords},
        )

    # --- Revisions and export ---

    def compare_revisions(
        self, definition_id: str, first_ticket: str, second_ticket: str
    ) -> RevisionComparison:
        definition = self.definitions.get(definition_id)
        return compare_revisions(
            find_revision(definition, first_ticket),
            find_revision(definition, second_ticket),
        )

    def expand_selection(self, definition_id: str) -> tuple[str, ...]:
        return expand_selection(self.definitions.tree, definition_id)

    def export_json(self, selection: Collection[str], *, origin: str = EXPORT_ORIGIN) -> dict[str, Any]:
        """Export the selected definitions with the dated disclaimer."""
        selected = self.definitions.export_selection(selection)
        for definition in selected:
            self._log_definition(ActivityType.DOWNLOAD, definition)
        self._persist(ACTIVITY_LOGS_KEY)
        return build_json_export(
            selected,
            exported_on=self._clock().date().isoformat(),
            origin=origin,
        )

    # --- Activity ---

    def query_activity(
        self,
        *,
        users: Collection[str] = (),
        activity_types: Collection[str] = (),
        definitions: Collection[str] = (),
        time_frame: str = "all",
        start: datetime | None = None,
        end: datetime | None = None,
        newest_first: bool = True,
    ) -> list[ActivityEntry]:
        """Filter and sort the activity log.

        ``time_frame`` is "all", "this-week", "last-week", "this-month",
        "last-month" or "custom"; only "custom" takes ``start`` and ``end``.
        """
        if time_frame == "custom":
            bounds = (start, end)
        elif start is not None or end is not None:
            msg = f"start and end need the custom time frame, not {time_frame!r}"
            raise ValidationFailedError(msg)
        else:
            bounds = time_frame_bounds(time_frame, self._clock()) or (None, None)
        return self.activity.query(
            users=users,
            activity_types=activity_types,
            definitions=definitions,
            start=bounds[0],
            end=bounds[1],
            newest_first=newest_first,
        )
