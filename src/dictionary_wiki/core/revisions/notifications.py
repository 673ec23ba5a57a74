"""Notification decisions for updated definitions and the notification log."""

from collections.abc import Iterable
from dataclasses import replace

from dictionary_wiki.core.diff.engine import has_changed
from dictionary_wiki.errors import NotFoundError
from dictionary_wiki.models.definition import Definition, Notification


def update_message(previous: Definition, updated: Definition) -> str:
    """Describe an update, singling out description changes."""
    if has_changed(previous.description, updated.description):
        return f'The description of "{updated.name}" was updated.'
    return f'Definition "{updated.name}" was updated.'


def build_update_notification(
    previous: Definition,
    updated: Definition,
    *,
    notification_id: str,
    date: str,
) -> Notification:
    """Build the notification recorded when a bookmarked definition changes."""
    return Notification(
        id=notification_id,
        definition_id=updated.id,
        definition_name=updated.name,
        message=update_message(previous, updated),
        date=date,
        read=False,
    )


class NotificationLog:
    """Notifications, most recent first."""

    def __init__(self, items: Iterable[Notification] = ()) -> None:
        self._items: tuple[Notification, ...] = tuple(items)

    @property
    def items(self) -> tuple[Notification, ...]:
        return self._items

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def add(self, notification: Notification) -> None:
        self._items = (notification, *self._items)

    def _index(self, notification_id: str) -> int:
        for i, n in enumerate(self._items):
            if n.id == notification_id:
                return i
        raise NotFoundError(notification_id, kind="Notification")

    def mark_read(self, notification_id: str) -> None:
        i = self._index(notification_id)
        self._items = (*self._items[:i], replace(self._items[i], read=True), *self._items[i + 1 :])

    def mark_all_read(self) -> None:
        self._items = tuple(n if n.read else replace(n, read=True) for n in self._items)

    def remove(self, notification_id: str) -> None:
        i = self._index(notification_id)
        self._items = (*self._items[:i], *self._items[i + 1 :])
