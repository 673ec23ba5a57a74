"""Activity log: who did what to which definition, and when.

Queries filter by user, activity type, definition name and time frame, then
sort by occurrence. Weeks run Sunday to Saturday. Every range is half-open:
it includes its start and excludes its end.
"""

from collections.abc import Collection, Iterable
from datetime import UTC, datetime, timedelta
from typing import Literal

from dictionary_wiki.errors import ValidationFailedError
from dictionary_wiki.models.definition import ActivityEntry, ActivityType

TimeFrame = Literal["all", "this-week", "last-week", "this-month", "last-month"]
TIME_FRAMES: tuple[str, ...] = ("all", "this-week", "last-week", "this-month", "last-month")


def occurred_at(entry: ActivityEntry) -> datetime:
    """Occurrence time of ``entry``; naive timestamps are taken as UTC."""
    try:
        moment = datetime.fromisoformat(entry.occurred_date)
    except ValueError:
        msg = f"Activity {entry.id!r} has an unreadable date: {entry.occurred_date!r}"
        raise ValidationFailedError(msg) from None
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _next_month(start: datetime) -> datetime:
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def _previous_month(start: datetime) -> datetime:
    if start.month == 1:
        return start.replace(year=start.year - 1, month=12)
    return start.replace(month=start.month - 1)


def time_frame_bounds(frame: str, now: datetime) -> tuple[datetime, datetime] | None:
    """The ``[start, end)`` range a named time frame covers; ``None`` for "all"."""
    if frame == "all":
        return None
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    # weekday() counts from Monday; shift so Sunday starts the week.
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    if frame == "this-week":
        return week_start, week_start + timedelta(days=7)
    if frame == "last-week":
        return week_start - timedelta(days=7), week_start
    month_start = _month_start(now)
    if frame == "this-month":
        return month_start, _next_month(month_start)
    if frame == "last-month":
        return _previous_month(month_start), month_start
    msg = f"Unknown time frame {frame!r}; expected one of {', '.join(TIME_FRAMES)}"
    raise ValidationFailedError(msg)


class ActivityLog:
    """Activity entries in the order they were recorded."""

    def __init__(self, items: Iterable[ActivityEntry] = ()) -> None:
        self._items: tuple[ActivityEntry, ...] = tuple(items)

    @property
    def items(self) -> tuple[ActivityEntry, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def record(self, entry: ActivityEntry) -> None:
        self._items = (*self._items, entry)

    def users(self) -> list[str]:
        return sorted({e.user_name for e in self._items})

    def definition_names(self) -> list[str]:
        return sorted({e.definition_name for e in self._items if e.definition_name})

    def query(
        self,
        *,
        users: Collection[str] = (),
        activity_types: Collection[str] = (),
        definitions: Collection[str] = (),
        start: datetime | None = None,
        end: datetime | None = None,
        newest_first: bool = True,
    ) -> list[ActivityEntry]:
        """Entries passing every filter, sorted by occurrence.

        An empty filter collection matches everything. ``definitions`` matches
        definition names. ``start`` and ``end`` bound the occurrence time.
        """
        try:
            wanted_types = {ActivityType(t) for t in activity_types}
        except ValueError as e:
            raise ValidationFailedError(str(e)) from None
        matched = []
        for entry in self._items:
            if users and entry.user_name not in users:
                continue
            if wanted_types and entry.activity_type not in wanted_types:
                continue
            if definitions and entry.definition_name not in definitions:
                continue
            moment = occurred_at(entry)
            if start is not None and moment < start:
                continue
            if end is not None and moment >= end:
                continue
            matched.append(entry)
        return sorted(matched, key=occurred_at, reverse=newest_first)
