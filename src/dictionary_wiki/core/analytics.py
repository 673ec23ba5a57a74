"""Usage counters for searches and definition views."""

from collections.abc import Mapping
from typing import Literal

Kind = Literal["searches", "views"]


class UsageAnalytics:
    """Counts searches per query and views per definition."""

    def __init__(
        self,
        searches: Mapping[str, int] | None = None,
        views: Mapping[str, int] | None = None,
    ) -> None:
        self.searches: dict[str, int] = dict(searches or {})
        self.views: dict[str, int] = dict(views or {})

    def track_search(self, query: str) -> None:
        key = query.strip().lower()
        if not key:
            return
        self.searches[key] = self.searches.get(key, 0) + 1

    def track_view(self, definition_id: str, definition_name: str) -> None:
        key = f"{definition_name} (ID: {definition_id})"
        self.views[key] = self.views.get(key, 0) + 1

    def top_items(self, kind: Kind, count: int) -> list[tuple[str, int]]:
        """Most frequent entries, highest count first."""
        data = self.searches if kind == "searches" else self.views
        return sorted(data.items(), key=lambda item: -item[1])[:count]
