"""Per-definition bookmark flags, kept outside the tree."""

from collections.abc import Iterable


class BookmarkSet:
    """Ordered set of bookmarked definition ids."""

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: list[str] = []
        for definition_id in ids:
            self.add(definition_id)

    def __contains__(self, definition_id: object) -> bool:
        return definition_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def is_bookmarked(self, definition_id: str) -> bool:
        return definition_id in self._ids

    def add(self, definition_id: str) -> None:
        if definition_id not in self._ids:
            self._ids.append(definition_id)

    def discard(self, definition_id: str) -> None:
        if definition_id in self._ids:
            self._ids.remove(definition_id)

    def toggle(self, definition_id: str) -> bool:
        """Flip the bookmark and return the new state."""
        if definition_id in self._ids:
            self._ids.remove(definition_id)
            return False
        self._ids.append(definition_id)
        return True

    def to_list(self) -> list[str]:
        return list(self._ids)
