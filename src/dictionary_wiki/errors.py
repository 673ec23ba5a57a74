"""Typed failures raised by the definition store and its collaborators."""


class WikiError(Exception):
    """Base class for every failure the wiki reports to its callers."""


class NotFoundError(WikiError):
    """An operation targeted an id that does not resolve."""

    def __init__(self, definition_id: str, *, kind: str = "Definition") -> None:
        self.definition_id = definition_id
        self.kind = kind
        super().__init__(f"{kind} {definition_id!r} not found")


class CorruptStateError(WikiError):
    """A persisted tree could not be accepted as authoritative state."""


class ValidationFailedError(WikiError):
    """Input was rejected before any mutation was attempted."""
