"""Protocols for the wiki's external collaborators."""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class DraftedDefinition:
    """Fields proposed by the drafting assistant for a new definition."""

    name: str
    description: str
    keywords: tuple[str, ...] = ()


@runtime_checkable
class KeyValueStoreProtocol(Protocol):
    """Durable storage of JSON documents addressed by string key."""

    def get(self, key: str) -> Any | None:
        """Return the stored document, or None if the key is absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable document under ``key``."""
        ...


@runtime_checkable
class AssistantProtocol(Protocol):
    """Protocol for the AI suggestion and drafting service."""

    def suggest_definitions(
        self, *, name: str, description: str, keywords: list[str]
    ) -> list[str]:
        """Return names of definitions related to the given one."""
        ...

    def draft_definition(self, source_text: str) -> DraftedDefinition:
        """Draft a definition from free-form source text (e.g. a SQL query)."""
        ...
