"""Data-dictionary wiki: a tree of versioned business definitions."""

from dictionary_wiki.ai.client import AssistantApi
from dictionary_wiki.core.store.definition_store import DefinitionStore
from dictionary_wiki.errors import CorruptStateError, NotFoundError, ValidationFailedError, WikiError
from dictionary_wiki.protocols import AssistantProtocol, KeyValueStoreProtocol
from dictionary_wiki.storage.kv_store import SqliteKeyValueStore
from dictionary_wiki.wiki import Wiki

__all__ = [
    "AssistantApi",
    "AssistantProtocol",
    "CorruptStateError",
    "DefinitionStore",
    "KeyValueStoreProtocol",
    "NotFoundError",
    "SqliteKeyValueStore",
    "ValidationFailedError",
    "Wiki",
    "WikiError",
]
