"""Tests for database schema."""

import sqlite3

import pytest

from dictionary_wiki.errors import CorruptStateError
from dictionary_wiki.storage.schema import (
    SCHEMA_VERSION,
    create_schema,
    get_schema_version,
    migrate_schema,
)


def test_create_schema_creates_tables() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    tables = {
        row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    }
    assert {"documents", "metadata"} <= tables


def test_migrate_schema_on_empty_db_creates_schema_and_sets_version() -> None:
    conn = sqlite3.connect(":memory:")
    assert get_schema_version(conn) is None
    migrate_schema(conn)
    assert get_schema_version(conn) == SCHEMA_VERSION


def test_migrate_schema_is_idempotent() -> None:
    conn = sqlite3.connect(":memory:")
    migrate_schema(conn)
    conn.execute("INSERT INTO documents (key, value, updated_at) VALUES ('k', '1', 0)")
    conn.commit()
    migrate_schema(conn)
    assert conn.execute("SELECT value FROM documents WHERE key = 'k'").fetchone() == ("1",)


def test_migrate_schema_rejects_newer_database() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    conn.execute(
        "UPDATE metadata SET value = ? WHERE key = 'schema_version'", (str(SCHEMA_VERSION + 1),)
    )
    conn.commit()
    with pytest.raises(CorruptStateError, match="newer than supported"):
        migrate_schema(conn)
