"""SQLite-backed key-value store of JSON documents."""

import json
import sqlite3
import time
from pathlib import Path
from typing import Any

from loguru import logger

from dictionary_wiki.storage.schema import migrate_schema


class SqliteKeyValueStore:
    """Durable get/set of JSON documents keyed by string."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        migrate_schema(conn)

    @classmethod
    def open(cls, db_path: str | Path) -> "SqliteKeyValueStore":
        """Open (creating if needed) the database file at ``db_path``."""
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        try:
            return cls(conn)
        except Exception:
            conn.close()
            raise

    def get(self, key: str) -> Any | None:
        row = self.conn.execute("SELECT value FROM documents WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        contents = json.dumps(value, sort_keys=True)
        now_ms = int(time.time() * 1000)
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO documents (key, value, updated_at) VALUES (?, ?, ?)",
                (key, contents, now_ms),
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Stored {} ({} bytes)", key, len(contents))

    def keys(self) -> list[str]:
        return [r[0] for r in self.conn.execute("SELECT key FROM documents ORDER BY key")]

    def close(self) -> None:
        self.conn.close()
