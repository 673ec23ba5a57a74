"""Configuration constants for dictionary-wiki."""

import os
from pathlib import Path

# Directory with the wiki database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/dictionary-wiki").expanduser(),
    Path("~/.dictionary-wiki").expanduser(),
    Path("~/.config/dictionary-wiki").expanduser(),
]

DATABASE_FILENAME: str = "wiki.db"

# Keys of the JSON documents in the key-value store.
DEFINITIONS_KEY: str = "definitions"
NOTIFICATIONS_KEY: str = "notifications"
BOOKMARKS_KEY: str = "bookmarks"
ANALYTICS_SEARCHES_KEY: str = "analytics_searches"
ANALYTICS_VIEWS_KEY: str = "analytics_views"
ACTIVITY_LOGS_KEY: str = "activity_logs"

# Name recorded against activity log entries.
USER_NAME: str = os.environ.get("DICTIONARY_WIKI_USER", "local")

# Assistant service used for related-definition suggestions and drafting.
ASSISTANT_API_URL: str | None = os.environ.get("DICTIONARY_WIKI_ASSISTANT_URL")

# Assistant API token location. First file found is used.
ASSISTANT_TOKEN_FILES: list[Path] = [
    Path("~/.config/dictionary-wiki-token.txt").expanduser(),
    Path("~/.config/secret/dictionary-wiki-token.txt").expanduser(),
]

ASSISTANT_TIMEOUT_SECONDS: float = 30.0

SEARCH_RESULT_LIMIT: int = 20

# Origin named in the disclaimer of JSON exports.
EXPORT_ORIGIN: str = os.environ.get("DICTIONARY_WIKI_ORIGIN", "the data dictionary wiki")


def resolve_data_directory() -> Path:
    """Return the data directory: $DICTIONARY_WIKI_DIR, else the first existing candidate.

    Falls back to the first candidate when none exists yet.
    """
    env_dir = os.environ.get("DICTIONARY_WIKI_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
