"""HTTP client for the assistant service (related suggestions, drafting)."""

import json
from pathlib import Path
from typing import Any

import requests
from loguru import logger

from dictionary_wiki.config import (
    ASSISTANT_API_URL,
    ASSISTANT_TIMEOUT_SECONDS,
    ASSISTANT_TOKEN_FILES,
)
from dictionary_wiki.protocols import DraftedDefinition


def _read_token(token_files: list[Path]) -> str | None:
    for token_path in token_files:
        try:
            return token_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            pass
    return None


class AssistantApi:
    """Client for the assistant flows behind the wiki."""

    def __init__(self, base_url: str | None = None, *, token: str | None = None) -> None:
        url = base_url or ASSISTANT_API_URL
        if not url:
            msg = "No assistant URL configured; set DICTIONARY_WIKI_ASSISTANT_URL"
            raise RuntimeError(msg)
        self.base_url = url.rstrip("/")
        self.token = token if token is not None else _read_token(ASSISTANT_TOKEN_FILES)
        self.sess = requests.Session()
        if self.token:
            self.sess.headers["Authorization"] = f"Bearer {self.token}"
        logger.debug(
            "Assistant API ready: {} (token {})",
            self.base_url,
            "present" if self.token else "absent",
        )

    def call(self, flow: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke a flow endpoint and return its ``result`` object."""
        logger.debug("Calling assistant flow {!r} {}", flow, repr(payload)[:32])
        r = self.sess.post(
            f"{self.base_url}/{flow}",
            data=json.dumps({"data": payload}),
            headers={"Content-Type": "application/json"},
            timeout=ASSISTANT_TIMEOUT_SECONDS,
        )
        r.raise_for_status()
        rv: dict[str, Any] = r.json()
        if "error" in rv or not isinstance(rv.get("result"), dict):
            msg = f"Assistant call failed: {flow!r} -> {rv.get('error', rv)!r}"
            raise RuntimeError(msg)
        return rv["result"]  # type: ignore[no-any-return]

    def suggest_definitions(
        self, *, name: str, description: str, keywords: list[str]
    ) -> list[str]:
        """Ask for names of definitions related to the given one."""
        result = self.call(
            "suggestDefinitionsFlow",
            {
                "currentDefinitionName": name,
                "currentDefinitionDescription": description,
                "keywords": keywords,
            },
        )
        return [str(s) for s in result.get("suggestedDefinitions", [])]

    def draft_definition(self, source_text: str) -> DraftedDefinition:
        """Draft name, description and keywords from a SQL query or other text."""
        result = self.call("draftDefinitionFlow", {"query": source_text})
        return DraftedDefinition(
            name=str(result.get("name", "")),
            description=str(result.get("description", "")),
            keywords=tuple(str(k) for k in result.get("keywords", [])),
        )
