"""Tests for AssistantApi, the HTTP client for suggestions and drafting."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from dictionary_wiki.ai.client import AssistantApi
from dictionary_wiki.protocols import AssistantProtocol, DraftedDefinition


@pytest.fixture
def api_with_mock_session(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> tuple[AssistantApi, MagicMock]:
    """Create an AssistantApi with a real token file and mocked requests.Session."""
    token_file = tmp_path / "token.txt"
    token_file.write_text("test-token\n")
    monkeypatch.setattr("dictionary_wiki.ai.client.ASSISTANT_TOKEN_FILES", [token_file])

    with patch("dictionary_wiki.ai.client.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session.headers = {}
        mock_session_cls.return_value = mock_session
        api = AssistantApi("https://assistant.example.com/api/")

    return api, mock_session


def _make_response(data: dict[str, Any]) -> MagicMock:
    """Create a mock HTTP response with given JSON data."""
    response = MagicMock()
    response.json.return_value = data
    response.text = json.dumps(data)
    return response


def test_init_reads_token_and_sets_header(
    api_with_mock_session: tuple[AssistantApi, MagicMock],
) -> None:
    api, session = api_with_mock_session
    assert api.token == "test-token"
    assert session.headers["Authorization"] == "Bearer test-token"
    assert api.base_url == "https://assistant.example.com/api"


def test_init_without_token_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("dictionary_wiki.ai.client.ASSISTANT_TOKEN_FILES", [tmp_path / "none"])
    with patch("dictionary_wiki.ai.client.requests.Session"):
        api = AssistantApi("https://assistant.example.com")
    assert api.token is None


def test_init_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("dictionary_wiki.ai.client.ASSISTANT_API_URL", None)
    with pytest.raises(RuntimeError, match="No assistant URL"):
        AssistantApi()


def test_suggest_definitions_posts_flow_payload(
    api_with_mock_session: tuple[AssistantApi, MagicMock],
) -> None:
    api, session = api_with_mock_session
    session.post.return_value = _make_response(
        {"result": {"suggestedDefinitions": ["Service Type Mapping", "Claim Status"]}}
    )

    names = api.suggest_definitions(
        name="Auth Decision Date", description="<p>d</p>", keywords=["authorization"]
    )

    assert names == ["Service Type Mapping", "Claim Status"]
    url = session.post.call_args.args[0]
    assert url == "https://assistant.example.com/api/suggestDefinitionsFlow"
    body = json.loads(session.post.call_args.kwargs["data"])
    assert body == {
        "data": {
            "currentDefinitionName": "Auth Decision Date",
            "currentDefinitionDescription": "<p>d</p>",
            "keywords": ["authorization"],
        }
    }


def test_draft_definition(api_with_mock_session: tuple[AssistantApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    session.post.return_value = _make_response(
        {
            "result": {
                "name": "Member Age",
                "description": "<p>Age at service date.</p>",
                "keywords": ["member", "age"],
            }
        }
    )

    draft = api.draft_definition("SELECT age FROM members")

    assert draft == DraftedDefinition(
        name="Member Age", description="<p>Age at service date.</p>", keywords=("member", "age")
    )
    body = json.loads(session.post.call_args.kwargs["data"])
    assert body == {"data": {"query": "SELECT age FROM members"}}


def test_call_raises_on_error_envelope(
    api_with_mock_session: tuple[AssistantApi, MagicMock],
) -> None:
    api, session = api_with_mock_session
    session.post.return_value = _make_response({"error": {"message": "quota exceeded"}})
    with pytest.raises(RuntimeError, match="quota exceeded"):
        api.call("draftDefinitionFlow", {"query": "x"})


def test_call_propagates_http_errors(
    api_with_mock_session: tuple[AssistantApi, MagicMock],
) -> None:
    api, session = api_with_mock_session
    response = _make_response({})
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    session.post.return_value = response
    with pytest.raises(requests.HTTPError):
        api.call("draftDefinitionFlow", {"query": "x"})


def test_satisfies_protocol(api_with_mock_session: tuple[AssistantApi, MagicMock]) -> None:
    api, _session = api_with_mock_session
    assert isinstance(api, AssistantProtocol)
