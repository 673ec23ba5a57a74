"""Tests for MCP tool core functions."""

from dictionary_wiki.mcp.server import (
    wiki_compare_revisions,
    wiki_list_activity,
    wiki_list_modules,
    wiki_list_notifications,
    wiki_read_definition,
    wiki_search,
)
from dictionary_wiki.wiki import Wiki


def test_wiki_search_returns_results_with_metadata(wiki: Wiki) -> None:
    result = wiki_search(wiki, query="rates")
    assert result["count"] == 1
    assert result["total"] == 1
    assert result["has_more"] is False
    first = result["results"][0]
    assert first["definition_id"] == "2.1"
    assert first["breadcrumbs"] == "Provider"
    assert "snippet" in first


def test_wiki_search_empty_query_is_error(wiki: Wiki) -> None:
    result = wiki_search(wiki, query="  ")
    assert "error" in result
    assert result["results"] == []


def test_wiki_search_pagination(wiki: Wiki) -> None:
    result = wiki_search(wiki, query="p", limit=1)
    assert result["count"] == 1
    assert result["has_more"] is True
    assert result["next_offset"] == 1


def test_wiki_list_modules(wiki: Wiki) -> None:
    result = wiki_list_modules(wiki)
    assert result["count"] == 2
    member = result["modules"][0]
    assert member["name"] == "Member Management"
    assert member["children"][0] == {"id": "1.1", "name": "Authorizations", "child_count": 2}
    # Claims' only child is archived.
    assert member["children"][1]["child_count"] == 0


def test_wiki_read_definition_returns_markdown_and_context(wiki: Wiki) -> None:
    result = wiki_read_definition(wiki, definition_id="1.1.2")
    assert "error" not in result
    assert "- Service Type Mapping (id=1.1.2)" in result["content"]
    assert result["breadcrumbs"] == "Member Management > Authorizations"
    assert result["siblings_before"] == [{"id": "1.1.1", "name": "Auth Decision Date"}]
    assert result["related_definitions"] == ["1.1.1"]


def test_wiki_read_definition_counts_view(wiki: Wiki) -> None:
    wiki_read_definition(wiki, definition_id="2.1")
    assert wiki.analytics.views == {"Contracted Rates (ID: 2.1)": 1}


def test_wiki_read_definition_unknown(wiki: Wiki) -> None:
    assert wiki_read_definition(wiki, definition_id="nope") == {
        "error": "Definition 'nope' not found."
    }


def test_wiki_compare_revisions(wiki: Wiki) -> None:
    result = wiki_compare_revisions(
        wiki, definition_id="1.1.1", first_ticket="MPM-1290", second_ticket="MPM-1234"
    )
    assert result["older"]["ticket_id"] == "MPM-1234"
    assert result["added_keywords"] == ["SLA"]
    assert [f["field"] for f in result["fields"]] == ["description"]
    assert "<ins>" in result["fields"][0]["markup"]


def test_wiki_compare_revisions_unknown_ticket(wiki: Wiki) -> None:
    result = wiki_compare_revisions(
        wiki, definition_id="1.1.1", first_ticket="MPM-1290", second_ticket="NOPE"
    )
    assert "error" in result


def test_wiki_list_notifications(wiki: Wiki) -> None:
    wiki.toggle_bookmark("2.1")
    wiki.update("2.1", {"usage": "<p>u</p>"})
    wiki.update("2.1", {"usage": "<p>v</p>"})
    wiki.mark_notification_read(wiki.notifications.items[0].id)

    result = wiki_list_notifications(wiki)
    assert result["count"] == 2
    assert result["unread"] == 1
    assert wiki_list_notifications(wiki, unread_only=True)["count"] == 1


def test_wiki_list_activity(wiki: Wiki) -> None:
    wiki.view("2.1")
    wiki.toggle_bookmark("2.1")
    wiki.view("2.2")

    result = wiki_list_activity(wiki, activity_type="View", limit=1)
    assert result["total"] == 2
    assert result["count"] == 1
    assert result["activity"][0]["definition_name"] in {"Contracted Rates", "Network Tiers"}
    assert result["activity"][0]["user_name"] == "tester"
    assert "error" in wiki_list_activity(wiki, time_frame="fortnight")
