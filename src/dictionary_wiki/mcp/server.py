"""MCP server exposing data-dictionary search, reading and revision tools."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from dictionary_wiki.config import DATABASE_FILENAME, resolve_data_directory
from dictionary_wiki.core.diff.engine import render_markup
from dictionary_wiki.core.search.projection import FilterState
from dictionary_wiki.core.tree.markdown import render_subtree_as_markdown
from dictionary_wiki.core.tree.navigation import get_breadcrumbs, get_siblings
from dictionary_wiki.errors import NotFoundError, ValidationFailedError
from dictionary_wiki.storage.kv_store import SqliteKeyValueStore
from dictionary_wiki.wiki import Wiki


def _breadcrumbs_str(wiki: Wiki, definition_id: str) -> str:
    crumbs = get_breadcrumbs(wiki.tree, definition_id)
    return " > ".join(c.name[:40] for c in crumbs) if crumbs else ""


# --- Core functions (testable without MCP context) ---


def wiki_search(
    wiki: Wiki,
    *,
    query: str = "",
    include_archived: bool = False,
    include_breadcrumbs: bool = True,
    limit: int = 20,
    offset: int = 0,
) -> dict[str, Any]:
    """Search definition names, keywords and bodies.

    Args:
        query: Case-insensitive search text.
        include_archived: Whether archived definitions can match.
        include_breadcrumbs: Include ancestor chain in results.
        limit: Max results (1-50, default 20).
        offset: Pagination offset.
    """
    if not query.strip():
        return {"error": "No search query provided.", "results": [], "count": 0, "total": 0}

    limit = max(1, min(limit, 50))
    results, total = wiki.search(
        query, include_archived=include_archived, limit=limit, offset=offset
    )

    serialized = []
    for r in results:
        entry: dict[str, Any] = {
            "definition_id": r.definition.id,
            "name": r.definition.name,
            "module": r.definition.module,
            "keywords": list(r.definition.keywords),
            "snippet": r.snippet,
            "archived": r.definition.is_archived,
        }
        if include_breadcrumbs:
            entry["breadcrumbs"] = " > ".join(c.name[:40] for c in r.breadcrumbs)
        serialized.append(entry)

    output: dict[str, Any] = {
        "results": serialized,
        "count": len(serialized),
        "total": total,
        "has_more": offset + len(serialized) < total,
    }
    if output["has_more"]:
        output["next_offset"] = offset + limit
    return output


def wiki_list_modules(wiki: Wiki, *, include_archived: bool = False) -> dict[str, Any]:
    """List the top-level modules with their direct children."""
    visible = wiki.project(FilterState(show_archived=include_archived))
    return {
        "modules": [
            {
                "id": m.id,
                "name": m.name,
                "children": [
                    {"id": c.id, "name": c.name, "child_count": len(c.children or ())}
                    for c in m.children or ()
                ],
            }
            for m in visible
        ],
        "count": len(visible),
    }


def wiki_read_definition(
    wiki: Wiki,
    *,
    definition_id: str,
    max_depth: int | None = 0,
    include_bodies: bool = True,
    sibling_count: int = 3,
) -> dict[str, Any]:
    """Read a definition as markdown with its position in the tree.

    Args:
        definition_id: Definition ID to read.
        max_depth: Levels of descendants to include (None = unlimited).
        include_bodies: Include description, technical details, examples, usage.
        sibling_count: Number of siblings before/after to include.
    """
    try:
        definition = wiki.view(definition_id)
    except NotFoundError:
        return {"error": f"Definition '{definition_id}' not found."}

    md = render_subtree_as_markdown(definition, max_depth=max_depth, include_bodies=include_bodies)
    before, after = get_siblings(wiki.tree, definition_id, count=sibling_count)
    estimated_tokens = len(md) // 4
    result: dict[str, Any] = {
        "content": md,
        "definition_id": definition_id,
        "breadcrumbs": _breadcrumbs_str(wiki, definition_id),
        "siblings_before": [{"id": s.id, "name": s.name} for s in before],
        "siblings_after": [{"id": s.id, "name": s.name} for s in after],
        "revisions": [
            {"ticket_id": r.ticket_id, "date": r.date, "developer": r.developer}
            for r in definition.revisions
        ],
        "related_definitions": list(definition.related_definitions),
        "supporting_tables": [
            {"id": t.id, "name": t.name, "headers": list(t.headers), "rows": [list(r) for r in t.rows]}
            for t in wiki.supporting_tables_for(definition_id)
        ],
        "estimated_tokens": estimated_tokens,
    }
    if estimated_tokens > 5000:
        result["warning"] = (
            f"Large result (~{estimated_tokens} tokens). "
            "Consider using max_depth or include_bodies=False to limit output."
        )
    return result


def wiki_compare_revisions(
    wiki: Wiki,
    *,
    definition_id: str,
    first_ticket: str,
    second_ticket: str,
) -> dict[str, Any]:
    """Diff two revisions of a definition, oldest first.

    Args:
        definition_id: Definition ID.
        first_ticket: Ticket ID of one revision.
        second_ticket: Ticket ID of another revision.
    """
    try:
        comparison = wiki.compare_revisions(definition_id, first_ticket, second_ticket)
    except (NotFoundError, ValidationFailedError) as e:
        return {"error": str(e)}

    return {
        "older": {"ticket_id": comparison.older.ticket_id, "date": comparison.older.date},
        "newer": {"ticket_id": comparison.newer.ticket_id, "date": comparison.newer.date},
        "name_changed": comparison.name_changed,
        "added_keywords": list(comparison.added_keywords),
        "removed_keywords": list(comparison.removed_keywords),
        "fields": [
            {"field": d.field, "label": d.label, "markup": render_markup(d.spans)}
            for d in comparison.field_diffs
        ],
    }


def wiki_list_notifications(wiki: Wiki, *, unread_only: bool = False) -> dict[str, Any]:
    """List notifications about bookmarked definitions, newest first."""
    items = [n for n in wiki.notifications.items if not (unread_only and n.read)]
    return {
        "notifications": [
            {
                "id": n.id,
                "definition_id": n.definition_id,
                "definition_name": n.definition_name,
                "message": n.message,
                "date": n.date,
                "read": n.read,
            }
            for n in items
        ],
        "count": len(items),
        "unread": wiki.notifications.unread_count,
    }


def wiki_list_activity(
    wiki: Wiki,
    *,
    user: str = "",
    activity_type: str = "",
    time_frame: str = "all",
    limit: int = 50,
) -> dict[str, Any]:
    """List activity log entries, newest first."""
    try:
        entries = wiki.query_activity(
            users=[user] if user else (),
            activity_types=[activity_type] if activity_type else (),
            time_frame=time_frame,
        )
    except ValidationFailedError as e:
        return {"error": str(e)}
    limit = max(1, min(limit, 200))
    return {
        "activity": [
            {
                "user_name": entry.user_name,
                "activity_type": entry.activity_type.value,
                "definition_id": entry.definition_id,
                "definition_name": entry.definition_name,
                "occurred_date": entry.occurred_date,
            }
            for entry in entries[:limit]
        ],
        "count": min(len(entries), limit),
        "total": len(entries),
    }


# --- MCP server setup ---


@dataclass
class ServerContext:
    wiki: Wiki
    store: SqliteKeyValueStore
    data_dir: Path


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open the wiki database on startup, close on shutdown."""
    data_dir = resolve_data_directory()
    store = SqliteKeyValueStore.open(data_dir / DATABASE_FILENAME)
    try:
        wiki = Wiki(store)
        wiki.load()
        logger.info("Serving wiki from {}", data_dir)
        yield ServerContext(wiki=wiki, store=store, data_dir=data_dir)
    finally:
        store.close()


mcp_server = FastMCP(
    "dictionary-wiki",
    instructions="""\
The data dictionary is a tree of modules containing business definitions.
Each definition has a description, technical details, examples, usage notes
and a revision history keyed by ticket id.

1. Use wiki_list_modules_tool to see the modules, or wiki_search_tool to find
   definitions by name, keyword or body text.
2. Call wiki_read_definition_tool on interesting results for the full bodies.
3. Use wiki_compare_revisions_tool with two ticket ids to see what changed.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def wiki_search_tool(
    ctx: Context,
    query: str = "",
    include_archived: bool = False,
    include_breadcrumbs: bool = True,
    limit: int = 20,
    offset: int = 0,
) -> dict[str, Any]:
    """Search data dictionary definitions.

    Matches names, keywords and the rich-text bodies. Results carry a
    snippet around the first hit; call wiki_read_definition_tool for the
    full content.

    Pagination: When has_more is true, use next_offset in a follow-up call.

    Args:
        query: Search text.
        include_archived: Also match archived definitions.
        include_breadcrumbs: Include ancestor chain in results.
        limit: Max results (1-50, default 20).
        offset: Pagination offset.
    """
    return wiki_search(
        _ctx(ctx).wiki,
        query=query,
        include_archived=include_archived,
        include_breadcrumbs=include_breadcrumbs,
        limit=limit,
        offset=offset,
    )


@mcp_server.tool()
async def wiki_read_definition_tool(
    ctx: Context,
    definition_id: str,
    max_depth: int | None = 0,
    include_bodies: bool = True,
    sibling_count: int = 3,
) -> dict[str, Any]:
    """Read a definition with breadcrumbs, siblings, revisions and tables.

    Args:
        definition_id: Definition ID from search results.
        max_depth: Levels of descendants (0 = just this definition, None = all).
        include_bodies: Include the rich-text bodies.
        sibling_count: Siblings before/after to include.
    """
    return wiki_read_definition(
        _ctx(ctx).wiki,
        definition_id=definition_id,
        max_depth=max_depth,
        include_bodies=include_bodies,
        sibling_count=sibling_count,
    )


@mcp_server.tool()
async def wiki_list_modules_tool(ctx: Context, include_archived: bool = False) -> dict[str, Any]:
    """List the top-level modules and their direct children."""
    return wiki_list_modules(_ctx(ctx).wiki, include_archived=include_archived)


@mcp_server.tool()
async def wiki_compare_revisions_tool(
    ctx: Context,
    definition_id: str,
    first_ticket: str,
    second_ticket: str,
) -> dict[str, Any]:
    """Compare two revisions of a definition.

    Bodies are returned with <del> and <ins> markup around changed text.

    Args:
        definition_id: Definition ID.
        first_ticket: Ticket ID of one revision.
        second_ticket: Ticket ID of another revision.
    """
    return wiki_compare_revisions(
        _ctx(ctx).wiki,
        definition_id=definition_id,
        first_ticket=first_ticket,
        second_ticket=second_ticket,
    )


@mcp_server.tool()
async def wiki_list_notifications_tool(ctx: Context, unread_only: bool = False) -> dict[str, Any]:
    """List change notifications for bookmarked definitions."""
    return wiki_list_notifications(_ctx(ctx).wiki, unread_only=unread_only)


@mcp_server.tool()
async def wiki_list_activity_tool(
    ctx: Context,
    user: str = "",
    activity_type: str = "",
    time_frame: str = "all",
    limit: int = 50,
) -> dict[str, Any]:
    """List who viewed, searched, edited, created, bookmarked or exported definitions.

    Args:
        user: Only this user's activity.
        activity_type: View, Edit, Create, Download, Bookmark, Archive, Duplicate or Search.
        time_frame: all, this-week, last-week, this-month or last-month.
        limit: Max entries (1-200, default 50).
    """
    return wiki_list_activity(
        _ctx(ctx).wiki,
        user=user,
        activity_type=activity_type,
        time_frame=time_frame,
        limit=limit,
    )


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from dictionary_wiki.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
