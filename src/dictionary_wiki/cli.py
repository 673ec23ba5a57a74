"""CLI for the data-dictionary wiki (browse, edit, compare, export, MCP server)."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from dictionary_wiki.ai.client import AssistantApi
from dictionary_wiki.config import ASSISTANT_API_URL, DATABASE_FILENAME, resolve_data_directory
from dictionary_wiki.core.activity import TIME_FRAMES
from dictionary_wiki.core.diff.engine import render_markup
from dictionary_wiki.core.search.projection import FilterState
from dictionary_wiki.core.templates import TEMPLATES
from dictionary_wiki.core.tree.markdown import render_subtree_as_markdown
from dictionary_wiki.core.tree.navigation import get_breadcrumbs
from dictionary_wiki.errors import WikiError
from dictionary_wiki.logging_config import configure_logging
from dictionary_wiki.protocols import AssistantProtocol
from dictionary_wiki.storage.kv_store import SqliteKeyValueStore
from dictionary_wiki.wiki import Wiki

app = typer.Typer(help="Data dictionary wiki: browse, edit and compare business definitions.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Wiki database directory"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _make_assistant() -> AssistantProtocol | None:
    return AssistantApi() if ASSISTANT_API_URL else None


@contextmanager
def _open_wiki(data_dir: Path | None) -> Iterator[Wiki]:
    """Open the wiki database, report wiki errors and exit non-zero on them."""
    directory = data_dir or resolve_data_directory()
    try:
        store = SqliteKeyValueStore.open(directory / DATABASE_FILENAME)
    except WikiError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from None
    try:
        wiki = Wiki(store, assistant=_make_assistant())
        wiki.load()
        yield wiki
    except WikiError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from None
    finally:
        store.close()


@app.command()
def tree(
    query: Annotated[
        str,
        typer.Option("--query", "-q", help="Only definitions whose name or keywords match"),
    ] = "",
    archived: bool = typer.Option(False, "--archived", "-a", help="Include archived definitions"),
    bookmarked: bool = typer.Option(False, "--bookmarked", "-b", help="Only bookmarked definitions"),
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show the definition tree."""
    with _open_wiki(data_dir) as wiki:
        visible = wiki.project(
            FilterState(query=query, show_archived=archived, show_bookmarked=bookmarked)
        )
        if not visible:
            typer.echo("No definitions found.")
            return
        for node in visible:
            typer.echo(
                render_subtree_as_markdown(node, max_depth=max_depth, include_bodies=False),
                nl=False,
            )


@app.command()
def show(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Show a definition with its bodies, revisions, notes and tables."""
    with _open_wiki(data_dir) as wiki:
        definition = wiki.view(definition_id)
        crumbs = get_breadcrumbs(wiki.tree, definition_id)
        if crumbs:
            typer.echo(" > ".join(c.name for c in crumbs))
        typer.echo(render_subtree_as_markdown(definition, max_depth=max_depth), nl=False)

        if definition.revisions:
            typer.echo("\nRevisions:")
            for r in definition.revisions:
                typer.echo(f"  {r.ticket_id}  {r.date}  {r.developer}: {r.description}")
        if definition.notes:
            typer.echo("\nNotes:")
            for n in definition.notes:
                typer.echo(f"  [{n.author}, {n.date}] {n.content}  (id={n.id})")
        tables = wiki.supporting_tables_for(definition_id)
        if tables:
            typer.echo("\nSupporting tables:")
            for t in tables:
                typer.echo(f"  {t.name} ({len(t.rows)} rows)  [id={t.id}]")
        if definition.related_definitions:
            typer.echo("\nRelated: " + ", ".join(definition.related_definitions))


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    archived: bool = typer.Option(False, "--archived", "-a", help="Include archived definitions"),
    limit: int = typer.Option(10, "--limit", "-n", help="Max results"),
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search names, keywords and bodies of every definition."""
    with _open_wiki(data_dir) as wiki:
        results, total = wiki.search(query, include_archived=archived, limit=limit)

        if output_json:
            data = {
                "results": [
                    {
                        "id": r.definition.id,
                        "name": r.definition.name,
                        "module": r.definition.module,
                        "snippet": r.snippet,
                        "breadcrumbs": " > ".join(c.name for c in r.breadcrumbs),
                        "score": r.score,
                    }
                    for r in results
                ],
                "total": total,
            }
            typer.echo(json.dumps(data, indent=2))
        else:
            typer.echo(f"Found {total} results (showing {len(results)}):\n")
            for r in results:
                trail = " > ".join(c.name for c in r.breadcrumbs)
                typer.echo(f"  [{trail}] {r.definition.name}")
                if r.snippet:
                    typer.echo(f"    {r.snippet[:100]}")
                typer.echo(f"    id={r.definition.id}")
                typer.echo()


@app.command()
def create(
    module: str = typer.Argument(..., help="Name of the module to create the definition in"),
    name: str = typer.Argument(..., help="Definition name"),
    description: Annotated[
        str | None, typer.Option("--description", help="Description body")
    ] = None,
    keyword: Annotated[
        list[str] | None,
        typer.Option("--keyword", "-k", help="Keyword (repeatable)"),
    ] = None,
    template: Annotated[
        str | None,
        typer.Option("--template", "-t", help="Template to start from (see `templates`)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Create a definition under a module."""
    content: dict[str, object] = {"name": name}
    if description is not None:
        content["description"] = description
    if keyword:
        content["keywords"] = keyword
    with _open_wiki(data_dir) as wiki:
        definition = wiki.create(module, content, template=template)
        typer.echo(f"Created {definition.name} [id={definition.id}]")


@app.command()
def templates() -> None:
    """List the templates new definitions can start from."""
    for t in TEMPLATES:
        typer.echo(f"{t.id:<16} {t.title}: {t.description}")


@app.command()
def update(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    description: Annotated[str | None, typer.Option("--description", help="Description")] = None,
    technical_details: Annotated[
        str | None, typer.Option("--technical-details", help="Technical details")
    ] = None,
    examples: Annotated[str | None, typer.Option("--examples", help="Examples")] = None,
    usage: Annotated[str | None, typer.Option("--usage", help="Usage")] = None,
    keyword: Annotated[
        list[str] | None,
        typer.Option("--keyword", "-k", help="Replace keywords (repeatable)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Change content fields of a definition."""
    changes = {
        field: value
        for field, value in {
            "name": name,
            "description": description,
            "technical_details": technical_details,
            "examples": examples,
            "usage": usage,
            "keywords": keyword,
        }.items()
        if value is not None
    }
    if not changes:
        typer.echo("Nothing to update.")
        raise typer.Exit(1)

    with _open_wiki(data_dir) as wiki:
        unread_before = wiki.notifications.unread_count
        definition = wiki.update(definition_id, changes)
        typer.echo(f"Updated {definition.name} ({', '.join(sorted(changes))})")
        if wiki.notifications.unread_count > unread_before:
            typer.echo(f"Notification: {wiki.notifications.items[0].message}")


@app.command()
def duplicate(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    data_dir: DataDirOption = None,
) -> None:
    """Copy a definition next to the original."""
    with _open_wiki(data_dir) as wiki:
        copy = wiki.duplicate(definition_id)
        typer.echo(f"Created {copy.name} [id={copy.id}]")


@app.command()
def archive(
    definition_ids: Annotated[list[str], typer.Argument(help="Definition IDs")],
    undo: bool = typer.Option(False, "--undo", "-u", help="Unarchive instead"),
    data_dir: DataDirOption = None,
) -> None:
    """Archive (or unarchive) one or more definitions."""
    with _open_wiki(data_dir) as wiki:
        if len(definition_ids) == 1:
            wiki.archive(definition_ids[0], not undo)
        else:
            wiki.bulk_archive(definition_ids, not undo)
        verb = "Unarchived" if undo else "Archived"
        typer.echo(f"{verb} {len(definition_ids)} definition(s)")


@app.command()
def delete(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a definition and everything below it."""
    with _open_wiki(data_dir) as wiki:
        removed = wiki.delete(definition_id)
        typer.echo(f"Deleted {len(removed)} definition(s): {', '.join(removed)}")


@app.command()
def bookmark(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    data_dir: DataDirOption = None,
) -> None:
    """Toggle the bookmark on a definition."""
    with _open_wiki(data_dir) as wiki:
        state = wiki.toggle_bookmark(definition_id)
        typer.echo(f"{'Bookmarked' if state else 'Removed bookmark from'} {definition_id}")


@app.command()
def note(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    content: str = typer.Argument(..., help="Note text"),
    author: str = typer.Option("CLI", "--author", help="Author name"),
    shared: bool = typer.Option(False, "--shared", help="Share the note with other users"),
    data_dir: DataDirOption = None,
) -> None:
    """Add a note to a definition."""
    with _open_wiki(data_dir) as wiki:
        added = wiki.add_note(definition_id, content, author=author, is_shared=shared)
        typer.echo(f"Added note [id={added.id}]")


@app.command()
def notifications(
    mark_read: Annotated[
        str | None,
        typer.Option("--mark-read", help="Mark one notification as read"),
    ] = None,
    mark_all: bool = typer.Option(False, "--mark-all", help="Mark every notification as read"),
    remove: Annotated[
        str | None,
        typer.Option("--delete", help="Delete one notification"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """List notifications, optionally marking or deleting first."""
    with _open_wiki(data_dir) as wiki:
        if mark_read:
            wiki.mark_notification_read(mark_read)
        if mark_all:
            wiki.mark_all_notifications_read()
        if remove:
            wiki.delete_notification(remove)

        log = wiki.notifications
        typer.echo(f"{len(log.items)} notifications ({log.unread_count} unread):\n")
        for n in log.items:
            flag = " " if n.read else "*"
            typer.echo(f"{flag} {n.message}")
            typer.echo(f"    {n.date}  definition={n.definition_id}  id={n.id}")


@app.command()
def compare(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    first: str = typer.Argument(..., help="Ticket ID of one revision"),
    second: str = typer.Argument(..., help="Ticket ID of another revision"),
    data_dir: DataDirOption = None,
) -> None:
    """Compare two revisions of a definition."""
    with _open_wiki(data_dir) as wiki:
        comparison = wiki.compare_revisions(definition_id, first, second)
        older, newer = comparison.older, comparison.newer
        typer.echo(f"{older.ticket_id} ({older.date}) -> {newer.ticket_id} ({newer.date})")
        if comparison.name_changed:
            typer.echo(f"Name: {older.snapshot.name} -> {newer.snapshot.name}")
        if comparison.added_keywords:
            typer.echo("Added keywords: " + ", ".join(comparison.added_keywords))
        if comparison.removed_keywords:
            typer.echo("Removed keywords: " + ", ".join(comparison.removed_keywords))
        if not comparison.field_diffs:
            typer.echo("No body changes.")
        for diff in comparison.field_diffs:
            typer.echo(f"\n## {diff.label}")
            typer.echo(render_markup(diff.spans))


@app.command()
def export(
    definition_ids: Annotated[list[str], typer.Argument(help="Definition IDs to export")],
    with_children: bool = typer.Option(
        False, "--with-children", "-c", help="Also export everything below each ID"
    ),
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to file instead of stdout"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Export definitions as JSON."""
    with _open_wiki(data_dir) as wiki:
        selection: set[str] = set()
        for definition_id in definition_ids:
            if with_children:
                selection.update(wiki.expand_selection(definition_id))
            else:
                selection.add(wiki.get(definition_id).id)
        contents = json.dumps(wiki.export_json(selection), indent=2)

    if output:
        output.write_text(contents + "\n", encoding="utf-8")
        typer.echo(f"Exported {len(selection)} definition(s) to {output}")
    else:
        typer.echo(contents)


@app.command()
def related(
    definition_id: str = typer.Argument(..., help="Definition ID"),
    link: bool = typer.Option(False, "--link", "-l", help="Link every suggestion"),
    data_dir: DataDirOption = None,
) -> None:
    """Ask the assistant for related definitions."""
    with _open_wiki(data_dir) as wiki:
        suggestions = wiki.suggest_related(definition_id)
        if not suggestions:
            typer.echo("No related definitions found.")
            return
        for s in suggestions:
            typer.echo(f"  {s.name}  [id={s.id}]")
        if link:
            wiki.link_related(definition_id, [s.id for s in suggestions])
            typer.echo(f"Linked {len(suggestions)} definition(s)")


@app.command()
def draft(
    module: str = typer.Argument(..., help="Module to create the drafted definition in"),
    source: Path = typer.Argument(..., help="File with the SQL query or text to draft from"),
    data_dir: DataDirOption = None,
) -> None:
    """Draft a new definition from a SQL query with the assistant."""
    if not source.exists():
        logger.error("Source file not found: {}", source)
        raise typer.Exit(1)
    with _open_wiki(data_dir) as wiki:
        definition = wiki.draft_definition(source.read_text(encoding="utf-8"), module)
        typer.echo(f"Created {definition.name} [id={definition.id}]")


@app.command()
def stats(
    count: int = typer.Option(5, "--count", "-n", help="Entries per list"),
    data_dir: DataDirOption = None,
) -> None:
    """Show the most frequent searches and most viewed definitions."""
    with _open_wiki(data_dir) as wiki:
        for title, kind in (("Top searches", "searches"), ("Top views", "views")):
            typer.echo(f"{title}:")
            items = wiki.analytics.top_items(kind, count)
            if not items:
                typer.echo("  (none)")
            for key, hits in items:
                typer.echo(f"  {hits:>5}  {key}")


@app.command()
def activity(
    user: Annotated[
        list[str] | None,
        typer.Option("--user", "-u", help="Only this user (repeatable)"),
    ] = None,
    activity_type: Annotated[
        list[str] | None,
        typer.Option("--type", "-t", help="Only this activity type, e.g. Edit (repeatable)"),
    ] = None,
    definition: Annotated[
        list[str] | None,
        typer.Option("--definition", help="Only this definition name (repeatable)"),
    ] = None,
    time_frame: str = typer.Option(
        "all", "--time-frame", "-f", help=f"One of: {', '.join(TIME_FRAMES)}"
    ),
    since: Annotated[
        datetime | None,
        typer.Option("--since", formats=["%Y-%m-%d"], help="Custom range start day"),
    ] = None,
    until: Annotated[
        datetime | None,
        typer.Option("--until", formats=["%Y-%m-%d"], help="Custom range end day (inclusive)"),
    ] = None,
    oldest_first: bool = typer.Option(False, "--oldest-first", help="Sort oldest first"),
    data_dir: DataDirOption = None,
) -> None:
    """Show the activity log, newest first."""
    start = end = None
    if since or until:
        time_frame = "custom"
        start = since.replace(tzinfo=UTC) if since else None
        end = until.replace(tzinfo=UTC) + timedelta(days=1) if until else None
    with _open_wiki(data_dir) as wiki:
        entries = wiki.query_activity(
            users=user or (),
            activity_types=activity_type or (),
            definitions=definition or (),
            time_frame=time_frame,
            start=start,
            end=end,
            newest_first=not oldest_first,
        )
        if not entries:
            typer.echo("No activity found.")
            return
        for e in entries:
            target = f'"{e.definition_name}"' if e.definition_name else ""
            line = f"{e.occurred_date}  {e.user_name:<12} {e.activity_type:<9} {target}"
            typer.echo(line.rstrip())


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from dictionary_wiki.mcp.server import run_mcp_server

    run_mcp_server()
