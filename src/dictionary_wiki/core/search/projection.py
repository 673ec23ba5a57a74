"""Derive the visible tree from the authoritative tree and filter state."""

from collections.abc import Callable
from dataclasses import dataclass, replace

from dictionary_wiki.core.tree.primitives import Tree, filter_preserving_ancestors, iter_preorder
from dictionary_wiki.models.definition import Definition


@dataclass(frozen=True)
class FilterState:
    """Current tree-view filters."""

    query: str = ""
    show_archived: bool = False
    show_bookmarked: bool = False


def matches_query(definition: Definition, query: str) -> bool:
    """Case-insensitive substring match on the name or any keyword.

    Bodies are not inspected here; see ``searcher.search_definitions``.
    """
    needle = query.lower()
    return needle in definition.name.lower() or any(needle in k.lower() for k in definition.keywords)


def annotate_bookmarks(tree: Tree, is_bookmarked: Callable[[str], bool]) -> Tree:
    """Copy every node with its live bookmark status."""
    return tuple(
        replace(
            node,
            is_bookmarked=is_bookmarked(node.id),
            children=(
                annotate_bookmarks(node.children, is_bookmarked)
                if node.children is not None
                else None
            ),
        )
        for node in tree
    )


def project(
    tree: Tree,
    filters: FilterState,
    is_bookmarked: Callable[[str], bool],
) -> Tree:
    """Compute the visible tree.

    Stages run in a fixed order, each on the previous stage's output:
    query match, archived filtering, bookmark annotation, bookmarked-only.
    Every filtering stage keeps the ancestors of surviving nodes.
    """
    visible = tree
    query = filters.query.strip()
    if query:
        visible = filter_preserving_ancestors(visible, lambda d: matches_query(d, query))
    if not filters.show_archived:
        visible = filter_preserving_ancestors(visible, lambda d: not d.is_archived)
    visible = annotate_bookmarks(visible, is_bookmarked)
    if filters.show_bookmarked:
        visible = filter_preserving_ancestors(visible, lambda d: d.is_bookmarked)
    return visible


def visible_ids(tree: Tree) -> tuple[str, ...]:
    """Ids of a projected tree in pre-order."""
    return tuple(node.id for node in iter_preorder(tree))
