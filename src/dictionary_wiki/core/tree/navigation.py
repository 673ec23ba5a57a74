"""Tree navigation: parents, breadcrumbs, siblings."""

from dictionary_wiki.core.tree.primitives import Tree
from dictionary_wiki.models.definition import Breadcrumb, Definition


def find_path(tree: Tree, definition_id: str) -> tuple[Definition, ...]:
    """Return the chain of nodes from a root down to ``definition_id``.

    Empty when the id does not resolve.
    """
    stack: list[tuple[Definition, tuple[Definition, ...]]] = [
        (node, (node,)) for node in reversed(tree)
    ]
    while stack:
        node, path = stack.pop()
        if node.id == definition_id:
            return path
        if node.children:
            stack.extend((child, (*path, child)) for child in reversed(node.children))
    return ()


def find_parent(tree: Tree, definition_id: str) -> Definition | None:
    """Return the direct parent of ``definition_id``, or None for roots and misses."""
    path = find_path(tree, definition_id)
    return path[-2] if len(path) >= 2 else None


def get_breadcrumbs(tree: Tree, definition_id: str) -> tuple[Breadcrumb, ...]:
    """Get ancestor breadcrumbs for a node.

    Returns breadcrumbs in order from root to immediate parent (excludes the node itself).
    """
    path = find_path(tree, definition_id)
    return tuple(
        Breadcrumb(definition_id=node.id, name=node.name, depth=depth)
        for depth, node in enumerate(path[:-1])
    )


def get_siblings(
    tree: Tree,
    definition_id: str,
    *,
    count: int = 3,
) -> tuple[tuple[Definition, ...], tuple[Definition, ...]]:
    """Get siblings before and after a node.

    Returns (siblings_before, siblings_after) tuples.
    """
    parent = find_parent(tree, definition_id)
    siblings = parent.children if parent is not None and parent.children else tree
    for i, node in enumerate(siblings):
        if node.id == definition_id:
            return siblings[max(0, i - count) : i], siblings[i + 1 : i + 1 + count]
    return (), ()
