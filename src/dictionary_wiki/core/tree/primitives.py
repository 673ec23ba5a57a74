"""Recursive operations over the definition tree.

A tree is a tuple of top-level :class:`Definition` nodes. Every rewrite
returns a new tuple; nodes off the rewritten path are shared by reference,
so ``new is old`` means nothing changed.
"""

from collections.abc import Callable, Collection, Iterator
from dataclasses import replace

from dictionary_wiki.models.definition import Definition

Tree = tuple[Definition, ...]


def iter_preorder(tree: Tree) -> Iterator[Definition]:
    """Yield nodes depth-first, parents before children."""
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        yield node
        if node.children:
            stack.extend(reversed(node.children))


def flatten(tree: Tree) -> tuple[Definition, ...]:
    """Return every node in pre-order."""
    return tuple(iter_preorder(tree))


def find(tree: Tree, definition_id: str) -> Definition | None:
    """Return the first node with ``definition_id`` in pre-order, or None."""
    for node in iter_preorder(tree):
        if node.id == definition_id:
            return node
    return None


def find_by_name(tree: Tree, name: str, *, case_sensitive: bool = True) -> Definition | None:
    """Return the first node named ``name`` in pre-order, or None."""
    wanted = name if case_sensitive else name.lower()
    for node in iter_preorder(tree):
        candidate = node.name if case_sensitive else node.name.lower()
        if candidate == wanted:
            return node
    return None


def collect_ids(node: Definition) -> tuple[str, ...]:
    """Ids of ``node`` and all its descendants, in pre-order."""
    return tuple(n.id for n in iter_preorder((node,)))


def transform(
    tree: Tree, definition_id: str, fn: Callable[[Definition], Definition]
) -> Tree:
    """Replace the first node matching ``definition_id`` with ``fn(node)``.

    Ancestors of the replaced node are shallow-copied; everything else is
    shared. Returns ``tree`` itself when no node matched or ``fn`` returned
    the node unchanged.
    """
    new_tree, _found = _transform(tree, definition_id, fn)
    return new_tree


def _transform(
    nodes: Tree, definition_id: str, fn: Callable[[Definition], Definition]
) -> tuple[Tree, bool]:
    for i, node in enumerate(nodes):
        if node.id == definition_id:
            new_node = fn(node)
        elif node.children:
            new_children, found = _transform(node.children, definition_id, fn)
            if not found:
                continue
            new_node = node if new_children is node.children else replace(node, children=new_children)
        else:
            continue
        if new_node is node:
            return nodes, True
        return (*nodes[:i], new_node, *nodes[i + 1 :]), True
    return nodes, False


def transform_many(
    tree: Tree, ids: Collection[str], fn: Callable[[Definition], Definition]
) -> Tree:
    """Apply ``fn`` to every node whose id is in ``ids`` in a single rewrite."""
    if not ids:
        return tree

    def visit(nodes: Tree) -> Tree:
        changed = False
        out: list[Definition] = []
        for node in nodes:
            new_node = node
            if node.children:
                new_children = visit(node.children)
                if new_children is not node.children:
                    new_node = replace(node, children=new_children)
            if node.id in ids:
                new_node = fn(new_node)
            changed = changed or new_node is not node
            out.append(new_node)
        return tuple(out) if changed else nodes

    return visit(tree)


def filter_preserving_ancestors(
    tree: Tree, predicate: Callable[[Definition], bool]
) -> Tree:
    """Keep nodes that match ``predicate`` or have a surviving descendant.

    Children are resolved before their parent's keep/drop decision. A kept
    container carries only its surviving children.
    """
    kept: list[Definition] = []
    for node in tree:
        children = filter_preserving_ancestors(node.children, predicate) if node.children else ()
        if predicate(node) or children:
            if node.children is None:
                kept.append(node)
            else:
                kept.append(replace(node, children=children))
    return tuple(kept)


def remove(tree: Tree, definition_id: str) -> Tree:
    """Drop the first node matching ``definition_id`` along with its subtree."""
    for i, node in enumerate(tree):
        if node.id == definition_id:
            return (*tree[:i], *tree[i + 1 :])
        if node.children:
            new_children = remove(node.children, definition_id)
            if new_children is not node.children:
                return (*tree[:i], replace(node, children=new_children), *tree[i + 1 :])
    return tree


def duplicate_ids(tree: Tree) -> list[str]:
    """Ids that appear more than once, in order of their second occurrence."""
    seen: set[str] = set()
    dupes: list[str] = []
    for node in iter_preorder(tree):
        if node.id in seen and node.id not in dupes:
            dupes.append(node.id)
        seen.add(node.id)
    return dupes
