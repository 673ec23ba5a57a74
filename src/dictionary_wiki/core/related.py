"""Resolve suggested definition names to definitions in the tree."""

from collections.abc import Iterable

from dictionary_wiki.core.tree.primitives import Tree, iter_preorder
from dictionary_wiki.models.definition import Definition


def resolve_suggestions(
    tree: Tree, current: Definition, names: Iterable[str]
) -> tuple[Definition, ...]:
    """Map suggested names to definitions, in suggestion order.

    Names are matched case-insensitively against the first definition with
    that name. Unresolved names, the current definition, definitions it
    already relates to and repeats are dropped.
    """
    by_name: dict[str, Definition] = {}
    for node in iter_preorder(tree):
        by_name.setdefault(node.name.lower(), node)

    skip = {current.id, *current.related_definitions}
    resolved: list[Definition] = []
    for name in names:
        match = by_name.get(name.strip().lower())
        if match is None or match.id in skip:
            continue
        skip.add(match.id)
        resolved.append(match)
    return tuple(resolved)
