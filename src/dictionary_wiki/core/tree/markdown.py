"""Render definition subtrees as markdown."""

import io

from dictionary_wiki.models.definition import TEXT_FIELDS, Definition


def render_subtree_as_markdown(
    definition: Definition,
    *,
    max_depth: int | None = None,
    include_bodies: bool = True,
) -> str:
    """Render a definition and its descendants as indented markdown.

    Args:
        definition: The root node to start rendering from.
        max_depth: Max levels below the start node to include (None = unlimited).
        include_bodies: Whether to include the rich-text bodies.

    Returns:
        Markdown string with bullet-list hierarchy.
    """
    out = io.StringIO()
    _render(out, definition, 0, max_depth, include_bodies)
    return out.getvalue()


def _render(
    out: io.StringIO,
    node: Definition,
    depth: int,
    max_depth: int | None,
    include_bodies: bool,
) -> None:
    indent = "    " * depth
    marker = " [archived]" if node.is_archived else ""
    out.write(f"{indent}- {node.name}{marker} (id={node.id})\n")

    if node.keywords:
        out.write(f"{indent}  keywords: {', '.join(node.keywords)}\n")

    if include_bodies:
        for field, label in TEXT_FIELDS:
            body = getattr(node, field).strip()
            if not body:
                continue
            out.write(f"{indent}  > {label}:\n")
            for line in body.split("\n"):
                out.write(f"{indent}  > {line.strip()}\n")

    children = node.children or ()
    if max_depth is not None and depth >= max_depth:
        # Truncation indicator when children are cut off by max_depth
        if children:
            child_indent = "    " * (depth + 1)
            noun = "child" if len(children) == 1 else "children"
            out.write(f"{child_indent}- ... ({len(children)} more {noun}, id={node.id})\n")
        return

    for child in children:
        _render(out, child, depth + 1, max_depth, include_bodies)
