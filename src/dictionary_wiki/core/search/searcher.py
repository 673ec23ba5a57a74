"""Full-text search across names, keywords and rich-text bodies."""

import re

from dictionary_wiki.core.tree.navigation import get_breadcrumbs
from dictionary_wiki.core.tree.primitives import Tree, iter_preorder
from dictionary_wiki.models.definition import TEXT_FIELDS, Definition, SearchResult

NAME_WEIGHT = 3.0
KEYWORD_WEIGHT = 2.0
BODY_WEIGHT = 1.0

_SNIPPET_RADIUS = 48


def _snippet(text: str, needle: str) -> str:
    """Cut a window around the first hit and mark it with ``**``."""
    # Matched on the original text: lowercasing can change string lengths.
    hit = re.search(re.escape(needle), text, re.IGNORECASE)
    if hit is None:
        return ""
    pos, hit_end = hit.span()
    start = max(0, pos - _SNIPPET_RADIUS)
    end = min(len(text), hit_end + _SNIPPET_RADIUS)
    snippet = text[start:pos] + "**" + text[pos:hit_end] + "**" + text[hit_end:end]
    snippet = " ".join(snippet.split())
    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet += "..."
    return snippet


def _score(definition: Definition, needle: str) -> tuple[float, str]:
    score = 0.0
    snippet = ""
    if needle in definition.name.lower():
        score += NAME_WEIGHT
        snippet = _snippet(definition.name, needle)
    if any(needle in k.lower() for k in definition.keywords):
        score += KEYWORD_WEIGHT
        if not snippet:
            snippet = _snippet(", ".join(definition.keywords), needle)
    for field, _label in TEXT_FIELDS:
        body = getattr(definition, field)
        if needle in body.lower():
            score += BODY_WEIGHT
            if not snippet:
                snippet = _snippet(body, needle)
    return score, snippet


def search_definitions(
    tree: Tree,
    query: str,
    *,
    include_archived: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[SearchResult], int]:
    """Search every definition, bodies included.

    Args:
        tree: The definition tree.
        query: Case-insensitive search text.
        include_archived: Whether archived definitions can match.
        limit: Max results to return.
        offset: Pagination offset.

    Returns:
        Tuple of (results, total_count). Results are ordered by score, then
        by tree order.
    """
    needle = query.strip().lower()
    if not needle:
        return [], 0

    hits: list[tuple[float, int, Definition, str]] = []
    for position, definition in enumerate(iter_preorder(tree)):
        if definition.is_archived and not include_archived:
            continue
        score, snippet = _score(definition, needle)
        if score > 0:
            hits.append((score, position, definition, snippet))

    hits.sort(key=lambda h: (-h[0], h[1]))
    page = hits[offset : offset + limit]
    results = [
        SearchResult(
            definition=definition,
            snippet=snippet,
            breadcrumbs=get_breadcrumbs(tree, definition.id),
            score=score,
        )
        for score, _position, definition, snippet in page
    ]
    return results, len(hits)
