"""Character-level text diff with a semantic cleanup pass.

Raw edit scripts over prose shatter into single-character edits that share
letters by coincidence, so every diff goes through diff-match-patch's
semantic cleanup, which folds those into whole-word edits.
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from diff_match_patch import diff_match_patch


class Operation(enum.IntEnum):
    """Span classification, numbered like diff-match-patch's tuples."""

    DELETE = -1
    EQUAL = 0
    INSERT = 1


@dataclass(frozen=True)
class Span:
    """A run of text with its diff classification."""

    operation: Operation
    text: str


def _differ() -> diff_match_patch:
    dmp = diff_match_patch()
    # No time limit: the same inputs always give the same spans.
    dmp.Diff_Timeout = 0
    return dmp


def diff_text(a: str, b: str) -> tuple[Span, ...]:
    """Diff two text blobs into equal/insert/delete spans.

    Concatenating the equal and delete spans gives back ``a``; the equal and
    insert spans give back ``b``. Two empty strings produce one empty equal
    span.
    """
    if a == b:
        return (Span(Operation.EQUAL, a),)
    dmp = _differ()
    diffs = dmp.diff_main(a, b)
    dmp.diff_cleanupSemantic(diffs)
    return tuple(Span(Operation(op), text) for op, text in diffs)


def deletion_view(spans: Iterable[Span]) -> tuple[Span, ...]:
    """The "before" column: equal and deleted text only."""
    return tuple(s for s in spans if s.operation is not Operation.INSERT)


def insertion_view(spans: Iterable[Span]) -> tuple[Span, ...]:
    """The "after" column: equal and inserted text only."""
    return tuple(s for s in spans if s.operation is not Operation.DELETE)


def has_changed(a: str, b: str) -> bool:
    """True iff the diff of ``a`` and ``b`` contains any non-equal span."""
    return any(s.operation is not Operation.EQUAL for s in diff_text(a, b))


def render_markup(spans: Iterable[Span]) -> str:
    """Wrap deletions in ``<del>`` and insertions in ``<ins>``.

    Span text is emitted untouched; bodies are markup already.
    """
    parts: list[str] = []
    for span in spans:
        if span.operation is Operation.DELETE:
            parts.append(f"<del>{span.text}</del>")
        elif span.operation is Operation.INSERT:
            parts.append(f"<ins>{span.text}</ins>")
        else:
            parts.append(span.text)
    return "".join(parts)
