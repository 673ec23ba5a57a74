"""Side-by-side comparison of two saved revisions."""

from dataclasses import dataclass
from datetime import UTC, datetime

from dictionary_wiki.core.diff.engine import Span, deletion_view, diff_text, insertion_view
from dictionary_wiki.errors import NotFoundError, ValidationFailedError
from dictionary_wiki.models.definition import TEXT_FIELDS, Definition, Revision


@dataclass(frozen=True)
class FieldDiff:
    """Diff of one rich-text body between two snapshots."""

    field: str
    label: str
    spans: tuple[Span, ...]

    @property
    def before(self) -> tuple[Span, ...]:
        return deletion_view(self.spans)

    @property
    def after(self) -> tuple[Span, ...]:
        return insertion_view(self.spans)


@dataclass(frozen=True)
class RevisionComparison:
    """Older and newer revision with the differences between them."""

    older: Revision
    newer: Revision
    field_diffs: tuple[FieldDiff, ...]
    added_keywords: tuple[str, ...]
    removed_keywords: tuple[str, ...]

    @property
    def name_changed(self) -> bool:
        return self.older.snapshot.name != self.newer.snapshot.name


def _revision_time(revision: Revision) -> datetime:
    try:
        parsed = datetime.fromisoformat(revision.date)
    except ValueError:
        msg = f"Revision {revision.ticket_id!r} has an unparseable date: {revision.date!r}"
        raise ValidationFailedError(msg) from None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def compare_revisions(first: Revision, second: Revision) -> RevisionComparison:
    """Compare two revisions, oldest first regardless of argument order.

    Bodies that are textually identical are left out of ``field_diffs``.
    """
    older, newer = sorted((first, second), key=_revision_time)
    a, b = older.snapshot, newer.snapshot

    diffs = tuple(
        FieldDiff(field=field, label=label, spans=diff_text(getattr(a, field), getattr(b, field)))
        for field, label in TEXT_FIELDS
        if getattr(a, field) != getattr(b, field)
    )
    return RevisionComparison(
        older=older,
        newer=newer,
        field_diffs=diffs,
        added_keywords=tuple(k for k in b.keywords if k not in a.keywords),
        removed_keywords=tuple(k for k in a.keywords if k not in b.keywords),
    )


def find_revision(definition: Definition, ticket_id: str) -> Revision:
    """Look up a revision of ``definition`` by its ticket id."""
    for revision in definition.revisions:
        if revision.ticket_id == ticket_id:
            return revision
    raise NotFoundError(ticket_id, kind="Revision")
