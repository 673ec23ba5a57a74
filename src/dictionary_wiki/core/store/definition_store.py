"""The authoritative definition tree and its mutation contract.

Every operation computes a complete new tree before assigning it, so a
failure leaves ``store.tree`` exactly as it was. Earlier trees are never
modified; a caller holding one keeps a valid snapshot.
"""

import uuid
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from loguru import logger

from dictionary_wiki.core.export.exporter import select_for_export
from dictionary_wiki.core.tree.navigation import find_parent
from dictionary_wiki.core.tree.primitives import (
    Tree,
    collect_ids,
    duplicate_ids,
    find,
    find_by_name,
    flatten,
    iter_preorder,
    remove,
    transform,
    transform_many,
)
from dictionary_wiki.errors import CorruptStateError, NotFoundError, ValidationFailedError
from dictionary_wiki.models.definition import (
    CONTENT_FIELDS,
    Attachment,
    Definition,
    Note,
    Revision,
    SupportingTableRef,
)

_TUPLE_FIELDS = {"keywords", "supporting_tables", "attachments", "notes", "related_definitions"}
_ITEM_TYPES: dict[str, type] = {
    "supporting_tables": SupportingTableRef,
    "attachments": Attachment,
    "notes": Note,
}


@dataclass(frozen=True)
class UpdateResult:
    """The node before and after an update."""

    previous: Definition
    updated: Definition


def _default_id_factory() -> str:
    return uuid.uuid4().hex[:12]


def _coerce_content(changes: Mapping[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(changes) - CONTENT_FIELDS)
    if unknown:
        msg = f"Not content fields: {', '.join(unknown)}"
        raise ValidationFailedError(msg)

    content = dict(changes)
    for field in _TUPLE_FIELDS & content.keys():
        value = content[field]
        if isinstance(value, str):
            msg = f"{field} must be a sequence, not a string"
            raise ValidationFailedError(msg)
        content[field] = tuple(value)

    for field, expected in _ITEM_TYPES.items():
        if field in content and not all(isinstance(v, expected) for v in content[field]):
            msg = f"{field} must contain {expected.__name__} items"
            raise ValidationFailedError(msg)

    if "name" in content and not str(content["name"]).strip():
        msg = "Definition name cannot be empty"
        raise ValidationFailedError(msg)
    return content


class DefinitionStore:
    """Owns the definition tree and applies copy-on-write mutations."""

    def __init__(
        self,
        tree: Iterable[Definition] = (),
        *,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._tree: Tree = ()
        self._issued_ids: set[str] = set()
        self._id_factory = id_factory or _default_id_factory
        self.reconcile(tuple(tree))

    @property
    def tree(self) -> Tree:
        return self._tree

    def reconcile(self, tree: Tree) -> None:
        """Accept ``tree`` as the new authoritative state.

        Raises:
            CorruptStateError: If any id appears more than once.
        """
        dupes = duplicate_ids(tree)
        if dupes:
            msg = f"Duplicate definition ids: {dupes!r}"
            raise CorruptStateError(msg)
        self._tree = tree
        self._issued_ids.update(n.id for n in iter_preorder(tree))
        logger.debug("Reconciled tree with {} definitions", len(self._issued_ids))

    def get(self, definition_id: str) -> Definition:
        node = find(self._tree, definition_id)
        if node is None:
            raise NotFoundError(definition_id)
        return node

    def flatten(self) -> tuple[Definition, ...]:
        return flatten(self._tree)

    def export_selection(self, selection: Collection[str]) -> tuple[Definition, ...]:
        """Selected nodes in pre-order, for the export collaborator."""
        return select_for_export(self._tree, selection)

    def _fresh_id(self, prefix: str = "") -> str:
        # Ids handed out once are never handed out again, even after deletion.
        while True:
            candidate = prefix + self._id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate

    def update(self, definition_id: str, changes: Mapping[str, Any]) -> UpdateResult:
        """Replace content fields of the node at ``definition_id``."""
        content = _coerce_content(changes)
        previous = self.get(definition_id)
        updated = replace(previous, **content)
        self._tree = transform(self._tree, definition_id, lambda _node: updated)
        logger.debug("Updated {} ({})", definition_id, ", ".join(sorted(content)) or "no fields")
        return UpdateResult(previous=previous, updated=updated)

    def create(self, parent_module_name: str, content: Mapping[str, Any]) -> Definition:
        """Insert a new definition under the module named ``parent_module_name``.

        The module is looked up among the top-level nodes first, then anywhere
        in the tree. When no node has that name, a new top-level module is
        synthesized around the new definition.
        """
        if not parent_module_name.strip():
            msg = "Module name cannot be empty"
            raise ValidationFailedError(msg)
        fields = _coerce_content(content)
        if not str(fields.get("name", "")).strip():
            msg = "Definition name cannot be empty"
            raise ValidationFailedError(msg)
        fields.setdefault("module", parent_module_name)

        new_node = Definition(id=self._fresh_id(), **fields)

        parent = next((n for n in self._tree if n.name == parent_module_name), None)
        if parent is None:
            parent = find_by_name(self._tree, parent_module_name)

        if parent is not None:
            self._tree = self._prepend_child(parent.id, new_node)
            logger.debug("Created {} under {}", new_node.id, parent.id)
        else:
            module = Definition(
                id=self._fresh_id(prefix="mod-"),
                name=parent_module_name,
                module=parent_module_name,
                children=(new_node,),
            )
            self._tree = (*self._tree, module)
            logger.debug("Created {} under new module {}", new_node.id, module.id)
        return new_node

    def _prepend_child(self, parent_id: str, child: Definition) -> Tree:
        return transform(
            self._tree,
            parent_id,
            lambda p: replace(p, children=(child, *(p.children or ()))),
        )

    def duplicate(self, definition_id: str) -> Definition:
        """Clone a node's content under a fresh id next to the original."""
        original = self.get(definition_id)
        parent = find_parent(self._tree, definition_id)
        copy_fields = {
            "name": f"{original.name} (Copy)",
            "keywords": original.keywords,
            "description": original.description,
            "technical_details": original.technical_details,
            "examples": original.examples,
            "usage": original.usage,
            "supporting_tables": original.supporting_tables,
            "attachments": original.attachments,
        }
        if parent is None:
            return self.create(original.module, copy_fields)

        copy = Definition(id=self._fresh_id(), module=parent.name, **copy_fields)
        self._tree = self._prepend_child(parent.id, copy)
        logger.debug("Duplicated {} as {}", definition_id, copy.id)
        return copy

    def archive(self, definition_id: str, archived: bool) -> Definition:
        """Set ``is_archived`` on exactly one node; children are untouched."""
        node = self.get(definition_id)
        if node.is_archived == archived:
            return node
        updated = replace(node, is_archived=archived)
        self._tree = transform(self._tree, definition_id, lambda _node: updated)
        logger.debug("{} {}", "Archived" if archived else "Unarchived", definition_id)
        return updated

    def bulk_archive(self, ids: Collection[str], archived: bool) -> None:
        """Archive or unarchive every id in one tree rewrite."""
        wanted = set(ids)
        present = {n.id for n in iter_preorder(self._tree)}
        missing = sorted(wanted - present)
        if missing:
            raise NotFoundError(", ".join(missing))

        def set_flag(node: Definition) -> Definition:
            return node if node.is_archived == archived else replace(node, is_archived=archived)

        self._tree = transform_many(self._tree, wanted, set_flag)
        logger.debug("Bulk {} {} definitions", "archived" if archived else "unarchived", len(wanted))

    def delete(self, definition_id: str, *, prune_relations: bool = True) -> tuple[str, ...]:
        """Remove a node and its subtree.

        With ``prune_relations``, removed ids are also dropped from every
        remaining node's ``related_definitions``.

        Returns:
            The removed ids, in pre-order.
        """
        node = self.get(definition_id)
        removed = collect_ids(node)
        tree = remove(self._tree, definition_id)

        if prune_relations:
            gone = set(removed)
            referencing = {
                n.id for n in iter_preorder(tree) if gone.intersection(n.related_definitions)
            }
            tree = transform_many(
                tree,
                referencing,
                lambda n: replace(
                    n,
                    related_definitions=tuple(r for r in n.related_definitions if r not in gone),
                ),
            )
            if referencing:
                logger.debug("Pruned relations to {} from {}", definition_id, sorted(referencing))

        self._tree = tree
        logger.debug("Deleted {} ({} definitions)", definition_id, len(removed))
        return removed

    def add_revision(
        self,
        definition_id: str,
        *,
        ticket_id: str,
        developer: str,
        description: str,
        date: str,
    ) -> Revision:
        """Record the node's current content as a new revision."""
        if not ticket_id.strip():
            msg = "Revision ticket id cannot be empty"
            raise ValidationFailedError(msg)
        node = self.get(definition_id)
        revision = Revision(
            ticket_id=ticket_id,
            date=date,
            developer=developer,
            description=description,
            snapshot=node.snapshot(),
        )
        self._tree = transform(
            self._tree,
            definition_id,
            lambda n: replace(n, revisions=(*n.revisions, revision)),
        )
        return revision
