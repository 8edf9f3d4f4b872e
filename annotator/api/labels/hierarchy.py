"""Label hierarchy: single-parent trees stored in ``label_relations``.

Every label has at most one direct parent and no label is its own ancestor.
Mutations run in a single transaction that starts by locking the owner's user
row, so two requests editing the same owner's hierarchy are serialized. The
unique child-end index on ``label_relations`` enforces the single-parent rule
in the database as well.

Reads that need more than one level (trees, forests, breadcrumbs) load the
owner's labels and relations once into a ``LabelGraph`` and walk it in memory.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from annotator.core.exceptions import (
    HierarchyError,
    HierarchyIntegrityError,
    HierarchyStoreError,
    LabelNotFound,
    LabelValidationError,
    RelationNotFound,
)
from annotator.db.models.label import Label
from annotator.db.models.label_relation import LabelRelation, RelationType, child_end, parent_end
from annotator.db.models.user import User
from .relations import coerce_relation_type, encode_relation, normalize_relation
from .schemas import RelationCheck

logger = logging.getLogger(__name__)


def _owned_label(db: Session, label_id: int, owner_id: int) -> Optional[Label]:
    return db.query(Label).filter(Label.id == label_id, Label.user_id == owner_id).first()


def _owned_label_ids(owner_id: int):
    return select(Label.id).where(Label.user_id == owner_id)


def owner_lock_statement(owner_id: int):
    return select(User.id).where(User.id == owner_id).with_for_update()


def lock_owner_hierarchy(db: Session, owner_id: int) -> None:
    """Hold the owner's row lock until the current transaction ends.

    SQLite ignores ``FOR UPDATE``; it serializes writers on its own.
    """
    db.execute(owner_lock_statement(owner_id)).first()


# ---------------------------
# Single-level lookups
# ---------------------------

def get_direct_parent(db: Session, label_id: int) -> Optional[int]:
    try:
        row = db.query(LabelRelation).filter(child_end() == label_id).first()
    except SQLAlchemyError as e:
        raise HierarchyStoreError(f"Error fetching parent: {e}") from e

    if row is None:
        return None
    parent_id, _ = normalize_relation(row.from_label_id, row.to_label_id, row.relation_type)
    return parent_id


def get_direct_children(db: Session, parent_id: int) -> List[int]:
    try:
        rows = (
            db.query(LabelRelation)
            .filter(parent_end() == parent_id)
            .order_by(LabelRelation.id)
            .all()
        )
    except SQLAlchemyError as e:
        raise HierarchyStoreError(f"Error fetching children: {e}") from e

    return [
        normalize_relation(row.from_label_id, row.to_label_id, row.relation_type)[1]
        for row in rows
    ]


# ---------------------------
# Validation
# ---------------------------

def _child_rejection(db: Session, parent_id: int, child_id: int, owner_id: int) -> Optional[HierarchyError]:
    """The error that adding ``parent_id -> child_id`` would hit, or None."""
    if parent_id == child_id:
        return LabelValidationError("A label cannot be its own parent")

    try:
        parent = _owned_label(db, parent_id, owner_id)
        child = _owned_label(db, child_id, owner_id)
    except SQLAlchemyError as e:
        return HierarchyStoreError(f"Error validating labels: {e}")

    if parent is None:
        return LabelNotFound(f"Parent label {parent_id} not found or does not belong to user {owner_id}")
    if child is None:
        return LabelNotFound(f"Child label {child_id} not found or does not belong to user {owner_id}")

    existing_parent = get_direct_parent(db, child_id)
    if existing_parent is not None:
        return LabelValidationError(
            f"Label {child_id} already has parent {existing_parent}. Single parent only."
        )
    return None


def can_add_child(db: Session, parent_id: int, child_id: int, owner_id: int) -> RelationCheck:
    """Pre-flight check for a new relation. Performs no writes."""
    error = _child_rejection(db, parent_id, child_id, owner_id)
    if error is not None:
        return RelationCheck(valid=False, error=error.message)
    return RelationCheck(valid=True)


def is_ancestor(db: Session, ancestor_id: int, label_id: int) -> bool:
    """True if ``ancestor_id`` is ``label_id`` or one of its ancestors.

    Store faults abort the walk rather than reporting "not an ancestor", since a
    false negative here would let a cycle-closing relation through.
    """
    if ancestor_id == label_id:
        return True

    seen = {label_id}
    current = label_id
    while True:
        try:
            parent_id = get_direct_parent(db, current)
        except HierarchyStoreError:
            logger.exception("Error checking whether %s is an ancestor of %s", ancestor_id, label_id)
            raise

        if parent_id is None:
            return False
        if parent_id == ancestor_id:
            return True
        if parent_id in seen:
            raise HierarchyIntegrityError(f"Cycle detected in label hierarchy at label {parent_id}")
        seen.add(parent_id)
        current = parent_id


# ---------------------------
# Mutations
# ---------------------------

def add_parent_child(
    db: Session,
    parent_id: int,
    child_id: int,
    owner_id: int,
    relation_type=RelationType.PARENT_TO_CHILD,
) -> dict:
    relation_type = coerce_relation_type(relation_type)

    try:
        lock_owner_hierarchy(db, owner_id)

        error = _child_rejection(db, parent_id, child_id, owner_id)
        if error is not None:
            raise error

        # Re-read under the lock; ids may have been deleted or reassigned since validation.
        if _owned_label(db, parent_id, owner_id) is None or _owned_label(db, child_id, owner_id) is None:
            raise LabelNotFound("Unauthorized label relation")

        if is_ancestor(db, child_id, parent_id):
            raise LabelValidationError(
                f"Cannot add relationship: Would create circular reference "
                f"({child_id} is ancestor of {parent_id})"
            )

        relation = LabelRelation(**encode_relation(parent_id, child_id, relation_type))
        db.add(relation)
        db.flush()
        result = {"id": relation.id}
        result["parent_id"], result["child_id"] = normalize_relation(
            relation.from_label_id, relation.to_label_id, relation.relation_type
        )
        db.commit()
    except HierarchyStoreError as e:
        db.rollback()
        raise HierarchyStoreError(f"Error adding parent-child relationship: {e.message}") from e
    except HierarchyError as e:
        db.rollback()
        logger.warning("Rejected relation %s -> %s for user %s: %s", parent_id, child_id, owner_id, e.message)
        raise
    except IntegrityError as e:
        # Another request gave the child a parent between our check and insert.
        db.rollback()
        existing_parent = get_direct_parent(db, child_id)
        if existing_parent is not None:
            raise LabelValidationError(
                f"Label {child_id} already has parent {existing_parent}. Single parent only."
            ) from e
        raise HierarchyStoreError(f"Error adding parent-child relationship: {e}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Store fault adding relation %s -> %s", parent_id, child_id)
        raise HierarchyStoreError(f"Error adding parent-child relationship: {e}") from e

    logger.info("Added relation %s: %s -> %s (user %s)", result["id"], parent_id, child_id, owner_id)
    return result


def remove_parent_child(db: Session, parent_id: int, child_id: int, owner_id: int) -> dict:
    owned = _owned_label_ids(owner_id)
    try:
        lock_owner_hierarchy(db, owner_id)
        deleted = (
            db.query(LabelRelation)
            .filter(
                or_(
                    and_(
                        LabelRelation.relation_type == RelationType.PARENT_TO_CHILD.value,
                        LabelRelation.from_label_id == parent_id,
                        LabelRelation.to_label_id == child_id,
                    ),
                    and_(
                        LabelRelation.relation_type == RelationType.CHILD_TO_PARENT.value,
                        LabelRelation.from_label_id == child_id,
                        LabelRelation.to_label_id == parent_id,
                    ),
                ),
                LabelRelation.from_label_id.in_(owned),
                LabelRelation.to_label_id.in_(owned),
            )
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            raise RelationNotFound(f"No relationship found between parent {parent_id} and child {child_id}")
        db.commit()
    except HierarchyError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Store fault removing relation %s -> %s", parent_id, child_id)
        raise HierarchyStoreError(f"Error removing relationship: {e}") from e

    logger.info("Removed relation %s -> %s (user %s)", parent_id, child_id, owner_id)
    return {"success": True, "message": "Relationship removed"}


def detach_label(db: Session, label_id: int) -> List[int]:
    """Drop every relation touching ``label_id`` ahead of deleting it.

    Its children are re-linked to its parent, or become roots when it had
    none. Returns the former children. The caller owns the transaction.
    """
    parent_id = get_direct_parent(db, label_id)
    children = get_direct_children(db, label_id)

    db.query(LabelRelation).filter(
        or_(LabelRelation.from_label_id == label_id, LabelRelation.to_label_id == label_id)
    ).delete(synchronize_session=False)

    if parent_id is not None:
        for child_id in children:
            db.add(LabelRelation(**encode_relation(parent_id, child_id)))
        db.flush()
    return children


# ---------------------------
# Trees
# ---------------------------

class LabelGraph:
    """One owner's labels and relations, indexed by id."""

    def __init__(self, labels: Dict[int, Label], relations: Iterable):
        self.labels = labels
        self.parents: Dict[int, int] = {}
        self.children: Dict[int, List[int]] = defaultdict(list)
        for from_label_id, to_label_id, relation_type in relations:
            parent_id, child_id = normalize_relation(from_label_id, to_label_id, relation_type)
            self.parents[child_id] = parent_id
            self.children[parent_id].append(child_id)

    @classmethod
    def load(cls, db: Session, owner_id: int) -> "LabelGraph":
        try:
            labels = db.query(Label).filter(Label.user_id == owner_id).order_by(Label.id).all()
            relations = (
                db.query(LabelRelation.from_label_id, LabelRelation.to_label_id, LabelRelation.relation_type)
                .filter(LabelRelation.from_label_id.in_(_owned_label_ids(owner_id)))
                .order_by(LabelRelation.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise HierarchyStoreError(f"Error loading label hierarchy: {e}") from e
        return cls({label.id: label for label in labels}, relations)

    def _node(self, label_id: int) -> dict:
        label = self.labels[label_id]
        return {"id": label.id, "name": label.name, "color": label.color, "children": []}

    def tree(self, label_id: int) -> dict:
        if label_id not in self.labels:
            raise LabelNotFound(f"Label {label_id} not found")

        root = self._node(label_id)
        seen = {label_id}
        stack = [root]
        while stack:
            node = stack.pop()
            for child_id in self.children.get(node["id"], ()):
                if child_id not in self.labels:
                    continue
                if child_id in seen:
                    raise HierarchyIntegrityError(f"Cycle detected in label hierarchy at label {child_id}")
                seen.add(child_id)
                child = self._node(child_id)
                node["children"].append(child)
                stack.append(child)
        return root

    def roots(self) -> List[int]:
        return [label_id for label_id in self.labels if label_id not in self.parents]

    def forest(self) -> List[dict]:
        return [self.tree(label_id) for label_id in self.roots()]

    def path_to_root(self, label_id: int) -> List[dict]:
        path = []
        seen = set()
        current = label_id
        while current is not None and current in self.labels:
            if current in seen:
                raise HierarchyIntegrityError(f"Cycle detected in label hierarchy at label {current}")
            seen.add(current)
            label = self.labels[current]
            path.insert(0, {"id": label.id, "name": label.name})
            current = self.parents.get(current)
        return path


def build_label_tree(db: Session, label_id: int, owner_id: int) -> dict:
    return LabelGraph.load(db, owner_id).tree(label_id)


def get_all_root_labels(db: Session, owner_id: int) -> List[dict]:
    return LabelGraph.load(db, owner_id).forest()


def get_path_to_root(db: Session, label_id: int, owner_id: int) -> List[dict]:
    """Breadcrumb from the root down to ``label_id``."""
    graph = LabelGraph.load(db, owner_id)
    if label_id not in graph.labels:
        raise LabelNotFound(f"Label {label_id} not found")
    return graph.path_to_root(label_id)
