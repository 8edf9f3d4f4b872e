"""Mapping between stored relation rows and (parent, child) pairs.

A row stores ``from_label_id``/``to_label_id`` plus a ``relation_type`` saying
which end is the parent. Both encodings are accepted on read.
"""
from typing import Tuple

from annotator.core.exceptions import InvalidRelationType
from annotator.db.models.label_relation import RelationType


def coerce_relation_type(relation_type) -> RelationType:
    try:
        return RelationType(relation_type)
    except ValueError:
        raise InvalidRelationType(
            "Invalid relation_type. Must be 'child_to_parent' or 'parent_to_child'"
        ) from None


def normalize_relation(from_label_id: int, to_label_id: int, relation_type) -> Tuple[int, int]:
    """Return ``(parent_id, child_id)`` for a stored row."""
    relation_type = coerce_relation_type(relation_type)
    if relation_type is RelationType.CHILD_TO_PARENT:
        return to_label_id, from_label_id
    return from_label_id, to_label_id


def encode_relation(parent_id: int, child_id: int, relation_type=RelationType.PARENT_TO_CHILD) -> dict:
    """Column values for storing ``parent_id -> child_id`` in the given encoding."""
    relation_type = coerce_relation_type(relation_type)
    if relation_type is RelationType.CHILD_TO_PARENT:
        from_label_id, to_label_id = child_id, parent_id
    else:
        from_label_id, to_label_id = parent_id, child_id
    return {
        "from_label_id": from_label_id,
        "to_label_id": to_label_id,
        "relation_type": relation_type.value,
    }
