import enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, case
from annotator.db.session import Base


class RelationType(str, enum.Enum):
    """How the stored from/to columns map onto parent/child."""

    CHILD_TO_PARENT = "child_to_parent"
    PARENT_TO_CHILD = "parent_to_child"


class LabelRelation(Base):
    __tablename__ = "label_relations"
    __table_args__ = (
        CheckConstraint(
            "relation_type IN ('child_to_parent', 'parent_to_child')",
            name="ck_label_relations_relation_type",
        ),
        CheckConstraint("from_label_id <> to_label_id", name="ck_label_relations_not_self"),
    )

    id = Column(Integer, primary_key=True, index=True)
    from_label_id = Column(Integer, ForeignKey("labels.id", ondelete="CASCADE"), nullable=False, index=True)
    to_label_id = Column(Integer, ForeignKey("labels.id", ondelete="CASCADE"), nullable=False, index=True)
    relation_type = Column(String(20), nullable=False, default=RelationType.PARENT_TO_CHILD.value)


def parent_end():
    """SQL expression for the parent id of a stored relation row."""
    return case(
        (LabelRelation.relation_type == RelationType.CHILD_TO_PARENT.value, LabelRelation.to_label_id),
        else_=LabelRelation.from_label_id,
    )


def child_end():
    """SQL expression for the child id of a stored relation row."""
    return case(
        (LabelRelation.relation_type == RelationType.CHILD_TO_PARENT.value, LabelRelation.from_label_id),
        else_=LabelRelation.to_label_id,
    )


# A label may be the child end of at most one row, whichever encoding was used.
Index("uq_label_relations_child_end", child_end(), unique=True)
