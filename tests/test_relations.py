import pytest

from annotator.api.labels.relations import encode_relation, normalize_relation
from annotator.core.exceptions import InvalidRelationType, LabelValidationError
from annotator.db.models.label_relation import RelationType


def test_child_to_parent_row_points_from_child_to_parent() -> None:
    assert normalize_relation(7, 3, "child_to_parent") == (3, 7)


def test_parent_to_child_row_points_from_parent_to_child() -> None:
    assert normalize_relation(3, 7, RelationType.PARENT_TO_CHILD) == (3, 7)


@pytest.mark.parametrize("relation_type", ["sibling", "", None, "PARENT_TO_CHILD"])
def test_unknown_relation_type_is_rejected(relation_type) -> None:
    with pytest.raises(InvalidRelationType) as excinfo:
        normalize_relation(1, 2, relation_type)

    assert "Invalid relation_type" in str(excinfo.value)
    assert isinstance(excinfo.value, LabelValidationError)
    assert excinfo.value.status_code == 400


def test_child_to_parent_encoding_stores_child_first() -> None:
    row = encode_relation(parent_id=3, child_id=7, relation_type="child_to_parent")

    assert row == {"from_label_id": 7, "to_label_id": 3, "relation_type": "child_to_parent"}
    assert normalize_relation(row["from_label_id"], row["to_label_id"], row["relation_type"]) == (3, 7)


def test_encoding_defaults_to_parent_to_child() -> None:
    assert encode_relation(3, 7)["relation_type"] == "parent_to_child"
