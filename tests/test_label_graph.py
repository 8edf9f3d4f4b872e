from types import SimpleNamespace

import pytest

from annotator.api.labels.hierarchy import LabelGraph
from annotator.core.exceptions import HierarchyIntegrityError, LabelNotFound


def _labels(*ids):
    return {i: SimpleNamespace(id=i, name=f"L{i}", color=None) for i in ids}


def _count(node):
    return 1 + sum(_count(child) for child in node["children"])


def _ids(node):
    yield node["id"]
    for child in node["children"]:
        yield from _ids(child)


@pytest.fixture
def graph():
    # 1 -> 2 -> 4 -> 5, 1 -> 3, 6 alone; mixed encodings
    relations = [
        (1, 2, "parent_to_child"),
        (3, 1, "child_to_parent"),
        (2, 4, "parent_to_child"),
        (5, 4, "child_to_parent"),
    ]
    return LabelGraph(_labels(1, 2, 3, 4, 5, 6), relations)


def test_tree_visits_each_node_once(graph) -> None:
    tree = graph.tree(1)

    ids = list(_ids(tree))
    assert sorted(ids) == [1, 2, 3, 4, 5]
    assert _count(tree) == 5


def test_children_keep_relation_order(graph) -> None:
    tree = graph.tree(1)
    assert [child["id"] for child in tree["children"]] == [2, 3]


def test_forest_covers_every_label(graph) -> None:
    forest = graph.forest()

    assert [tree["id"] for tree in forest] == [1, 6]
    assert sum(_count(tree) for tree in forest) == len(graph.labels)


def test_path_to_root_of_root_is_itself(graph) -> None:
    assert graph.path_to_root(1) == [{"id": 1, "name": "L1"}]


def test_path_to_root_of_depth_three_label(graph) -> None:
    path = graph.path_to_root(5)
    assert [item["id"] for item in path] == [1, 2, 4, 5]


def test_tree_of_unknown_label(graph) -> None:
    with pytest.raises(LabelNotFound):
        graph.tree(99)


def test_stored_cycle_is_reported_not_followed() -> None:
    relations = [(1, 2, "parent_to_child"), (2, 3, "parent_to_child"), (3, 2, "parent_to_child")]
    graph = LabelGraph(_labels(1, 2, 3), relations)

    with pytest.raises(HierarchyIntegrityError):
        graph.tree(1)
    with pytest.raises(HierarchyIntegrityError):
        graph.path_to_root(3)


def test_children_outside_owner_are_skipped() -> None:
    graph = LabelGraph(_labels(1), [(1, 42, "parent_to_child")])
    assert graph.tree(1)["children"] == []
