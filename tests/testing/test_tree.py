"""Tests for TestTree."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from ceptplane.core.errors import ErrorCode, TreeError
from ceptplane.testing.models import NodeKind, TestNode
from ceptplane.testing.tree import TestTree

if TYPE_CHECKING:
    from tests.conftest import RecordingSink


def _node(node_id: str, kind: NodeKind = NodeKind.PROJECT) -> TestNode:
    return TestNode(id=node_id, label=node_id, kind=kind, workspace_root=Path("/ws"))


def _project(name: str = "p") -> TestNode:
    project = _node(name)
    suite = project.add_child(_node(f"{name}/unit", NodeKind.SUITE))
    file_node = suite.add_child(_node(f"{name}/unit/ATest.php", NodeKind.FILE))
    file_node.add_child(_node(f"{name}/unit/ATest.php::testA", NodeKind.METHOD))
    return project


class TestTestTree:
    """Structural changes and the id index."""

    def test_given_project_when_added_then_whole_subtree_indexed(
        self, sink: RecordingSink
    ) -> None:
        # Given
        tree = TestTree(sink)

        # When
        tree.add_root(_project())

        # Then
        assert len(tree) == 4
        assert "p/unit/ATest.php::testA" in tree
        assert tree.require("p/unit").kind is NodeKind.SUITE
        assert sink.ids("added") == ["p"]

    def test_given_non_project_when_added_as_root_then_rejected(self) -> None:
        # Given
        tree = TestTree()

        # When / Then
        with pytest.raises(TreeError) as exc_info:
            tree.add_root(_node("s", NodeKind.SUITE))
        assert exc_info.value.code == ErrorCode.TREE_INVALID_ROOT

    def test_given_duplicate_id_when_added_then_rejected_without_partial_index(self) -> None:
        # Given
        tree = TestTree()
        tree.add_root(_project())
        method = tree.require("p/unit/ATest.php::testA")

        # When / Then
        with pytest.raises(TreeError) as exc_info:
            tree.add_child(method.parent, _node("p/unit/ATest.php::testA", NodeKind.METHOD))
        assert exc_info.value.code == ErrorCode.TREE_DUPLICATE_ID
        assert len(tree) == 4

    def test_given_unknown_parent_when_child_added_then_rejected(self) -> None:
        tree = TestTree()

        with pytest.raises(TreeError):
            tree.add_child(_node("ghost"), _node("ghost/x", NodeKind.SUITE))

    def test_given_unknown_id_when_required_then_tree_error(self) -> None:
        tree = TestTree()

        assert tree.get("nope") is None
        with pytest.raises(TreeError) as exc_info:
            tree.require("nope")
        assert exc_info.value.code == ErrorCode.TREE_UNKNOWN_ID

    def test_given_child_when_added_then_parent_linked_and_announced(
        self, sink: RecordingSink
    ) -> None:
        # Given
        tree = TestTree(sink)
        tree.add_root(_project())
        method = tree.require("p/unit/ATest.php::testA")

        # When
        dataset = tree.add_child(method, _node("p/unit/ATest.php::testA::[0]", NodeKind.DATASET))

        # Then
        assert dataset.parent is method
        assert tree.get(dataset.id) is dataset
        assert sink.ids("added")[-1] == dataset.id

    def test_given_subtree_when_removed_then_all_ids_forgotten(self, sink: RecordingSink) -> None:
        # Given
        tree = TestTree(sink)
        tree.add_root(_project())

        # When
        tree.remove(tree.require("p/unit"))

        # Then
        assert len(tree) == 1
        assert "p/unit/ATest.php" not in tree
        assert tree.require("p").children == {}
        assert sink.ids("removed") == ["p/unit"]

    def test_given_existing_forest_when_replaced_then_old_removed_before_new_added(
        self, sink: RecordingSink
    ) -> None:
        """Same ids may reappear because removal happens first."""
        # Given
        tree = TestTree(sink)
        tree.add_root(_project("p"))
        sink.events.clear()

        # When
        tree.replace_roots([_project("p"), _project("q")])

        # Then
        assert sink.events == [("removed", "p"), ("added", "p"), ("added", "q")]
        assert [r.id for r in tree.roots] == ["p", "q"]
        assert len(tree) == 8

    def test_given_forest_when_iterated_then_pre_order(self) -> None:
        tree = TestTree()
        tree.add_root(_project())

        assert [n.id for n in tree.iter_nodes()] == [
            "p",
            "p/unit",
            "p/unit/ATest.php",
            "p/unit/ATest.php::testA",
        ]
