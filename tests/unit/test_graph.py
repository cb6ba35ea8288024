"""Unit tests for graph construction and traversal."""

from __future__ import annotations
import pytest

from blueprint.core import Node
from blueprint.errors import ConcurrentStructuralMutation, DuplicateIdentifier, GraphFrozen


@pytest.mark.unit
class TestAttach:
    """Test attaching nodes to the graph."""

    def test_child_attaches_to_scope_in_declaration_order(self, scenario_tree):
        """
        GIVEN a stack with three declared children
        WHEN the children are read back
        THEN they should be in declaration order with parent set
        """
        stack = scenario_tree.node("R")

        assert [child.id for child in stack.children] == ["group", "svc", "other"]
        assert all(child.parent is stack for child in stack.children)
        assert scenario_tree.node("db").parent is scenario_tree.node("svc")

    def test_duplicate_identifier_fails_without_partial_attach(self, scenario_tree):
        """
        GIVEN a stack that already has a child 'svc'
        WHEN a second child with id 'svc' is declared
        THEN DuplicateIdentifier should be raised and the graph unchanged
        """
        app = scenario_tree.build()
        stack = scenario_tree.node("R")
        before = [node.path for node in app.graph.traverse()]

        with pytest.raises(DuplicateIdentifier) as exc_info:
            Node(stack, "svc")

        assert exc_info.value.node_id == "svc"
        assert [node.path for node in app.graph.traverse()] == before
        assert len(stack.children) == 3

    def test_same_id_under_different_parents_is_allowed(self, tree_builder):
        tree_builder.with_stack().with_container("a").with_container("b")
        Node(tree_builder.node("a"), "shared")
        Node(tree_builder.node("b"), "shared")

        assert tree_builder.node("a").find_child("shared") is not None
        assert tree_builder.node("b").find_child("shared") is not None

    @pytest.mark.parametrize("bad_id", ["", "a/b"])
    def test_invalid_identifier_is_rejected(self, tree_builder, bad_id):
        app = tree_builder.build()

        with pytest.raises(ValueError):
            Node(app, bad_id)

        assert app.children == ()

    def test_frozen_graph_rejects_new_nodes(self, scenario_tree):
        """
        GIVEN a frozen graph
        WHEN a node is declared
        THEN GraphFrozen (a ConcurrentStructuralMutation) should be raised
        """
        app = scenario_tree.build()
        app.graph.freeze()

        with pytest.raises(GraphFrozen):
            Node(scenario_tree.node("svc"), "late")
        with pytest.raises(ConcurrentStructuralMutation):
            Node(scenario_tree.node("svc"), "late")

        assert scenario_tree.node("svc").find_child("late") is None


@pytest.mark.unit
class TestTraverse:
    """Test pre-order traversal."""

    def test_traverse_yields_pre_order(self, scenario_tree):
        app = scenario_tree.build()

        paths = [node.path for node in app.graph.traverse()]

        assert paths == ["", "R", "R/group", "R/svc", "R/svc/db", "R/other"]

    def test_traverse_is_repeatable_on_frozen_graph(self, scenario_tree):
        app = scenario_tree.build()
        app.graph.freeze()

        first = list(app.graph.traverse())
        second = list(app.graph.traverse())

        assert first == second

    def test_traverse_is_lazy(self, scenario_tree):
        walk = scenario_tree.build().graph.traverse()

        assert next(walk).path == ""
        assert next(walk).path == "R"

    def test_traverse_subtree(self, scenario_tree):
        app = scenario_tree.build()

        paths = [node.path for node in app.graph.traverse(scenario_tree.node("svc"))]

        assert paths == ["R/svc", "R/svc/db"]

    def test_structural_change_during_traversal_is_detected(self, scenario_tree):
        """
        GIVEN a traversal in progress
        WHEN a node is added to the tree
        THEN the traversal should raise ConcurrentStructuralMutation
        """
        app = scenario_tree.build()
        walk = app.graph.traverse()
        next(walk)

        Node(scenario_tree.node("group"), "added")

        with pytest.raises(ConcurrentStructuralMutation):
            next(walk)

    def test_new_traversal_sees_current_tree(self, scenario_tree):
        app = scenario_tree.build()
        before = len(list(app.graph.traverse()))

        Node(scenario_tree.node("group"), "added")

        assert len(list(app.graph.traverse())) == before + 1


@pytest.mark.unit
class TestLookup:
    """Test path lookup helpers."""

    def test_find_by_path(self, scenario_tree):
        app = scenario_tree.build()

        assert app.graph.find("R/svc/db") is scenario_tree.node("db")
        assert app.graph.find("") is app

    def test_find_unknown_path_raises_key_error(self, scenario_tree):
        with pytest.raises(KeyError):
            scenario_tree.build().graph.find("R/missing")

    def test_scopes_run_from_root_to_node(self, scenario_tree):
        db = scenario_tree.node("db")

        assert [scope.id for scope in db.scopes] == ["", "R", "svc", "db"]
        assert db.path == "R/svc/db"
        assert db.root is scenario_tree.build()
