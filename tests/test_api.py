"""Tests for the functional high-level API."""

import pytest

from dazzlenestedset import (
    InMemoryStoreAdapter,
    NestedSet,
    NestedSetConfig,
    Record,
    check_tree,
    get_tree_stats,
    import_adjacency_list,
    move_node,
    render_tree,
    repair_tree,
)
from dazzlenestedset.testing import boundaries_of, build_tree


class TestMoveNode:

    def test_default_position_is_child(self, standard_tree):
        adapter = standard_tree.adapter
        assert move_node(adapter, adapter.get("c3"), "c1") is True
        assert adapter.get("c3")["parent_id"] == "c1"

    def test_string_position(self, standard_tree):
        adapter = standard_tree.adapter
        move_node(adapter, adapter.get("c21"), None, "root")
        assert adapter.get("c21")["parent_id"] is None


class TestCheckAndRepair:

    def test_healthy_tree(self, standard_tree):
        assert check_tree(standard_tree.adapter) == []
        assert repair_tree(standard_tree.adapter) is False

    def test_repair(self, standard_tree, standard_boundaries):
        adapter = standard_tree.adapter
        adapter.update_field("c2", "rgt", 3)
        assert check_tree(adapter)

        assert repair_tree(adapter) is True

        assert check_tree(adapter) == []
        assert boundaries_of(standard_tree) == standard_boundaries


class TestImportAdjacencyList:

    def test_import(self):
        adapter = InMemoryStoreAdapter()
        count = import_adjacency_list(adapter, [
            Record("electronics"),
            Record("laptops", parent_id="electronics"),
            Record("phones", parent_id="electronics"),
            Record("books"),
            Record("fiction", parent_id="books"),
        ])

        assert count == 5
        assert check_tree(adapter) == []
        # Unnumbered roots are ordered by id, children keep insertion order
        assert render_tree(adapter).splitlines() == [
            "* books (None, 1, 4)",
            "** fiction (books, 2, 3)",
            "* electronics (None, 5, 10)",
            "** laptops (electronics, 6, 7)",
            "** phones (electronics, 8, 9)",
        ]

    def test_import_scoped(self, make_adapter):
        config = NestedSetConfig.scoped("site")
        adapter = make_adapter(config)
        import_adjacency_list(adapter, [
            Record("home", site="a"),
            Record("about", site="a", parent_id="home"),
            Record("home-b", site="b"),
        ], config)

        assert check_tree(adapter, config) == []
        assert render_tree(adapter, config, ("b",)) == "* home-b (None, 1, 2)"


class TestRenderTree:

    def test_empty(self, tree):
        assert render_tree(tree.adapter) == ""

    def test_standard(self, standard_tree):
        assert render_tree(standard_tree.adapter).splitlines()[3] == "*** c21 (c2, 5, 6)"


class TestTreeStats:

    def test_standard_tree(self, standard_tree):
        assert get_tree_stats(standard_tree.adapter) == {
            'total_nodes': 5,
            'root_count': 1,
            'leaf_count': 3,
            'max_level': 2,
            'valid': True,
        }

    def test_forest(self, standard_tree):
        standard_tree.create(Record("other"))
        stats = get_tree_stats(standard_tree.adapter)
        assert stats['root_count'] == 2
        assert stats['total_nodes'] == 6
        assert stats['leaf_count'] == 4

    def test_empty(self, tree):
        stats = get_tree_stats(tree.adapter)
        assert stats['total_nodes'] == 0
        assert stats['valid'] is True


class TestScopedDefaults:
    """Without a scope key, reads cover every scope of a scoped tree."""

    @pytest.fixture
    def scoped_tree(self, make_adapter):
        config = NestedSetConfig.scoped("org")
        tree = NestedSet(make_adapter(config), config)
        build_tree(tree, [("a", None), ("a1", "a")], org="x")
        build_tree(tree, [("b", None)], org="y")
        return tree

    def test_roots(self, scoped_tree):
        assert sorted(root.identifier() for root in scoped_tree.roots()) == ["a", "b"]
        assert scoped_tree.root().identifier() in ("a", "b")

    def test_render_tree(self, scoped_tree):
        lines = render_tree(scoped_tree.adapter, scoped_tree.config).splitlines()
        assert sorted(lines) == ["* a (None, 1, 4)", "* b (None, 1, 2)", "** a1 (a, 2, 3)"]

    def test_get_tree_stats(self, scoped_tree):
        assert get_tree_stats(scoped_tree.adapter, scoped_tree.config) == {
            'total_nodes': 3,
            'root_count': 2,
            'leaf_count': 2,
            'max_level': 1,
            'valid': True,
        }

    def test_allocate_clears_every_scope(self, scoped_tree):
        assert scoped_tree.allocator.allocate() == (5, 6)
        assert scoped_tree.allocator.allocate(("y",)) == (3, 4)
