"""Tests specific to SQLiteStoreAdapter."""

import sqlite3

import pytest

from dazzlenestedset import NestedSet, NestedSetConfig, Record, SQLiteStoreAdapter
from dazzlenestedset._common.criteria import eq
from dazzlenestedset.testing import assert_valid_tree, boundaries_of, build_tree


class Category(Record):

    @property
    def name(self):
        return self.get_field("name")


@pytest.fixture
def config():
    return NestedSetConfig.scoped("org")


@pytest.fixture
def adapter(config):
    adapter = SQLiteStoreAdapter(config)
    yield adapter
    adapter.close()


class TestPersistence:

    def test_survives_reopen(self, tmp_path, config):
        path = str(tmp_path / "tree.db")
        first = SQLiteStoreAdapter(config, path, table="categories")
        tree = NestedSet(first, config)
        build_tree(tree, [("root", None), ("child", "root")], org=1, name="Books")
        first.close()

        second = SQLiteStoreAdapter(config, path, table="categories")
        try:
            reopened = NestedSet(second, config)
            assert boundaries_of(reopened, (1,)) == {"root": (1, 4), "child": (2, 3)}
            assert second.get("child")["name"] == "Books"
            assert_valid_tree(reopened)
        finally:
            second.close()

    def test_shared_connection(self, config):
        connection = sqlite3.connect(":memory:")
        try:
            a = SQLiteStoreAdapter(config, connection=connection, table="a")
            b = SQLiteStoreAdapter(config, connection=connection, table="b")
            a.insert(Record("x", org=1, lft=1, rgt=2))
            assert a.exists("x")
            assert not b.exists("x")
        finally:
            connection.close()


class TestRowMapping:

    def test_extra_fields_round_trip(self, adapter):
        adapter.insert(Record("a", org=1, lft=1, rgt=2, tags=["x", "y"], meta={"depth": 0}))
        stored = adapter.get("a")
        assert stored["tags"] == ["x", "y"]
        assert stored["meta"] == {"depth": 0}

    def test_record_class(self, config):
        adapter = SQLiteStoreAdapter(config, record_class=Category)
        try:
            adapter.insert(Category("a", org=1, name="Books"))
            stored = adapter.get("a")
            assert isinstance(stored, Category)
            assert stored.name == "Books"
        finally:
            adapter.close()

    def test_update_json_field(self, adapter):
        adapter.insert(Record("a", org=1, name="old", size=3))
        adapter.update_field("a", "name", "new")
        stored = adapter.get("a")
        assert (stored["name"], stored["size"]) == ("new", 3)

    def test_generated_identifier(self, adapter):
        node = adapter.insert(Record(org=1))
        assert isinstance(node.identifier(), str)
        assert adapter.exists(node.identifier())

    def test_queries_on_json_fields_rejected(self, adapter):
        with pytest.raises(ValueError):
            adapter.find([eq("name", "Books")])


class TestTransactions:

    def test_supports_transactions(self, adapter):
        assert adapter.supports_transactions() is True

    def test_commit(self, adapter):
        with adapter.transaction():
            adapter.insert(Record("a", org=1))
            adapter.insert(Record("b", org=1))
        assert adapter.count() == 2

    def test_rollback(self, adapter):
        adapter.insert(Record("keep", org=1))
        with pytest.raises(RuntimeError):
            with adapter.transaction():
                adapter.insert(Record("a", org=1))
                adapter.update_field("keep", "lft", 99)
                raise RuntimeError("boom")
        assert not adapter.exists("a")
        assert adapter.get("keep")["lft"] is None

    def test_nested_transactions_join(self, adapter):
        with pytest.raises(RuntimeError):
            with adapter.transaction():
                with adapter.transaction():
                    adapter.insert(Record("inner", org=1))
                adapter.insert(Record("outer", org=1))
                raise RuntimeError("boom")
        assert adapter.count() == 0

    def test_atomic_move(self, config, adapter):
        tree = NestedSet(adapter, config)
        build_tree(tree, [("root", None), ("a", "root"), ("b", "root")], org=1)
        with adapter.transaction():
            tree.move_to_left_of(adapter.get("b"), "a")
        assert boundaries_of(tree, (1,)) == {"root": (1, 6), "b": (2, 3), "a": (4, 5)}


class TestIdentifiers:

    def test_invalid_table_name(self, config):
        with pytest.raises(ValueError):
            SQLiteStoreAdapter(config, table="nodes; DROP TABLE x")

    def test_invalid_column_name(self):
        with pytest.raises(ValueError):
            SQLiteStoreAdapter(NestedSetConfig(left_column="l-t"))
