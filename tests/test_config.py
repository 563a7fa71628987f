"""Tests for NestedSetConfig and the criteria vocabulary."""

from dataclasses import FrozenInstanceError

import pytest

from dazzlenestedset import DependentPolicy, NestedSetConfig, Record
from dazzlenestedset._common.criteria import Criterion, Operator, eq, gt, gte, lt, lte, matches_all


class TestNestedSetConfig:

    def test_defaults(self):
        config = NestedSetConfig()
        assert config.parent_column == "parent_id"
        assert config.left_column == "lft"
        assert config.right_column == "rgt"
        assert config.scope == ()
        assert config.dependent is DependentPolicy.DELETE_ALL
        assert config.validate() == []

    def test_scope_from_string(self):
        assert NestedSetConfig(scope="org").scope == ("org",)

    def test_scope_from_list(self):
        assert NestedSetConfig(scope=["org", "kind"]).scope == ("org", "kind")

    def test_scoped_constructor(self):
        config = NestedSetConfig.scoped("org", "kind", dependent="destroy")
        assert config.scope == ("org", "kind")
        assert config.dependent is DependentPolicy.DESTROY

    def test_from_dict_ignores_unknown_keys(self):
        config = NestedSetConfig.from_dict({
            "left_column": "l",
            "right_column": "r",
            "scope": "org",
            "order": "name",
        })
        assert (config.left_column, config.right_column, config.scope) == ("l", "r", ("org",))

    def test_unknown_dependent_policy(self):
        with pytest.raises(ValueError):
            NestedSetConfig(dependent="nullify")

    def test_immutable(self):
        config = NestedSetConfig()
        with pytest.raises(FrozenInstanceError):
            config.left_column = "other"

    def test_structural_columns(self):
        assert NestedSetConfig().structural_columns == ("lft", "rgt", "parent_id")


class TestValidate:

    def test_duplicate_structural_columns(self):
        errors = NestedSetConfig(parent_column="lft").validate()
        assert any("distinct" in error for error in errors)

    def test_empty_column_name(self):
        errors = NestedSetConfig(right_column="").validate()
        assert "right_column must be a non-empty string" in errors

    def test_scope_collides_with_structure(self):
        errors = NestedSetConfig(scope="parent_id").validate()
        assert any("collides" in error for error in errors)

    def test_duplicate_scope_columns(self):
        errors = NestedSetConfig(scope=("org", "org")).validate()
        assert "scope columns must be distinct" in errors


class TestScopeHelpers:

    def test_scope_key(self):
        config = NestedSetConfig.scoped("org", "kind")
        node = Record("a", org=1, kind="menu")
        assert config.scope_key(node) == (1, "menu")

    def test_unscoped_key_is_empty(self):
        assert NestedSetConfig().scope_key(Record("a", org=1)) == ()

    def test_same_scope(self):
        config = NestedSetConfig.scoped("org")
        assert config.same_scope(Record("a", org=1), Record("b", org=1))
        assert not config.same_scope(Record("a", org=1), Record("b", org=2))
        # Unset scope values form their own forest
        assert config.same_scope(Record("a"), Record("b"))

    def test_scope_criteria(self):
        config = NestedSetConfig.scoped("org")
        assert config.scope_criteria((7,)) == [eq("org", 7)]
        assert config.scope_criteria(None) == []
        assert NestedSetConfig().scope_criteria(()) == []

    def test_scope_criteria_length_mismatch(self):
        with pytest.raises(ValueError):
            NestedSetConfig.scoped("org").scope_criteria((1, 2))

    def test_node_scope_criteria(self):
        config = NestedSetConfig.scoped("org")
        assert config.node_scope_criteria(Record("a", org="x")) == [eq("org", "x")]


class TestCriteria:

    def test_operators(self):
        node = Record("a", lft=5)
        assert eq("lft", 5).matches(node)
        assert lt("lft", 6).matches(node)
        assert lte("lft", 5).matches(node)
        assert gt("lft", 4).matches(node)
        assert gte("lft", 5).matches(node)
        assert not gt("lft", 5).matches(node)

    def test_eq_none_matches_unset(self):
        assert eq("parent_id", None).matches(Record("a"))
        assert not eq("parent_id", None).matches(Record("a", parent_id="b"))

    def test_ordering_never_matches_unset(self):
        assert not lt("lft", 10).matches(Record("a"))
        assert not gt("lft", None).matches(Record("a", lft=1))

    def test_id_is_a_field(self):
        assert eq("id", "a").matches(Record("a"))

    def test_matches_all(self):
        node = Record("a", lft=2, rgt=3)
        assert matches_all(node, [gte("lft", 2), lte("rgt", 3)])
        assert not matches_all(node, [gte("lft", 2), lt("rgt", 3)])
        assert matches_all(node, [])

    def test_str(self):
        assert str(Criterion("lft", Operator.GTE, 3)) == "lft >= 3"
