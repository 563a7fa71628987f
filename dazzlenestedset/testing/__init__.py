"""Testing utilities for DazzleNestedSet consumers."""

from .fixtures import assert_valid_tree, boundaries_of, build_chain, build_tree, parents_of

__all__ = ['assert_valid_tree', 'boundaries_of', 'build_chain', 'build_tree', 'parents_of']
