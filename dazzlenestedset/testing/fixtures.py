"""Test fixtures for DazzleNestedSet consumers.

These helpers make it easy to build small trees and assert on their
boundaries in the test suites of projects that use DazzleNestedSet,
without reaching into adapter internals.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..tree import NestedSet
from ..core.node import NestedSetNode, Record


def boundaries_of(tree: NestedSet, scope_key=None) -> Dict[Any, Tuple[int, int]]:
    """Return ``{id: (left, right)}`` for every stored node of a scope.

    Example:
        >>> nodes = build_chain(tree, "a", "b", "c")
        >>> boundaries_of(tree)
        {'a': (1, 6), 'b': (2, 5), 'c': (3, 4)}
    """
    config = tree.config
    return {
        node.identifier(): (config.left_of(node), config.right_of(node))
        for node in tree.adapter.find(config.scope_criteria(scope_key),
                                      order_by=(config.left_column,))
    }


def parents_of(tree: NestedSet, scope_key=None) -> Dict[Any, Any]:
    """Return ``{id: parent_id}`` for every stored node of a scope."""
    config = tree.config
    return {
        node.identifier(): config.parent_of(node)
        for node in tree.adapter.find(config.scope_criteria(scope_key))
    }


def build_chain(tree: NestedSet, *ids: Any, **fields: Any) -> List[NestedSetNode]:
    """Create a chain where each node is the only child of the previous one.

    Args:
        tree: Tree to create the nodes in
        *ids: Identifiers, outermost first
        **fields: Extra fields (scope values, ...) set on every node

    Returns:
        The created nodes, outermost first
    """
    nodes = []
    parent_id = None
    for node_id in ids:
        record = Record(node_id, **fields)
        record.set_field(tree.config.parent_column, parent_id)
        nodes.append(tree.create(record))
        parent_id = node_id
    return nodes


def build_tree(tree: NestedSet, edges: Iterable[Tuple[Any, Optional[Any]]],
               **fields: Any) -> Dict[Any, NestedSetNode]:
    """Create nodes from ``(id, parent_id)`` pairs in the given order.

    Parents must appear before their children. Siblings keep their
    creation order.
    """
    created = {}
    for node_id, parent_id in edges:
        record = Record(node_id, **fields)
        record.set_field(tree.config.parent_column, parent_id)
        created[node_id] = tree.create(record)
    return created


def assert_valid_tree(tree: NestedSet, scope_key=None) -> None:
    """Fail with the validator's diagnostics if the tree is not valid."""
    problems = tree.diagnose(scope_key)
    assert not problems, "Invalid nested set:\n  " + "\n  ".join(problems)
