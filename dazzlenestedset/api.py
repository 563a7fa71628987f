"""High-level API for DazzleNestedSet.

This module provides simple, functional interfaces for common nested set
tasks. These functions wrap the object-oriented API (``NestedSet`` and
the core components) for ease of use in scripts and one-off maintenance.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from ._common.config import MovePosition, NestedSetConfig, ScopeKey
from .core.adapter import StoreAdapter
from .core.node import NestedSetNode
from .core.query import is_leaf
from .tree import NestedSet


def move_node(
    adapter: StoreAdapter,
    node: NestedSetNode,
    target: Any,
    position: Union[MovePosition, str] = MovePosition.CHILD,
    config: Optional[NestedSetConfig] = None,
) -> bool:
    """Move ``node`` relative to ``target`` in a single call.

    Example:
        >>> move_node(adapter, laptops, "electronics", "child")
        True
    """
    return NestedSet(adapter, config).move(node, target, position)


def check_tree(
    adapter: StoreAdapter,
    config: Optional[NestedSetConfig] = None,
    scope_key: Optional[ScopeKey] = None,
) -> List[str]:
    """Return every invariant violation (empty list for a healthy tree)."""
    return NestedSet(adapter, config).diagnose(scope_key)


def repair_tree(
    adapter: StoreAdapter,
    config: Optional[NestedSetConfig] = None,
    scope_key: Optional[ScopeKey] = None,
) -> bool:
    """Rebuild boundaries if the tree is invalid.

    Returns:
        True if a rebuild ran, False if the tree was already valid
    """
    return NestedSet(adapter, config).rebuild(scope_key)


def import_adjacency_list(
    adapter: StoreAdapter,
    records: Iterable[NestedSetNode],
    config: Optional[NestedSetConfig] = None,
) -> int:
    """Load records that only carry parent references, then number them.

    Useful for converting a plain parent-pointer table into a nested set.
    Records are inserted as-is and boundaries are computed by one rebuild
    pass over every scope.

    Returns:
        Number of records imported
    """
    tree = NestedSet(adapter, config)
    count = 0
    for record in records:
        adapter.insert(record)
        count += 1
    tree.rebuild(force=True)
    return count


def render_tree(
    adapter: StoreAdapter,
    config: Optional[NestedSetConfig] = None,
    scope_key: Optional[ScopeKey] = None,
) -> str:
    """Render every tree of a scope (every scope by default) as an outline."""
    tree = NestedSet(adapter, config)
    return "\n".join(tree.to_text(root) for root in tree.roots(scope_key))


def get_tree_stats(
    adapter: StoreAdapter,
    config: Optional[NestedSetConfig] = None,
    scope_key: Optional[ScopeKey] = None,
) -> Dict[str, Any]:
    """Get statistics about the forest of one scope, or of all of them.

    Returns:
        Dictionary with node, root and leaf counts, the maximum level and
        whether the boundaries are valid

    Example:
        >>> stats = get_tree_stats(adapter)
        >>> print(f"{stats['total_nodes']} nodes, {stats['max_level']} levels deep")
    """
    tree = NestedSet(adapter, config)
    stats = {
        'total_nodes': 0,
        'root_count': 0,
        'leaf_count': 0,
        'max_level': 0,
        'valid': tree.valid(scope_key),
    }
    for root in tree.roots(scope_key):
        stats['root_count'] += 1
        for node, level in tree.each_with_level(tree.query.self_and_descendants(root)):
            stats['total_nodes'] += 1
            stats['max_level'] = max(stats['max_level'], level)
            if is_leaf(node, tree.config):
                stats['leaf_count'] += 1
    return stats
