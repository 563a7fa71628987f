"""Read-side queries over nested set boundaries.

Every structural question (who are my ancestors, what is in my subtree,
who are my siblings) is answered with one range filter against the store.
None of these functions write anything.
"""

from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .._common.config import NestedSetConfig, ScopeKey
from .._common.criteria import eq, gt, gte, lt, lte
from .adapter import StoreAdapter
from .node import NestedSetNode


# Pure predicates - no store access

def is_root(node: NestedSetNode, config: NestedSetConfig) -> bool:
    return config.parent_of(node) is None


def is_child(node: NestedSetNode, config: NestedSetConfig) -> bool:
    return config.parent_of(node) is not None


def is_leaf(node: NestedSetNode, config: NestedSetConfig) -> bool:
    """A persisted node whose interval encloses nothing."""
    left, right = config.left_of(node), config.right_of(node)
    if node.is_new() or left is None or right is None:
        return False
    return right - left == 1


def is_descendant_of(node: NestedSetNode, other: NestedSetNode,
                     config: NestedSetConfig) -> bool:
    """Check if ``node`` lies strictly inside ``other``'s interval."""
    return (config.left_of(other) < config.left_of(node) < config.right_of(other)
            and config.same_scope(node, other))


def is_or_is_descendant_of(node: NestedSetNode, other: NestedSetNode,
                           config: NestedSetConfig) -> bool:
    return (config.left_of(other) <= config.left_of(node) < config.right_of(other)
            and config.same_scope(node, other))


def is_ancestor_of(node: NestedSetNode, other: NestedSetNode,
                   config: NestedSetConfig) -> bool:
    """Check if ``other`` lies strictly inside ``node``'s interval."""
    return (config.left_of(node) < config.left_of(other) < config.right_of(node)
            and config.same_scope(node, other))


def is_or_is_ancestor_of(node: NestedSetNode, other: NestedSetNode,
                         config: NestedSetConfig) -> bool:
    return (config.left_of(node) <= config.left_of(other) < config.right_of(node)
            and config.same_scope(node, other))


def level_walk(nodes: Iterable[NestedSetNode],
               config: NestedSetConfig) -> Iterator[Tuple[NestedSetNode, int]]:
    """Yield ``(node, level)`` pairs for a left-ordered node sequence.

    Much cheaper than calling ``level`` per node: a single pass keeps the
    chain of parent ids from the root to the current node. The input is
    sorted by left first; it must come from a single scope.

    Example:
        >>> for node, level in level_walk(query.self_and_descendants(root), config):
        ...     print("  " * level, node)
    """
    path: List[Any] = [None]
    for node in sorted(nodes, key=config.left_of):
        parent_id = config.parent_of(node)
        if parent_id != path[-1]:
            # New level: did we descend or ascend?
            if parent_id in path:
                while path[-1] != parent_id:
                    path.pop()
            else:
                path.append(parent_id)
        yield node, len(path) - 1


class SubtreeQuery:
    """Range queries exploiting the nested set encoding.

    All results are restricted to the node's scope and ordered by left.
    """

    def __init__(self, adapter: StoreAdapter, config: NestedSetConfig):
        self.adapter = adapter
        self.config = config

    @property
    def _order(self) -> Tuple[str]:
        return (self.config.left_column,)

    def _scoped(self, node: NestedSetNode, *criteria) -> list:
        return self.config.node_scope_criteria(node) + list(criteria)

    def _without(self, nodes: List[NestedSetNode], node: NestedSetNode) -> List[NestedSetNode]:
        node_id = node.identifier()
        return [n for n in nodes if n.identifier() != node_id]

    # Ancestors

    def self_and_ancestors(self, node: NestedSetNode) -> List[NestedSetNode]:
        config = self.config
        return self.adapter.find(
            self._scoped(node,
                         lte(config.left_column, config.left_of(node)),
                         gte(config.right_column, config.right_of(node))),
            order_by=self._order,
        )

    def ancestors(self, node: NestedSetNode) -> List[NestedSetNode]:
        return self._without(self.self_and_ancestors(node), node)

    def root(self, node: NestedSetNode) -> Optional[NestedSetNode]:
        """Return the root enclosing ``node`` (the node itself for a root)."""
        for candidate in self.self_and_ancestors(node):
            if is_root(candidate, self.config):
                return candidate
        return None

    def parent(self, node: NestedSetNode) -> Optional[NestedSetNode]:
        parent_id = self.config.parent_of(node)
        return None if parent_id is None else self.adapter.get(parent_id)

    def level(self, node: NestedSetNode) -> int:
        """Depth of ``node``; roots are at level 0."""
        if is_root(node, self.config):
            return 0
        config = self.config
        return self.adapter.count(
            self._scoped(node,
                         lt(config.left_column, config.left_of(node)),
                         gt(config.right_column, config.right_of(node)))
        )

    # Descendants

    def self_and_descendants(self, node: NestedSetNode) -> List[NestedSetNode]:
        config = self.config
        return self.adapter.find(
            self._scoped(node,
                         gte(config.left_column, config.left_of(node)),
                         lte(config.right_column, config.right_of(node))),
            order_by=self._order,
        )

    def descendants(self, node: NestedSetNode) -> List[NestedSetNode]:
        return self._without(self.self_and_descendants(node), node)

    def children(self, node: NestedSetNode) -> List[NestedSetNode]:
        return self.adapter.find(
            self._scoped(node, eq(self.config.parent_column, node.identifier())),
            order_by=self._order,
        )

    def leaves(self, node: NestedSetNode) -> List[NestedSetNode]:
        """Descendants of ``node`` that have no children of their own."""
        return [n for n in self.descendants(node) if is_leaf(n, self.config)]

    # Siblings

    def self_and_siblings(self, node: NestedSetNode) -> List[NestedSetNode]:
        return self.adapter.find(
            self._scoped(node, eq(self.config.parent_column, self.config.parent_of(node))),
            order_by=self._order,
        )

    def siblings(self, node: NestedSetNode) -> List[NestedSetNode]:
        return self._without(self.self_and_siblings(node), node)

    def left_sibling(self, node: NestedSetNode) -> Optional[NestedSetNode]:
        """The nearest sibling before ``node``, if any."""
        config = self.config
        return self.adapter.first(
            self._scoped(node,
                         eq(config.parent_column, config.parent_of(node)),
                         lt(config.left_column, config.left_of(node))),
            order_by=(f"-{config.left_column}",),
        )

    def right_sibling(self, node: NestedSetNode) -> Optional[NestedSetNode]:
        """The nearest sibling after ``node``, if any."""
        config = self.config
        return self.adapter.first(
            self._scoped(node,
                         eq(config.parent_column, config.parent_of(node)),
                         gt(config.left_column, config.right_of(node))),
            order_by=self._order,
        )

    # Roots

    def roots(self, scope_key: Optional[ScopeKey] = None) -> List[NestedSetNode]:
        """Top-level nodes of a scope (every scope when ``scope_key`` is None)."""
        return self.adapter.find(
            self.config.scope_criteria(scope_key) + [eq(self.config.parent_column, None)],
            order_by=self._order,
        )

    def first_root(self, scope_key: Optional[ScopeKey] = None) -> Optional[NestedSetNode]:
        return self.adapter.first(
            self.config.scope_criteria(scope_key) + [eq(self.config.parent_column, None)],
            order_by=self._order,
        )

    # Relationship checks bound to this query's config

    def is_descendant_of(self, node: NestedSetNode, other: NestedSetNode) -> bool:
        return is_descendant_of(node, other, self.config)

    def is_or_is_descendant_of(self, node: NestedSetNode, other: NestedSetNode) -> bool:
        return is_or_is_descendant_of(node, other, self.config)

    def is_ancestor_of(self, node: NestedSetNode, other: NestedSetNode) -> bool:
        return is_ancestor_of(node, other, self.config)

    def is_or_is_ancestor_of(self, node: NestedSetNode, other: NestedSetNode) -> bool:
        return is_or_is_ancestor_of(node, other, self.config)

    def level_walk(self, nodes: Iterable[NestedSetNode]) -> Iterator[Tuple[NestedSetNode, int]]:
        return level_walk(nodes, self.config)

    def to_text(self, node: NestedSetNode) -> str:
        """Render ``node``'s subtree as an outline, one node per line.

        Each line reads ``<stars> <id> <label> (<parent>, <left>, <right>)``
        with one star per level below the subtree root plus one. The label
        is ``str(node)``; it is left out when it only repeats the id, which
        is what plain records render as.
        """
        config = self.config
        lines = []
        base = None
        for item, level in self.level_walk(self.self_and_descendants(node)):
            if base is None:
                base = level
            heading = str(item.identifier())
            label = str(item)
            if label != heading:
                heading = f"{heading} {label}"
            lines.append(
                f"{'*' * (level - base + 1)} {heading} "
                f"({config.parent_of(item)}, {config.left_of(item)}, {config.right_of(item)})"
            )
        return "\n".join(lines)
