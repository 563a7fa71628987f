"""Consistency checks for nested set boundaries.

The validator reports problems; it never raises for them and never
repairs anything. Callers decide whether to run the Rebuilder.
"""

import logging
from collections import Counter, defaultdict
from typing import Any, Dict, List, Optional

from .._common.config import NestedSetConfig, ScopeKey
from .adapter import StoreAdapter
from .node import NestedSetNode

logger = logging.getLogger(__name__)


class Validator:
    """Checks the global nested set invariants over one or every scope.

    Each check loads the scope once and works in memory, so validating a
    scope costs a single query regardless of its size.
    """

    def __init__(self, adapter: StoreAdapter, config: NestedSetConfig):
        self.adapter = adapter
        self.config = config

    def _nodes(self, scope_key: Optional[ScopeKey]) -> List[NestedSetNode]:
        return self.adapter.find(self.config.scope_criteria(scope_key))

    def valid(self, scope_key: Optional[ScopeKey] = None) -> bool:
        """Check every invariant; ``scope_key=None`` checks every scope."""
        return not self.diagnose(scope_key)

    def boundaries_well_formed(self, scope_key: Optional[ScopeKey] = None) -> bool:
        return not self._boundary_problems(self._nodes(scope_key))

    def no_duplicate_boundaries(self, scope_key: Optional[ScopeKey] = None) -> bool:
        return not self._duplicate_problems(self._nodes(scope_key))

    def roots_ordered(self, scope_key: Optional[ScopeKey] = None) -> bool:
        return not self._root_order_problems(self._nodes(scope_key))

    def diagnose(self, scope_key: Optional[ScopeKey] = None) -> List[str]:
        """Describe every invariant violation.

        Returns:
            List of human-readable problems (empty if the tree is valid)
        """
        nodes = self._nodes(scope_key)
        problems = (self._boundary_problems(nodes)
                    + self._duplicate_problems(nodes)
                    + self._root_order_problems(nodes))
        if problems:
            logger.debug("Validation found %d problem(s) in scope %r", len(problems), scope_key)
        return problems

    def _boundary_problems(self, nodes: List[NestedSetNode]) -> List[str]:
        config = self.config
        by_id: Dict[Any, NestedSetNode] = {node.identifier(): node for node in nodes}
        problems = []
        for node in nodes:
            left, right = config.left_of(node), config.right_of(node)
            if left is None or right is None:
                problems.append(f"{node.identifier()!r} has unset boundaries")
                continue
            if left >= right:
                problems.append(f"{node.identifier()!r} has left {left} >= right {right}")
                continue
            parent = by_id.get(config.parent_of(node))
            if parent is None:
                # Roots, and parents outside the loaded scope
                continue
            parent_left, parent_right = config.left_of(parent), config.right_of(parent)
            if parent_left is None or parent_right is None:
                continue
            if left <= parent_left or right >= parent_right:
                problems.append(
                    f"{node.identifier()!r} ({left}, {right}) is not inside its parent "
                    f"{parent.identifier()!r} ({parent_left}, {parent_right})"
                )
        return problems

    def _duplicate_problems(self, nodes: List[NestedSetNode]) -> List[str]:
        config = self.config
        problems = []
        for scope, members in self._group_by_scope(nodes).items():
            # Lefts and rights share one numbering space
            counts = Counter(
                value for node in members
                for value in (config.left_of(node), config.right_of(node))
                if value is not None
            )
            for value, count in sorted(counts.items()):
                if count > 1:
                    problems.append(
                        f"boundary {value} used {count} times in scope {scope!r}"
                    )
        return problems

    def _root_order_problems(self, nodes: List[NestedSetNode]) -> List[str]:
        config = self.config
        problems = []
        for scope, members in self._group_by_scope(nodes).items():
            roots = sorted(
                (node for node in members
                 if config.parent_of(node) is None and config.left_of(node) is not None
                 and config.right_of(node) is not None),
                key=config.left_of,
            )
            left = right = 0
            for root in roots:
                root_left, root_right = config.left_of(root), config.right_of(root)
                # Strictly increasing on both sides, and no overlap with the
                # previous root; contiguous roots are fine
                if not (root_left > left and root_right > right and root_left > right):
                    problems.append(
                        f"root {root.identifier()!r} ({root_left}, {root_right}) overlaps "
                        f"the previous root in scope {scope!r}"
                    )
                left, right = root_left, root_right
        return problems

    def _group_by_scope(self, nodes: List[NestedSetNode]) -> Dict[ScopeKey, List[NestedSetNode]]:
        groups: Dict[ScopeKey, List[NestedSetNode]] = defaultdict(list)
        for node in nodes:
            groups[self.config.scope_key(node)].append(node)
        return groups
