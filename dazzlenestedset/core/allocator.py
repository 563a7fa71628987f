"""Boundary allocation for newly created nodes."""

import logging
from typing import Optional, Tuple

from .._common.config import NestedSetConfig, ScopeKey
from .adapter import StoreAdapter
from .node import NestedSetNode

logger = logging.getLogger(__name__)


class BoundaryAllocator:
    """Assigns initial boundaries at the tail of a scope's interval space.

    A new node always starts life as the last root of its scope. Placing
    it anywhere else is a separate move.
    """

    def __init__(self, adapter: StoreAdapter, config: NestedSetConfig):
        self.adapter = adapter
        self.config = config

    def allocate(self, scope_key: Optional[ScopeKey] = None) -> Tuple[int, int]:
        """Return ``(max_right + 1, max_right + 2)`` for the scope.

        Args:
            scope_key: Values of the scope columns. None looks at every
                scope, so the pair is free in all of them

        Returns:
            The (left, right) pair for a new node, (1, 2) in an empty scope
        """
        last = self.adapter.first(
            self.config.scope_criteria(scope_key),
            order_by=(f"-{self.config.right_column}",),
        )
        max_right = self.config.right_of(last) if last is not None else None
        max_right = max_right or 0
        return max_right + 1, max_right + 2

    def assign(self, node: NestedSetNode) -> Tuple[int, int]:
        """Allocate boundaries for ``node``'s scope and write them onto it."""
        left, right = self.allocate(self.config.scope_key(node))
        node.set_field(self.config.left_column, left)
        node.set_field(self.config.right_column, right)
        logger.debug("Allocated (%d, %d) for new node in scope %r",
                     left, right, self.config.scope_key(node))
        return left, right
