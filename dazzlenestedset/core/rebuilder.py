"""Recomputing every boundary from the parent references.

This is the sanctioned repair path after corruption, for example a move
interrupted between two writes, or records imported from a plain
adjacency list (parent references only). Current boundary values are only
used to keep the existing sibling order stable.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Set

from .._common.config import NestedSetConfig, ScopeKey
from .._common.criteria import eq
from .adapter import StoreAdapter
from .node import NestedSetNode
from .validator import Validator

logger = logging.getLogger(__name__)


class Rebuilder:
    """Renumbers a scope with a depth-first preorder walk.

    Not atomic: an interrupted rebuild leaves a partially renumbered scope
    which the next ``rebuild`` call simply redoes from scratch.
    """

    def __init__(self, adapter: StoreAdapter, config: NestedSetConfig):
        self.adapter = adapter
        self.config = config
        self.validator = Validator(adapter, config)

    def rebuild(self, scope_key: Optional[ScopeKey] = None, force: bool = False) -> bool:
        """Rebuild boundaries unless the tree is already valid.

        Args:
            scope_key: Scope to rebuild, None for every scope
            force: Renumber even a valid tree

        Returns:
            True if a renumbering pass ran, False if the tree was valid
        """
        if not force and self.validator.valid(scope_key):
            return False

        config = self.config
        counters: Dict[ScopeKey, int] = defaultdict(int)
        visited: Set[Any] = set()

        roots = self.adapter.find(
            config.scope_criteria(scope_key) + [eq(config.parent_column, None)],
            order_by=(config.left_column, config.right_column, "id"),
        )
        for root in roots:
            self._number_subtree(root, counters, visited)

        unreachable = self.adapter.count(config.scope_criteria(scope_key)) - len(visited)
        if unreachable > 0:
            logger.warning("Rebuild could not reach %d node(s) from any root in scope %r "
                           "(parent cycle or dangling parent reference)",
                           unreachable, scope_key)
        logger.info("Rebuilt %d node(s) in scope %r", len(visited), scope_key)
        return True

    def _number_subtree(self, root: NestedSetNode, counters: Dict[ScopeKey, int],
                        visited: Set[Any]) -> None:
        """Assign preorder boundaries to ``root`` and everything below it.

        Iterative so that deep trees do not hit the recursion limit. Each
        stack entry is ``(node, left)``; ``left`` is None until the node
        has been entered.
        """
        config = self.config
        stack: List[list] = [[root, None]]
        while stack:
            entry = stack[-1]
            node, left = entry
            scope = config.scope_key(node)

            if left is None:
                if node.identifier() in visited:
                    stack.pop()
                    continue
                visited.add(node.identifier())
                counters[scope] += 1
                entry[1] = counters[scope]
                children = self.adapter.find(
                    config.node_scope_criteria(node)
                    + [eq(config.parent_column, node.identifier())],
                    order_by=(config.left_column,),
                )
                # Push in reverse so the leftmost child is entered first
                for child in reversed(children):
                    stack.append([child, None])
                continue

            stack.pop()
            counters[scope] += 1
            self.adapter.update_field(node.identifier(), config.left_column, left)
            self.adapter.update_field(node.identifier(), config.right_column, counters[scope])
            logger.debug("Renumbered %r to (%d, %d)", node.identifier(), left, counters[scope])
