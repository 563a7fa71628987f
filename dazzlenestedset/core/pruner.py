"""Destroying nodes and compacting the boundary space they leave behind."""

import logging
from typing import Any, Callable, List, Optional, Set

from .._common.config import DependentPolicy, NestedSetConfig
from .._common.criteria import gt, lt
from .adapter import StoreAdapter
from .errors import NodeNotFoundError
from .node import NestedSetNode
from .query import SubtreeQuery

logger = logging.getLogger(__name__)

DestroyCallback = Callable[[NestedSetNode], Any]


class Pruner:
    """Removes a node with its subtree and closes the resulting gap.

    Two policies for descendants:

    - cascade: every descendant is destroyed individually, leaves before
      their ancestors, and ``before_destroy`` callbacks fire for each
    - bulk: every record strictly inside the node's interval is removed
      with one ``delete_where``; no per-descendant callbacks

    Either way the node's width is then subtracted from every boundary to
    its right so the scope keeps a gap-free numbering.
    """

    def __init__(self, adapter: StoreAdapter, config: NestedSetConfig):
        self.adapter = adapter
        self.config = config
        self.query = SubtreeQuery(adapter, config)
        self.before_destroy: List[DestroyCallback] = []

    def destroy(self, node: NestedSetNode, cascade: Optional[bool] = None,
                skip_hooks: bool = False) -> bool:
        """Destroy ``node`` and its subtree.

        Args:
            node: Node to destroy
            cascade: Destroy descendants one by one; None uses the
                configured DependentPolicy
            skip_hooks: Do not run before_destroy callbacks

        Returns:
            False if the node was already gone, True otherwise
        """
        if cascade is None:
            cascade = self.config.dependent is DependentPolicy.DESTROY
        try:
            current = self.adapter.get(node.identifier())
        except NodeNotFoundError:
            logger.debug("Destroy of %r skipped: already destroyed", node.identifier())
            return False

        self.prune(current, cascade, skip_hooks=skip_hooks)
        # Descendants' callbacks have run by now, leaves first
        if not skip_hooks:
            self._run_before_destroy(node)
        self.adapter.delete(current.identifier())
        return True

    def prune(self, node: NestedSetNode, cascade: bool, skip_hooks: bool = False) -> None:
        """Remove ``node``'s descendants and close the gap its interval leaves.

        The compaction covers ``node``'s full width, so the caller must
        delete ``node`` itself right afterwards (``destroy`` does). Does
        nothing for a node whose boundaries were never set.
        """
        config = self.config
        left, right = config.left_of(node), config.right_of(node)
        if left is None or right is None:
            return

        if cascade:
            self._destroy_descendants(node, skip_hooks)
        else:
            removed = self.adapter.delete_where(
                config.node_scope_criteria(node)
                + [gt(config.left_column, left), lt(config.right_column, right)]
            )
            logger.debug("Bulk deleted %d descendant(s) of %r", removed, node.identifier())

        self._compact(node, left, right)

    def _destroy_descendants(self, node: NestedSetNode, skip_hooks: bool) -> None:
        # Ascending right is a post-order: children come before parents
        descendants = sorted(self.query.descendants(node), key=self.config.right_of)
        destroyed: Set[Any] = set()
        for descendant in descendants:
            descendant_id = descendant.identifier()
            if descendant_id in destroyed:
                continue
            destroyed.add(descendant_id)
            if not skip_hooks:
                self._run_before_destroy(descendant)
            # The enclosing compaction covers the whole interval
            self.adapter.delete(descendant_id)

    def _compact(self, node: NestedSetNode, left: int, right: int) -> None:
        """Shift every boundary right of the removed interval down by its width.

        Lefts are shifted first, then rights. A reader between the two
        passes can observe a node with left >= right.
        """
        config = self.config
        width = right - left + 1
        scope = config.node_scope_criteria(node)
        logger.debug("Compacting scope %r by %d after %r", config.scope_key(node),
                     width, node.identifier())
        for column in (config.left_column, config.right_column):
            for other in self.adapter.find(scope + [gt(column, right)]):
                self.adapter.update_field(other.identifier(), column,
                                          other.get_field(column) - width)

    def _run_before_destroy(self, node: NestedSetNode) -> None:
        for callback in self.before_destroy:
            callback(node)
