"""Relocating nodes (with their subtrees) inside a nested set.

A move never renumbers the whole tree. The node's current interval and the
gap it moves into are two disjoint, adjacent ranges on the boundary line;
swapping those two ranges relocates the subtree while every other node
keeps its relative nesting. Only records with a boundary inside the union
of the two ranges are touched.

Example (C is the last child of B, B the only child of A)::

    A(1,6) B(2,5) C(3,4)  --move(C, root)-->  C(1,2) A(3,6) B(4,5)

Here the ranges are [1,2] (the gap at the front) and [3,4] (C's interval):
boundaries in [1,2] shift right by 2, boundaries in [3,4] shift left by 2.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .._common.config import MovePosition, NestedSetConfig
from .._common.criteria import gte, lte
from .adapter import StoreAdapter
from .errors import ImpossibleMoveError, InvalidPositionError, UnsavedNodeError
from .node import NestedSetNode
from .query import SubtreeQuery

logger = logging.getLogger(__name__)

MoveCallback = Callable[[NestedSetNode, Optional[NestedSetNode], MovePosition], Any]


def parse_position(position: Union[MovePosition, str]) -> MovePosition:
    """Coerce a position token into a MovePosition.

    Raises:
        InvalidPositionError: If the token is not recognized
    """
    if isinstance(position, MovePosition):
        return position
    try:
        return MovePosition(str(position).lower())
    except ValueError:
        raise InvalidPositionError(
            f"Position should be one of: "
            f"{', '.join(p.value for p in MovePosition)} ({position!r} received)"
        ) from None


class TreeMover:
    """Moves nodes by swapping two boundary ranges.

    Callbacks registered in ``before_move`` run before anything is read or
    written; if any returns ``False`` the move is vetoed. Callbacks in
    ``after_move`` run once the store holds the new structure. Both
    receive ``(node, target, position)``.
    """

    def __init__(self, adapter: StoreAdapter, config: NestedSetConfig):
        self.adapter = adapter
        self.config = config
        self.query = SubtreeQuery(adapter, config)
        self.before_move: List[MoveCallback] = []
        self.after_move: List[MoveCallback] = []

    def move_possible(self, node: NestedSetNode, target: NestedSetNode) -> bool:
        """Check if ``node`` may be placed next to or under ``target``.

        False when the target is the node itself, lives in another scope,
        or has a boundary inside the node's interval (moving a node into
        its own subtree would create a cycle).
        """
        config = self.config
        if node.identifier() == target.identifier():
            return False
        if not config.same_scope(node, target):
            return False
        left, right = config.left_of(node), config.right_of(node)
        target_left, target_right = config.left_of(target), config.right_of(target)
        return not (left <= target_left <= right or left <= target_right <= right)

    def move(self,
             node: NestedSetNode,
             target: Union[NestedSetNode, Any, None],
             position: Union[MovePosition, str],
             skip_hooks: bool = False) -> bool:
        """Move ``node`` and its subtree relative to ``target``.

        Args:
            node: Persisted node to move
            target: Node or node id; ignored for ``MovePosition.ROOT``
            position: left / right / child / root
            skip_hooks: Do not run before_move / after_move callbacks

        Returns:
            False if a before_move callback vetoed the move, True otherwise
            (including moves that turn out to change nothing)

        Raises:
            UnsavedNodeError: If ``node`` was never persisted
            InvalidPositionError: If ``position`` is not recognized
            ImpossibleMoveError: If the target is inside the moved subtree
                or in another scope
        """
        if node.is_new():
            raise UnsavedNodeError("You cannot move a new node")
        position = parse_position(position)

        if position is MovePosition.ROOT:
            target = None
        elif target is None:
            raise ImpossibleMoveError(f"A target is required to move to {position.value}")

        if not skip_hooks and not self._run_before_move(node, target, position):
            logger.debug("Move of %r vetoed by before_move callback", node.identifier())
            return False

        # Work on stored values: the caller's objects may be stale
        current = self.adapter.get(node.identifier())
        target_id = target.identifier() if isinstance(target, NestedSetNode) else target
        stored_target = self.adapter.get(target_id) if target is not None else None

        if stored_target is not None:
            if not self.config.same_scope(current, stored_target):
                raise ImpossibleMoveError(
                    "Impossible move, target node is in another scope "
                    f"({self.config.scope_key(stored_target)!r}, "
                    f"not {self.config.scope_key(current)!r})."
                )
            if not self.move_possible(current, stored_target):
                raise ImpossibleMoveError(
                    "Impossible move, target node cannot be inside moved tree."
                )

        self._swap(current, stored_target, position)

        self._reload(node)
        if isinstance(target, NestedSetNode):
            self._reload(target)
        if not skip_hooks:
            for callback in self.after_move:
                callback(node, target, position)
        return True

    def _run_before_move(self, node, target, position) -> bool:
        for callback in self.before_move:
            if callback(node, target, position) is False:
                return False
        return True

    def _resolve_bound(self, target: Optional[NestedSetNode], position: MovePosition) -> int:
        config = self.config
        if position is MovePosition.CHILD:
            return config.right_of(target)
        if position is MovePosition.LEFT:
            return config.left_of(target)
        if position is MovePosition.RIGHT:
            return config.right_of(target) + 1
        return 1

    def _new_parent(self, target: Optional[NestedSetNode], position: MovePosition) -> Any:
        if position is MovePosition.CHILD:
            return target.identifier()
        if position is MovePosition.ROOT:
            return None
        return self.config.parent_of(target)

    def swap_ranges(self, left: int, right: int, bound: int) -> Optional[Tuple[int, int, int, int]]:
        """Compute the two ranges to swap for a node at (left, right).

        Returns:
            ``(a, b, c, d)`` such that boundaries in ``[a, b]`` move by
            ``d - b`` and boundaries in ``[c, d]`` by ``a - c``; None when
            the move would change nothing
        """
        if bound > right:
            bound -= 1
            other_bound = right + 1
        else:
            other_bound = left - 1

        if bound == right or bound == left:
            return None

        # Two non-overlapping intervals, so sorting orders both the
        # intervals and their boundaries
        a, b, c, d = sorted([left, right, bound, other_bound])
        return a, b, c, d

    def _swap(self, node: NestedSetNode, target: Optional[NestedSetNode],
              position: MovePosition) -> None:
        config = self.config
        left, right = config.left_of(node), config.right_of(node)
        ranges = self.swap_ranges(left, right, self._resolve_bound(target, position))
        if ranges is None:
            logger.debug("Move of %r is a no-op", node.identifier())
            return
        a, b, c, d = ranges
        logger.debug("Moving %r: [%d, %d] += %d, [%d, %d] += %d",
                     node.identifier(), a, b, d - b, c, d, a - c)

        def shifted(value: int) -> int:
            if a <= value <= b:
                return value + d - b
            if c <= value <= d:
                return value + a - c
            return value

        for affected in self._affected_nodes(node, a, d):
            affected_id = affected.identifier()
            for column in (config.left_column, config.right_column):
                value = affected.get_field(column)
                if value is None:
                    continue
                new_value = shifted(value)
                if new_value != value:
                    self.adapter.update_field(affected_id, column, new_value)

        self.adapter.update_field(node.identifier(), config.parent_column,
                                  self._new_parent(target, position))

    def _affected_nodes(self, node: NestedSetNode, low: int, high: int) -> List[NestedSetNode]:
        """Nodes of ``node``'s scope with either boundary in [low, high]."""
        config = self.config
        scope = config.node_scope_criteria(node)
        affected: Dict[Any, NestedSetNode] = {}
        for column in (config.left_column, config.right_column):
            for found in self.adapter.find(scope + [gte(column, low), lte(column, high)]):
                affected.setdefault(found.identifier(), found)
        return list(affected.values())

    def _reload(self, node: NestedSetNode) -> None:
        """Refresh the engine-owned fields of a caller's object."""
        stored = self.adapter.get(node.identifier())
        for column in self.config.structural_columns:
            node.set_field(column, stored.get_field(column))

    # Convenience wrappers

    def move_to_left_of(self, node: NestedSetNode, target) -> bool:
        return self.move(node, target, MovePosition.LEFT)

    def move_to_right_of(self, node: NestedSetNode, target) -> bool:
        return self.move(node, target, MovePosition.RIGHT)

    def move_to_child_of(self, node: NestedSetNode, target) -> bool:
        return self.move(node, target, MovePosition.CHILD)

    def move_to_root(self, node: NestedSetNode) -> bool:
        return self.move(node, None, MovePosition.ROOT)

    def move_left(self, node: NestedSetNode) -> bool:
        """Swap ``node`` with its left sibling; False if it has none."""
        sibling = self.query.left_sibling(self.adapter.get(node.identifier()))
        if sibling is None:
            return False
        return self.move_to_left_of(node, sibling)

    def move_right(self, node: NestedSetNode) -> bool:
        """Swap ``node`` with its right sibling; False if it has none."""
        sibling = self.query.right_sibling(self.adapter.get(node.identifier()))
        if sibling is None:
            return False
        return self.move_to_right_of(node, sibling)
