"""The NestedSet facade: one object per configured tree.

``NestedSet`` wires the individual components to a single adapter and
config, and provides the lifecycle hooks a persistence layer needs:
allocating boundaries on create, turning a parent-reference change on save
into a move, and pruning on destroy.
"""

import logging
from typing import Any, Iterator, List, Optional, Tuple, Union

from ._common.config import MovePosition, NestedSetConfig, ScopeKey
from .core.adapter import StoreAdapter
from .core.allocator import BoundaryAllocator
from .core.errors import ConfigurationError
from .core.mover import MoveCallback, TreeMover
from .core.node import NestedSetNode
from .core.pruner import DestroyCallback, Pruner
from .core.query import SubtreeQuery, is_leaf, is_root
from .core.rebuilder import Rebuilder
from .core.validator import Validator

logger = logging.getLogger(__name__)


class NestedSet:
    """A nested set hosted by one adapter under one configuration.

    Example:
        >>> adapter = InMemoryStoreAdapter()
        >>> tree = NestedSet(adapter)
        >>> a = tree.create(Record("a"))
        >>> b = tree.create(Record("b", parent_id="a"))
        >>> [node.identifier() for node in tree.query.descendants(a)]
        ['b']
    """

    def __init__(self, adapter: StoreAdapter, config: Optional[NestedSetConfig] = None):
        """Bind the components to an adapter.

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        self.adapter = adapter
        self.config = config if config is not None else NestedSetConfig()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")

        self.allocator = BoundaryAllocator(adapter, self.config)
        self.query = SubtreeQuery(adapter, self.config)
        self.mover = TreeMover(adapter, self.config)
        self.validator = Validator(adapter, self.config)
        self.rebuilder = Rebuilder(adapter, self.config)
        self.pruner = Pruner(adapter, self.config)

    # Hook registration

    def on_before_move(self, callback: MoveCallback) -> MoveCallback:
        """Register a callback that may veto moves by returning False.

        Usable as a decorator.
        """
        self.mover.before_move.append(callback)
        return callback

    def on_after_move(self, callback: MoveCallback) -> MoveCallback:
        self.mover.after_move.append(callback)
        return callback

    def on_before_destroy(self, callback: DestroyCallback) -> DestroyCallback:
        self.pruner.before_destroy.append(callback)
        return callback

    # Lifecycle

    def create(self, node: NestedSetNode, skip_callbacks: bool = False) -> NestedSetNode:
        """Persist a new node at the end of its scope, then attach it.

        When the node already names a parent it is moved under that parent
        (as the last child) right after the first write. The two steps are
        separate writes: if attaching fails (missing parent, parent in
        another scope, vetoed move) the node stays persisted as a root
        with no parent.

        Args:
            node: A node that has never been persisted
            skip_callbacks: Write the record as-is, no allocation or move

        Raises:
            NodeNotFoundError: If the named parent does not exist
            ImpossibleMoveError: If the named parent is in another scope
        """
        if skip_callbacks:
            return self.adapter.insert(node)

        parent_id = self.config.parent_of(node)
        self.allocator.assign(node)
        # The node starts as a root; the move below sets the parent
        node.set_field(self.config.parent_column, None)
        self.adapter.insert(node)
        if parent_id is not None:
            self.mover.move_to_child_of(node, parent_id)
        return node

    def save(self, node: NestedSetNode, skip_callbacks: bool = False) -> NestedSetNode:
        """Persist a node, dispatching a move if its parent reference changed.

        Boundary values on ``node`` are ignored: the stored ones win. A new
        node is handed to ``create``.
        """
        if node.is_new():
            return self.create(node, skip_callbacks=skip_callbacks)
        if skip_callbacks:
            self.adapter.save(node)
            return node

        config = self.config
        stored = self.adapter.get(node.identifier())
        new_parent = config.parent_of(node)
        parent_changed = new_parent != config.parent_of(stored)
        for column in config.structural_columns:
            node.set_field(column, stored.get_field(column))
        self.adapter.save(node)

        if parent_changed:
            logger.debug("Parent of %r changed to %r", node.identifier(), new_parent)
            if new_parent is None:
                self.mover.move_to_root(node)
            else:
                self.mover.move_to_child_of(node, new_parent)
        return node

    def destroy(self, node: NestedSetNode, cascade: Optional[bool] = None) -> bool:
        """Destroy a node and its subtree; see ``Pruner.destroy``."""
        return self.pruner.destroy(node, cascade=cascade)

    def reload(self, node: NestedSetNode) -> NestedSetNode:
        """Refresh the engine-owned fields of ``node`` from the store."""
        stored = self.adapter.get(node.identifier())
        for column in self.config.structural_columns:
            node.set_field(column, stored.get_field(column))
        return node

    # Moves

    def move(self, node: NestedSetNode, target: Any,
             position: Union[MovePosition, str], skip_hooks: bool = False) -> bool:
        return self.mover.move(node, target, position, skip_hooks=skip_hooks)

    def move_possible(self, node: NestedSetNode, target: NestedSetNode) -> bool:
        return self.mover.move_possible(node, target)

    def move_to_left_of(self, node: NestedSetNode, target: Any) -> bool:
        return self.mover.move_to_left_of(node, target)

    def move_to_right_of(self, node: NestedSetNode, target: Any) -> bool:
        return self.mover.move_to_right_of(node, target)

    def move_to_child_of(self, node: NestedSetNode, target: Any) -> bool:
        return self.mover.move_to_child_of(node, target)

    def move_to_root(self, node: NestedSetNode) -> bool:
        return self.mover.move_to_root(node)

    def move_left(self, node: NestedSetNode) -> bool:
        return self.mover.move_left(node)

    def move_right(self, node: NestedSetNode) -> bool:
        return self.mover.move_right(node)

    # Reads

    def roots(self, scope_key: Optional[ScopeKey] = None) -> List[NestedSetNode]:
        return self.query.roots(scope_key)

    def root(self, scope_key: Optional[ScopeKey] = None) -> Optional[NestedSetNode]:
        """The first root of a scope (of any scope when ``scope_key`` is None)."""
        return self.query.first_root(scope_key)

    def level(self, node: NestedSetNode) -> int:
        return self.query.level(node)

    def each_with_level(self, nodes) -> Iterator[Tuple[NestedSetNode, int]]:
        return self.query.level_walk(nodes)

    def is_root(self, node: NestedSetNode) -> bool:
        return is_root(node, self.config)

    def is_leaf(self, node: NestedSetNode) -> bool:
        return is_leaf(node, self.config)

    def to_text(self, node: NestedSetNode) -> str:
        return self.query.to_text(node)

    # Maintenance

    def valid(self, scope_key: Optional[ScopeKey] = None) -> bool:
        return self.validator.valid(scope_key)

    def diagnose(self, scope_key: Optional[ScopeKey] = None) -> List[str]:
        return self.validator.diagnose(scope_key)

    def rebuild(self, scope_key: Optional[ScopeKey] = None, force: bool = False) -> bool:
        return self.rebuilder.rebuild(scope_key, force=force)

    def __repr__(self) -> str:
        return f"NestedSet({self.adapter!r}, scope={self.config.scope!r})"
