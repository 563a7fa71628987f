"""DazzleNestedSet - Nested Set Trees on Flat Record Stores.

DazzleNestedSet keeps trees and forests inside any flat store by giving
every record two integers, a left and a right boundary. A node's subtree is
exactly the set of records whose boundaries nest inside its own, so
ancestor, descendant and sibling queries are plain range filters.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzlenestedset import NestedSet, Record, InMemoryStoreAdapter

    tree = NestedSet(InMemoryStoreAdapter())
    a = tree.create(Record("a"))
    b = tree.create(Record("b", parent_id="a"))
    tree.move_to_root(b)
━━━━━━━━━━━━━━━━━━━━━━━━━━

Bring your own storage by implementing ``StoreAdapter``.
"""

__version__ = "0.1.0"

# Configuration
from ._common.config import NestedSetConfig, MovePosition, DependentPolicy
from ._common.criteria import Criterion, Operator

# Core
from .core.node import NestedSetNode, Record
from .core.adapter import StoreAdapter
from .core.errors import (
    NestedSetError,
    UnsavedNodeError,
    InvalidPositionError,
    ImpossibleMoveError,
    NodeNotFoundError,
    DuplicateNodeError,
    ConfigurationError,
)
from .core.allocator import BoundaryAllocator
from .core.query import (
    SubtreeQuery,
    level_walk,
    is_descendant_of,
    is_or_is_descendant_of,
    is_ancestor_of,
    is_or_is_ancestor_of,
)
from .core.mover import TreeMover
from .core.validator import Validator
from .core.rebuilder import Rebuilder
from .core.pruner import Pruner

# Adapters
from .adapters.memory import InMemoryStoreAdapter
from .adapters.sqlite import SQLiteStoreAdapter

# Facade and high-level API
from .tree import NestedSet
from .api import (
    move_node,
    check_tree,
    repair_tree,
    import_adjacency_list,
    render_tree,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Config
    "NestedSetConfig",
    "MovePosition",
    "DependentPolicy",
    "Criterion",
    "Operator",
    # Core
    "NestedSetNode",
    "Record",
    "StoreAdapter",
    "NestedSetError",
    "UnsavedNodeError",
    "InvalidPositionError",
    "ImpossibleMoveError",
    "NodeNotFoundError",
    "DuplicateNodeError",
    "ConfigurationError",
    "BoundaryAllocator",
    "SubtreeQuery",
    "level_walk",
    "is_descendant_of",
    "is_or_is_descendant_of",
    "is_ancestor_of",
    "is_or_is_ancestor_of",
    "TreeMover",
    "Validator",
    "Rebuilder",
    "Pruner",
    # Adapters
    "InMemoryStoreAdapter",
    "SQLiteStoreAdapter",
    # API
    "NestedSet",
    "move_node",
    "check_tree",
    "repair_tree",
    "import_adjacency_list",
    "render_tree",
    "get_tree_stats",
]
