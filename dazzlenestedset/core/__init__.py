"""Core abstractions and algorithms for DazzleNestedSet.

This package contains the node and adapter interfaces plus one class per
tree-maintenance concern (allocation, queries, moves, validation, rebuild,
pruning). Each component takes a StoreAdapter and a NestedSetConfig.
"""

from .node import NestedSetNode, Record
from .adapter import StoreAdapter
from .errors import (
    NestedSetError,
    UnsavedNodeError,
    InvalidPositionError,
    ImpossibleMoveError,
    NodeNotFoundError,
    DuplicateNodeError,
    ConfigurationError,
)
from .allocator import BoundaryAllocator
from .query import SubtreeQuery, level_walk
from .mover import TreeMover, parse_position
from .validator import Validator
from .rebuilder import Rebuilder
from .pruner import Pruner

__all__ = [
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
    "TreeMover",
    "parse_position",
    "Validator",
    "Rebuilder",
    "Pruner",
]
