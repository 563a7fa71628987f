"""Exceptions raised by DazzleNestedSet.

Invalid arguments are rejected before anything is written. Structural
problems found by the validator are reported, never raised. Failures coming
from the store propagate to the caller unchanged.
"""


class NestedSetError(Exception):
    """Base class for every error raised by this library."""
    pass


class UnsavedNodeError(NestedSetError, ValueError):
    """Raised when moving a node that was never written to the store."""
    pass


class InvalidPositionError(NestedSetError, ValueError):
    """Raised when a move position is not one of left/right/child/root."""
    pass


class ImpossibleMoveError(NestedSetError, ValueError):
    """Raised when the target lies inside the moved subtree or in another scope."""
    pass


class NodeNotFoundError(NestedSetError, LookupError):
    """Raised by adapters when a point lookup misses."""

    def __init__(self, node_id):
        super().__init__(f"No node with id {node_id!r}")
        self.node_id = node_id


class DuplicateNodeError(NestedSetError, ValueError):
    """Raised by adapters when inserting an identifier that is already stored."""

    def __init__(self, node_id):
        super().__init__(f"A node with id {node_id!r} already exists")
        self.node_id = node_id


class ConfigurationError(NestedSetError, ValueError):
    """Raised when a NestedSetConfig fails validation."""
    pass
