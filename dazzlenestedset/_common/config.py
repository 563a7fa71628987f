"""Configuration system for DazzleNestedSet.

This module defines how users describe the layout of their node records:
which fields hold the parent reference and the two boundaries, which fields
partition the collection into independent forests (the scope), and what
happens to descendants when a node is destroyed.

The configuration is an immutable value passed explicitly to every
component, so two differently configured trees can share one process
without stepping on each other.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .criteria import Criterion, Operator


class MovePosition(Enum):
    """Where a moved node ends up relative to its target."""
    LEFT = "left"      # Previous sibling of target
    RIGHT = "right"    # Next sibling of target
    CHILD = "child"    # Last child of target
    ROOT = "root"      # First root of the scope (target ignored)


class DependentPolicy(Enum):
    """What happens to descendants when a node is destroyed."""
    DELETE_ALL = "delete_all"   # Bulk delete, no per-node hooks
    DESTROY = "destroy"         # Destroy each descendant, hooks fire


ScopeKey = Tuple[Any, ...]


@dataclass(frozen=True)
class NestedSetConfig:
    """Field names and policies for one nested set.

    Components never store configuration on node classes; they receive
    an instance of this class and read every field through it.
    """

    parent_column: str = "parent_id"
    left_column: str = "lft"
    right_column: str = "rgt"
    scope: Union[str, Tuple[str, ...]] = field(default_factory=tuple)
    dependent: DependentPolicy = DependentPolicy.DELETE_ALL

    def __post_init__(self):
        # Accept a bare column name for single-column scopes
        if isinstance(self.scope, str):
            object.__setattr__(self, "scope", (self.scope,))
        elif not isinstance(self.scope, tuple):
            object.__setattr__(self, "scope", tuple(self.scope))
        if isinstance(self.dependent, str):
            object.__setattr__(self, "dependent", DependentPolicy(self.dependent))

    # Convenience constructors

    @classmethod
    def scoped(cls, *columns: str, **kwargs) -> 'NestedSetConfig':
        """Create a config whose forests are partitioned by ``columns``.

        Example:
            >>> config = NestedSetConfig.scoped("organization_id")
            >>> config.scope
            ('organization_id',)
        """
        return cls(scope=tuple(columns), **kwargs)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'NestedSetConfig':
        """Create a config from a plain mapping (e.g. parsed settings).

        Unknown keys are ignored so settings files can carry other options.
        """
        known = {"parent_column", "left_column", "right_column", "scope", "dependent"}
        return cls(**{key: value for key, value in options.items() if key in known})

    # Field accessors

    def left_of(self, node) -> Optional[int]:
        return node.get_field(self.left_column)

    def right_of(self, node) -> Optional[int]:
        return node.get_field(self.right_column)

    def parent_of(self, node) -> Any:
        return node.get_field(self.parent_column)

    def scope_key(self, node) -> ScopeKey:
        """Return the values of the scope columns for ``node``."""
        return tuple(node.get_field(column) for column in self.scope)

    def same_scope(self, node, other) -> bool:
        """Check whether two nodes live in the same forest."""
        return self.scope_key(node) == self.scope_key(other)

    def scope_criteria(self, scope_key: Optional[ScopeKey] = None) -> List[Criterion]:
        """Build equality criteria restricting a query to one scope.

        Args:
            scope_key: Values aligned with ``self.scope``. ``None`` means
                no restriction (every scope).

        Returns:
            List of criteria (empty when unscoped or ``scope_key`` is None)
        """
        if scope_key is None or not self.scope:
            return []
        if len(scope_key) != len(self.scope):
            raise ValueError(
                f"Scope key {scope_key!r} does not match scope columns {self.scope!r}"
            )
        return [
            Criterion(column, Operator.EQ, value)
            for column, value in zip(self.scope, scope_key)
        ]

    def node_scope_criteria(self, node) -> List[Criterion]:
        """Criteria restricting a query to ``node``'s scope."""
        return self.scope_criteria(self.scope_key(node))

    @property
    def structural_columns(self) -> Tuple[str, str, str]:
        """The fields owned by the tree engine."""
        return (self.left_column, self.right_column, self.parent_column)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        names: Dict[str, str] = {
            "parent_column": self.parent_column,
            "left_column": self.left_column,
            "right_column": self.right_column,
        }
        for label, name in names.items():
            if not isinstance(name, str) or not name:
                errors.append(f"{label} must be a non-empty string")

        if len(set(names.values())) != len(names):
            errors.append("parent_column, left_column and right_column must be distinct")

        for column in self.scope:
            if not isinstance(column, str) or not column:
                errors.append("scope columns must be non-empty strings")
            elif column in names.values():
                errors.append(f"scope column {column!r} collides with a structural column")

        if len(set(self.scope)) != len(self.scope):
            errors.append("scope columns must be distinct")

        return errors
