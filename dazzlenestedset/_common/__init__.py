"""Common components shared by every part of DazzleNestedSet.

This internal package contains pure configuration and filter code with no
store access. It should NOT be imported directly by users; the public names
are re-exported from the top-level package.

Important: This package must NEVER import from core or adapters to avoid
circular dependencies.
"""

from .criteria import Criterion, Operator, eq, lt, lte, gt, gte, matches_all
from .config import (
    NestedSetConfig,
    MovePosition,
    DependentPolicy,
    ScopeKey,
)

__all__ = [
    'Criterion',
    'Operator',
    'eq',
    'lt',
    'lte',
    'gt',
    'gte',
    'matches_all',
    'NestedSetConfig',
    'MovePosition',
    'DependentPolicy',
    'ScopeKey',
]
