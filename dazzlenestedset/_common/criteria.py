"""Filter vocabulary shared by the tree engine and store adapters.

Every query the engine issues is a conjunction of simple field comparisons.
Adapters translate a list of ``Criterion`` objects into whatever their
backend understands (a Python predicate, an SQL WHERE clause, ...).
"""

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class Operator(Enum):
    """Comparison operators supported by every adapter."""
    EQ = "=="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="

    @property
    def function(self):
        return _OPERATOR_FUNCTIONS[self]


_OPERATOR_FUNCTIONS = {
    Operator.EQ: operator.eq,
    Operator.LT: operator.lt,
    Operator.LTE: operator.le,
    Operator.GT: operator.gt,
    Operator.GTE: operator.ge,
}


@dataclass(frozen=True)
class Criterion:
    """A single ``field <op> value`` condition.

    ``EQ`` against ``None`` matches unset fields (root nodes have a ``None``
    parent). Ordering comparisons never match an unset field.
    """

    field: str
    op: Operator
    value: Any

    def matches(self, node) -> bool:
        """Evaluate this condition against a node in Python."""
        actual = node.get_field(self.field)
        if self.op is Operator.EQ:
            return actual == self.value
        if actual is None or self.value is None:
            return False
        return self.op.function(actual, self.value)

    def __str__(self) -> str:
        return f"{self.field} {self.op.value} {self.value!r}"


def eq(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.EQ, value)


def lt(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.LT, value)


def lte(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.LTE, value)


def gt(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.GT, value)


def gte(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.GTE, value)


def matches_all(node, criteria: Iterable[Criterion]) -> bool:
    """Check a node against a conjunction of criteria."""
    return all(criterion.matches(node) for criterion in criteria)
