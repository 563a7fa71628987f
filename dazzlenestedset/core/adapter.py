"""StoreAdapter abstraction for DazzleNestedSet.

The StoreAdapter is what keeps DazzleNestedSet independent of any database.
The tree engine only ever needs a handful of primitive operations: point
lookup, filtered range queries, partial field updates and bulk deletes.
Anything that can provide them (a dict, SQLite, a document store, an ORM
session) can host a nested set.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from .._common.criteria import Criterion
from .errors import NodeNotFoundError
from .node import NestedSetNode


class StoreAdapter(ABC):
    """Abstract adapter between the tree engine and a flat record store.

    Adapters must return *fresh* node objects from ``get``/``find``: the
    engine treats them as snapshots and relies on the store, not on the
    objects, as the source of truth for boundary values.

    Ordering is expressed as a sequence of field names; a leading ``-``
    sorts that field descending (``("-rgt",)``). Unset values sort first
    in ascending order.
    """

    @abstractmethod
    def get(self, node_id: Any) -> NestedSetNode:
        """Look up a single record by identity.

        Raises:
            NodeNotFoundError: If no record has this id
        """
        pass

    @abstractmethod
    def find(self,
             criteria: Sequence[Criterion] = (),
             order_by: Sequence[str] = (),
             limit: Optional[int] = None) -> List[NestedSetNode]:
        """Return every record matching all ``criteria``.

        Args:
            criteria: Conditions combined with AND (empty = every record)
            order_by: Field names, ``-`` prefix for descending
            limit: Maximum number of records to return

        Returns:
            List of matching records in the requested order
        """
        pass

    @abstractmethod
    def insert(self, node: NestedSetNode) -> NestedSetNode:
        """Write a new record and mark it persisted.

        Adapters assign an identifier when the node has none.

        Returns:
            The same node, now persisted
        """
        pass

    @abstractmethod
    def save(self, node: NestedSetNode) -> None:
        """Rewrite every field of an existing record."""
        pass

    @abstractmethod
    def update_field(self, node_id: Any, field: str, value: Any) -> None:
        """Set a single field of a stored record in place."""
        pass

    @abstractmethod
    def delete(self, node_id: Any) -> None:
        """Remove a single record. Missing records are ignored."""
        pass

    @abstractmethod
    def delete_where(self, criteria: Sequence[Criterion]) -> int:
        """Remove every record matching all ``criteria``.

        Returns:
            Number of records removed
        """
        pass

    # Derived operations - adapters can override for efficiency

    def first(self,
              criteria: Sequence[Criterion] = (),
              order_by: Sequence[str] = ()) -> Optional[NestedSetNode]:
        """Return the first matching record or None."""
        found = self.find(criteria, order_by=order_by, limit=1)
        return found[0] if found else None

    def count(self, criteria: Sequence[Criterion] = ()) -> int:
        """Count records matching all ``criteria``."""
        return len(self.find(criteria))

    def exists(self, node_id: Any) -> bool:
        """Check if a record with this id is stored."""
        try:
            self.get(node_id)
        except NodeNotFoundError:
            return False
        return True

    # Capability flags - adapters declare what they support

    def supports_transactions(self) -> bool:
        """Check if the adapter can group several writes atomically.

        The engine itself never relies on this; callers can use it to
        decide whether they must take an external lock around moves.
        """
        return False

    def estimated_size(self) -> Optional[int]:
        """Estimate the number of stored records, None if unknown."""
        return None
