"""In-memory store adapter for DazzleNestedSet.

Keeps records in a plain dict keyed by identifier. Useful for tests, for
building a tree before bulk-loading it elsewhere, and as the reference
implementation of the StoreAdapter contract.
"""

import itertools
from typing import Any, Dict, List, Optional, Sequence

from .._common.criteria import Criterion, matches_all
from ..core.adapter import StoreAdapter
from ..core.errors import DuplicateNodeError, NodeNotFoundError
from ..core.node import NestedSetNode, Record


def _sort_key(value: Any):
    return (0, 0) if value is None else (1, value)


def _sort_records(records: List[Record], order_by: Sequence[str]) -> List[Record]:
    """Sort by several fields, ``-`` prefix for descending, unset first."""
    # Stable sorts applied from the least to the most significant key
    for term in reversed(order_by):
        descending = term.startswith("-")
        name = term[1:] if descending else term
        records.sort(key=lambda record: _sort_key(record.get_field(name)),
                     reverse=descending)
    return records


class InMemoryStoreAdapter(StoreAdapter):
    """StoreAdapter backed by a dict.

    Stored records are copies: mutating an object returned by ``get`` or
    ``find`` does not change the store until it is written back, the same
    as with a real database.

    Statistics (``reads``, ``writes``, ``deletes``) are kept so tests can
    assert how much of the store an operation touched.
    """

    def __init__(self, records: Optional[Sequence[Record]] = None):
        """Initialize the store, optionally preloaded with records.

        Args:
            records: Records to store as-is (they must carry identifiers)
        """
        self._records: Dict[Any, Record] = {}
        self._ids = itertools.count(1)
        self.reads = 0
        self.writes = 0
        self.deletes = 0
        for record in records or ():
            self.insert(record)

    def _next_id(self) -> int:
        node_id = next(self._ids)
        while node_id in self._records:
            node_id = next(self._ids)
        return node_id

    def get(self, node_id: Any) -> Record:
        self.reads += 1
        try:
            return self._records[node_id].copy()
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def find(self,
             criteria: Sequence[Criterion] = (),
             order_by: Sequence[str] = (),
             limit: Optional[int] = None) -> List[Record]:
        self.reads += 1
        found = [record for record in self._records.values() if matches_all(record, criteria)]
        found = _sort_records(found, order_by)
        if limit is not None:
            found = found[:limit]
        return [record.copy() for record in found]

    def insert(self, node: NestedSetNode) -> NestedSetNode:
        node_id = node.identifier()
        if node_id is None:
            node_id = self._next_id()
        elif node_id in self._records:
            raise DuplicateNodeError(node_id)
        node.mark_persisted(node_id)
        self._records[node_id] = self._as_record(node)
        self.writes += 1
        return node

    def save(self, node: NestedSetNode) -> None:
        if node.identifier() not in self._records:
            raise NodeNotFoundError(node.identifier())
        self._records[node.identifier()] = self._as_record(node)
        self.writes += 1

    def update_field(self, node_id: Any, field: str, value: Any) -> None:
        try:
            self._records[node_id].set_field(field, value)
        except KeyError:
            raise NodeNotFoundError(node_id) from None
        self.writes += 1

    def delete(self, node_id: Any) -> None:
        if self._records.pop(node_id, None) is not None:
            self.deletes += 1

    def delete_where(self, criteria: Sequence[Criterion]) -> int:
        doomed = [node_id for node_id, record in self._records.items()
                  if matches_all(record, criteria)]
        for node_id in doomed:
            del self._records[node_id]
        self.deletes += len(doomed)
        return len(doomed)

    def count(self, criteria: Sequence[Criterion] = ()) -> int:
        self.reads += 1
        return sum(1 for record in self._records.values() if matches_all(record, criteria))

    def exists(self, node_id: Any) -> bool:
        return node_id in self._records

    def estimated_size(self) -> Optional[int]:
        return len(self._records)

    def reset_stats(self) -> None:
        self.reads = self.writes = self.deletes = 0

    def _as_record(self, node: NestedSetNode) -> Record:
        if not isinstance(node, Record):
            raise TypeError(
                f"{self.__class__.__name__} stores Record instances, got {type(node).__name__}"
            )
        stored = node.copy()
        stored.mark_persisted()
        return stored

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self._records)} records)"
