"""Node abstraction for DazzleNestedSet.

A node is a flat record: an identifier plus named fields. The tree engine
never assumes attribute names; it reads the parent reference, the two
boundaries and the scope through a ``NestedSetConfig``. Any record type
that implements this small capability interface can be managed.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class NestedSetNode(ABC):
    """Abstract base class for records managed by the tree engine.

    The design philosophy is the same as for the adapter: nodes are data
    containers. Navigation (ancestors, descendants, siblings) is performed
    by querying the store through a ``StoreAdapter``.
    """

    @abstractmethod
    def identifier(self) -> Any:
        """Return the opaque, stable identity of this record.

        Returns ``None`` for a record the store has not assigned an id to yet.
        """
        pass

    @abstractmethod
    def get_field(self, name: str) -> Any:
        """Return the value of a field, ``None`` when unset."""
        pass

    @abstractmethod
    def set_field(self, name: str, value: Any) -> None:
        """Set the value of a field on this in-memory object only."""
        pass

    @abstractmethod
    def is_new(self) -> bool:
        """Check if this record has never been written to the store."""
        pass

    @abstractmethod
    def mark_persisted(self, identifier: Any = None) -> None:
        """Called by adapters after the first successful write.

        Args:
            identifier: Identity assigned by the store, if it assigned one
        """
        pass

    def __str__(self) -> str:
        return str(self.identifier())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.identifier()!r})"

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they are the same persisted record."""
        if other is self:
            return True
        if not isinstance(other, NestedSetNode):
            return NotImplemented
        if self.identifier() is None or other.identifier() is None:
            return False
        return self.identifier() == other.identifier()

    def __hash__(self) -> int:
        return hash(self.identifier()) if self.identifier() is not None else id(self)


class Record(NestedSetNode):
    """Concrete dict-backed node used by the bundled adapters.

    Subclass it to give domain records (categories, menu entries, ...)
    convenience properties while keeping storage generic.

    Example:
        >>> node = Record("a", name="Electronics")
        >>> node.get_field("name")
        'Electronics'
    """

    def __init__(self, id: Any = None, persisted: bool = False, **fields: Any):
        self._id = id
        self._persisted = persisted
        self.fields: Dict[str, Any] = dict(fields)

    def identifier(self) -> Any:
        return self._id

    def get_field(self, name: str) -> Any:
        if name == "id":
            return self._id
        return self.fields.get(name)

    def set_field(self, name: str, value: Any) -> None:
        if name == "id":
            raise ValueError("The identifier of a record cannot be reassigned")
        self.fields[name] = value

    def is_new(self) -> bool:
        return not self._persisted

    def mark_persisted(self, identifier: Optional[Any] = None) -> None:
        if identifier is not None:
            self._id = identifier
        self._persisted = True

    @classmethod
    def from_store(cls, id: Any, fields: Dict[str, Any]) -> 'Record':
        """Build a persisted record from stored values, bypassing ``__init__``.

        Subclasses with their own constructor signature still round-trip
        through the adapters this way.
        """
        record = cls.__new__(cls)
        record._id = id
        record._persisted = True
        record.fields = dict(fields)
        return record

    def copy(self) -> 'Record':
        """Return a detached copy with the same identity and fields."""
        clone = self.from_store(self._id, self.fields)
        clone._persisted = self._persisted
        return clone

    def __getitem__(self, name: str) -> Any:
        return self.get_field(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set_field(name, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id!r}, {self.fields!r})"
