"""Store adapters for specific backends.

Adapters implement the StoreAdapter interface, letting the tree engine
maintain a nested set inside any flat record store.
"""

from .memory import InMemoryStoreAdapter
from .sqlite import SQLiteStoreAdapter

__all__ = [
    "InMemoryStoreAdapter",
    "SQLiteStoreAdapter",
]
