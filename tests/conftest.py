"""Shared fixtures for the DazzleNestedSet test suite.

Most behavioral tests run once per bundled adapter so the in-memory and
SQLite implementations are held to the same contract.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlenestedset import (
    InMemoryStoreAdapter,
    NestedSet,
    NestedSetConfig,
    SQLiteStoreAdapter,
)
from dazzlenestedset.testing import build_tree

# root
# ├── c1
# ├── c2
# │   └── c21
# └── c3
STANDARD_EDGES = [
    ("root", None),
    ("c1", "root"),
    ("c2", "root"),
    ("c21", "c2"),
    ("c3", "root"),
]

STANDARD_BOUNDARIES = {
    "root": (1, 10),
    "c1": (2, 3),
    "c2": (4, 7),
    "c21": (5, 6),
    "c3": (8, 9),
}


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running randomized tests")


@pytest.fixture(params=["memory", "sqlite"])
def make_adapter(request):
    """Factory building an empty adapter of each kind for a config."""
    created = []

    def factory(config=None):
        config = config or NestedSetConfig()
        if request.param == "memory":
            adapter = InMemoryStoreAdapter()
        else:
            adapter = SQLiteStoreAdapter(config)
        created.append(adapter)
        return adapter

    yield factory

    for adapter in created:
        if isinstance(adapter, SQLiteStoreAdapter):
            adapter.close()


@pytest.fixture
def tree(make_adapter):
    """An empty unscoped tree."""
    return NestedSet(make_adapter())


@pytest.fixture
def standard_tree(tree):
    """The five-node tree drawn at the top of this module."""
    build_tree(tree, STANDARD_EDGES)
    return tree


@pytest.fixture
def memory_tree():
    """A standard tree on the in-memory adapter, for write accounting."""
    tree = NestedSet(InMemoryStoreAdapter())
    build_tree(tree, STANDARD_EDGES)
    tree.adapter.reset_stats()
    return tree


@pytest.fixture
def standard_boundaries():
    return dict(STANDARD_BOUNDARIES)
