"""Randomized move/destroy sequences checked against the nested set invariants.

Marked slow: run with ``python run_tests.py --all`` or ``pytest -m slow``.
"""

import random

import pytest

from dazzlenestedset import InMemoryStoreAdapter, MovePosition, NestedSet, Record
from dazzlenestedset.testing import assert_valid_tree


def assert_parents_are_tightest_enclosers(tree):
    """Each node's parent must be its innermost enclosing interval."""
    config = tree.config
    nodes = tree.adapter.find()
    for node in nodes:
        enclosing = [
            other for other in nodes
            if config.left_of(other) < config.left_of(node)
            and config.right_of(node) < config.right_of(other)
        ]
        expected = (max(enclosing, key=config.left_of).identifier()
                    if enclosing else None)
        assert config.parent_of(node) == expected, node.identifier()


def assert_gap_free(tree):
    numbers = sorted(
        value for node in tree.adapter.find()
        for value in (node["lft"], node["rgt"])
    )
    assert numbers == list(range(1, len(numbers) + 1))


@pytest.mark.slow
@pytest.mark.parametrize("seed", range(5))
def test_random_operations_preserve_invariants(seed):
    rng = random.Random(seed)
    tree = NestedSet(InMemoryStoreAdapter())
    next_id = 0

    for step in range(300):
        existing = [node.identifier() for node in tree.adapter.find()]
        action = rng.random()

        if not existing or action < 0.35:
            parent = rng.choice(existing + [None]) if existing else None
            tree.create(Record(f"n{next_id}", parent_id=parent))
            next_id += 1
        elif action < 0.85:
            node = tree.adapter.get(rng.choice(existing))
            position = rng.choice(list(MovePosition))
            target = tree.adapter.get(rng.choice(existing))
            if position is not MovePosition.ROOT and not tree.move_possible(node, target):
                continue
            tree.move(node, target, position)
        else:
            tree.destroy(tree.adapter.get(rng.choice(existing)),
                         cascade=rng.random() < 0.5)

        assert_valid_tree(tree)
        assert_gap_free(tree)
        assert_parents_are_tightest_enclosers(tree)


@pytest.mark.slow
def test_rebuild_recovers_from_scrambled_boundaries():
    rng = random.Random(42)
    tree = NestedSet(InMemoryStoreAdapter())
    for i in range(200):
        existing = [node.identifier() for node in tree.adapter.find()]
        parent = rng.choice(existing) if existing and rng.random() < 0.9 else None
        tree.create(Record(f"n{i}", parent_id=parent))
    before = {node.identifier(): node["parent_id"] for node in tree.adapter.find()}

    for node in tree.adapter.find():
        tree.adapter.update_field(node.identifier(), "lft", rng.randint(1, 50))
        tree.adapter.update_field(node.identifier(), "rgt", rng.randint(1, 50))
    assert not tree.valid()

    assert tree.rebuild() is True

    assert_valid_tree(tree)
    assert_gap_free(tree)
    assert_parents_are_tightest_enclosers(tree)
    assert {node.identifier(): node["parent_id"] for node in tree.adapter.find()} == before
