#!/usr/bin/env python3
"""Demo script for DazzleNestedSet: a product category tree in SQLite.

This script builds a small category forest, moves a few branches around,
queries it, breaks it on purpose and repairs it with a rebuild.

Usage:
    python examples/category_tree.py              # in-memory database
    python examples/category_tree.py shop.db      # persist to a new file
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlenestedset import (
    NestedSet,
    NestedSetConfig,
    Record,
    SQLiteStoreAdapter,
    get_tree_stats,
    render_tree,
)


class Category(Record):
    """A category record with a display name."""

    @property
    def name(self):
        return self.get_field("name")


def build_catalog(tree: NestedSet):
    """Create two shops' category trees."""
    print("\n=== Building Catalog ===")
    for shop, edges in {
        "north": [
            ("electronics", None),
            ("laptops", "electronics"),
            ("phones", "electronics"),
            ("accessories", "electronics"),
            ("chargers", "accessories"),
            ("books", None),
            ("fiction", "books"),
        ],
        "south": [
            ("garden", None),
            ("tools", "garden"),
        ],
    }.items():
        for slug, parent in edges:
            tree.create(Category(f"{shop}/{slug}", shop=shop, name=slug.title(),
                                 parent_id=f"{shop}/{parent}" if parent else None))
        print(f"Created {len(edges)} categories for shop {shop!r}")


def demo_moves(tree: NestedSet):
    """Rearrange branches; only the touched ranges are rewritten."""
    print("\n=== Moves ===")
    adapter = tree.adapter

    tree.move_to_child_of(adapter.get("north/chargers"), "north/phones")
    print("Moved chargers under phones")

    tree.move_to_left_of(adapter.get("north/books"), "north/electronics")
    print("Moved books before electronics")

    accessories = adapter.get("north/accessories")
    accessories["parent_id"] = None
    tree.save(accessories)
    print("Saved accessories without a parent: it is now a root")

    print()
    print(render_tree(adapter, tree.config, ("north",)))


def demo_queries(tree: NestedSet):
    """Ancestors, descendants and levels are single range queries."""
    print("\n=== Queries ===")
    chargers = tree.adapter.get("north/chargers")
    path = " > ".join(node.name for node in tree.query.self_and_ancestors(chargers))
    print(f"Breadcrumb: {path}")
    print(f"Level of chargers: {tree.level(chargers)}")

    electronics = tree.adapter.get("north/electronics")
    leaves = [node.name for node in tree.query.leaves(electronics)]
    print(f"Leaf categories under electronics: {', '.join(leaves)}")

    for shop in ("north", "south"):
        stats = get_tree_stats(tree.adapter, tree.config, (shop,))
        print(f"Shop {shop!r}: {stats['total_nodes']} categories, "
              f"{stats['root_count']} roots, {stats['max_level']} levels deep")


def demo_repair(tree: NestedSet):
    """Corrupt a boundary by hand, then rebuild from parent references."""
    print("\n=== Validation and Rebuild ===")
    tree.adapter.update_field("north/laptops", "lft", 1)
    for problem in tree.diagnose(("north",)):
        print(f"  problem: {problem}")

    rebuilt = tree.rebuild(("north",))
    print(f"Rebuilt: {rebuilt}, valid now: {tree.valid(('north',))}")


def main():
    database = sys.argv[1] if len(sys.argv) > 1 else ":memory:"
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = NestedSetConfig.scoped("shop")
    adapter = SQLiteStoreAdapter(config, database, table="categories", record_class=Category)

    print("DazzleNestedSet Category Tree Demo")
    print(f"{'=' * 50}")

    try:
        tree = NestedSet(adapter, config)
        build_catalog(tree)
        demo_moves(tree)
        demo_queries(tree)
        demo_repair(tree)
    finally:
        adapter.close()

    print(f"\n{'=' * 50}")
    print("Demo complete!")


if __name__ == "__main__":
    main()
