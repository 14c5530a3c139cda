#!/usr/bin/env python3
"""
Seed a DTree hierarchy for local testing of the genealogists.
Creates either the small sample hierarchy or a random tree of a given size.
"""

import os
import sys
import random
import argparse
import logging
from datetime import datetime, timedelta
from typing import List, Tuple

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import DatabaseConfig, DatabaseType, db_factory, initialize_database, close_database
from observability.logging import setup_logging
from services.shared.models import DTreeNode

logger = logging.getLogger(__name__)

# (DataID, ParentID) pairs. Roots 1, 2 and 3; project volume 4 with its
# negated twin under 1.
SAMPLE_HIERARCHY: List[Tuple[int, int]] = [
    (1, -1), (2, -1), (3, -1),
    (10, 1), (20, 2), (30, 3), (31, 3),
    (100, 10), (101, 10), (200, 20),
    (300, 30), (301, 30), (310, 31),
    (1000, 100), (1001, 100), (1010, 101),
    (2000, 200), (2001, 200), (2002, 200),
    (3000, 300), (3010, 301), (3100, 310),
    (10100, 1010),
    (4, -1), (-4, 1), (40, -4), (400, 40),
]


def random_hierarchy(size: int, roots: int = 3, seed: int = 0) -> List[Tuple[int, int]]:
    """Build a random tree where every node's parent was created before it."""
    rng = random.Random(seed)
    nodes = [(node_id, -1) for node_id in range(1, roots + 1)]
    for node_id in range(roots + 1, size + 1):
        parent_id = rng.randint(1, node_id - 1)
        nodes.append((node_id, parent_id))
    return nodes


class DTreeSeeder:
    """Writes DTree rows through the configured database."""

    def __init__(self, db_path: str):
        self.config = DatabaseConfig(type=DatabaseType.SQLITE, sqlite_path=db_path)

    def initialize(self):
        """Create the engine and the DTree table."""
        initialize_database(self.config, create_tables=True)

    def seed(self, nodes: List[Tuple[int, int]]) -> int:
        """Replace the DTree contents with the given nodes."""
        start = datetime(2020, 1, 1)
        session = db_factory.get_session()
        try:
            session.query(DTreeNode).delete()
            for index, (data_id, parent_id) in enumerate(nodes):
                session.add(DTreeNode(
                    data_id=data_id,
                    parent_id=parent_id,
                    name=f"Node {data_id}",
                    modify_date=start + timedelta(minutes=index)
                ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.info(f"Seeded {len(nodes)} DTree nodes into {self.config.sqlite_path}")
        return len(nodes)

    def cleanup(self):
        close_database()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a DTree hierarchy into SQLite")
    parser.add_argument("--db", required=True, help="SQLite database path")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--sample", action="store_true", help="Seed the sample hierarchy (default)")
    group.add_argument("--random", type=int, metavar="N", help="Seed a random tree of N nodes")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for --random")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main seeding function."""
    args = parse_args(argv)
    setup_logging(level=args.log_level)

    if args.random is not None:
        if args.random < 1:
            print("❌ --random needs a positive node count", file=sys.stderr)
            return 2
        nodes = random_hierarchy(args.random, seed=args.seed)
    else:
        nodes = SAMPLE_HIERARCHY

    seeder = DTreeSeeder(args.db)
    try:
        seeder.initialize()
        count = seeder.seed(nodes)
        print(f"✅ Seeded {count} nodes into {args.db}")
    finally:
        seeder.cleanup()
    return 0


if __name__ == "__main__":
    sys.exit(main())
