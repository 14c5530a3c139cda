"""Shared fixtures for the DTree connector tests.

Builds DTree hierarchies in an in-memory SQLite database through
SQLAlchemy, so that the genealogists run against the real parent
lookup queries.
"""

import os
import sys
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from genealogy import ParentRow
from indexer.parent_gateway import SqlParentGateway
from services.shared.models import Base, DTreeNode

STRATEGIES = ["naive", "caching", "hybrid", "batch"]

# p -> c means that c's parent is p.
#   roots 1, 2, 3
#   10->1, 20->2, 30->3, 31->3
#   100->10, 101->10, 200->20, 300->30, 301->30, 310->31
#   1000->100, 1001->100, 1010->101, 2000->200, 2001->200, 2002->200
#   3000->300, 3010->301, 3100->310, 10100->1010
TREE_NODES: List[Tuple[int, int]] = [
    (1, -1), (2, -1), (3, -1),
    (10, 1), (20, 2), (30, 3), (31, 3),
    (100, 10), (101, 10), (200, 20),
    (300, 30), (301, 30), (310, 31),
    (1000, 100), (1001, 100), (1010, 101),
    (2000, 200), (2001, 200), (2002, 200),
    (3000, 300), (3010, 301), (3100, 310),
    (10100, 1010),
]

TREE_CANDIDATES = [1000, 1001, 1010, 2000, 2001, 2002, 3000, 3010, 3100, 10100]

# Volume 40 appears as 40 under 4 and as the root -40; its contents point at -40.
STEPPARENT_NODES = [(4, -1), (40, 4), (-40, -1), (400, -40), (4000, 400)]

# 40 and 50 are missing, so 400, 4000, 500 and 5000 are orphans.
ORPHAN_NODES = [(4, -1), (400, 40), (4000, 400), (5, -1), (500, 50), (5000, 500)]


class DictGateway:
    """Parent lookups over a dict, counting the calls."""

    def __init__(self, nodes: Iterable[Tuple[int, int]]):
        self.parents: Dict[int, int] = dict(nodes)
        self.get_parent_calls = 0
        self.get_parents_calls = 0

    def get_parent(self, node_id: int) -> Optional[int]:
        self.get_parent_calls += 1
        return self.parents.get(node_id)

    def get_parents(self, node_ids) -> List[ParentRow]:
        self.get_parents_calls += 1
        return [
            ParentRow(node_id, self.parents[node_id])
            for node_id in node_ids if node_id in self.parents
        ]


@pytest.fixture
def engine():
    """In-memory SQLite engine with the DTree table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def make_session(engine):
    """Factory for sessions over a DTree seeded with the given rows."""
    factory = sessionmaker(bind=engine)
    sessions = []

    def _make(nodes: Iterable[Tuple[int, int]]):
        session = factory()
        session.add_all(
            DTreeNode(data_id=data_id, parent_id=parent_id, name=f"Node {data_id}")
            for data_id, parent_id in nodes
        )
        session.commit()
        sessions.append(session)
        return session

    yield _make

    for session in sessions:
        session.close()


@pytest.fixture
def tree_session(make_session):
    return make_session(TREE_NODES)


@pytest.fixture
def tree_gateway(tree_session):
    """SQL gateway over the sample hierarchy."""
    return SqlParentGateway(tree_session)


@pytest.fixture
def make_gateway(make_session):
    """Factory for SQL gateways over the given rows."""
    def _make(nodes: Iterable[Tuple[int, int]]):
        return SqlParentGateway(make_session(nodes))
    return _make
