"""Traversal scope filtering for the DTree connector.

Restricts each batch of traversal candidates to the nodes under the
included location nodes, and not under the excluded ones, before their
rows are loaded.
"""

import time
import logging
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from genealogy.base import Genealogist
from genealogy.errors import BackingStoreError
from genealogy.nodes import get_ancestor_nodes, split_ids
from observability.logging import log_performance
from observability.prometheus_metrics import record_genealogist_metrics
from services.shared.models import DTreeNode

logger = logging.getLogger(__name__)


def descendants_predicate(start_nodes: str, candidates_predicate: str) -> str:
    """Build a SQL condition matching the descendants of the start nodes.

    The start nodes themselves match too. This is the condition used
    when the hierarchy is resolved by the database, through the
    DTreeAncestors table, rather than by a genealogist.

    Args:
        start_nodes: A comma-separated string of node ids
        candidates_predicate: A SQL condition matching the candidates

    Returns:
        A SQL conditional expression string
    """
    ancestor_nodes = get_ancestor_nodes(start_nodes)
    return (
        f"(DataID in ({start_nodes}) or DataID in "
        f"(select DataID from DTreeAncestors where {candidates_predicate} "
        f"and AncestorID in ({ancestor_nodes})))"
    )


class ScopeFilter:
    """Applies a genealogist to batches of traversal candidates."""

    def __init__(self, genealogist: Genealogist, session: Session,
                 collect_metrics: bool = True):
        self.genealogist = genealogist
        self.session = session
        self.collect_metrics = collect_metrics

    def filter_candidates(self, candidate_ids: Iterable[int]) -> List[int]:
        """Get the in-scope candidates, in their original order.

        Raises:
            BackingStoreError: If a parent lookup fails
        """
        candidates = [int(candidate) for candidate in candidate_ids]
        before = self.genealogist.statistics()
        start_time = time.perf_counter()

        descendants = self.genealogist.resolve(candidates)

        duration = time.perf_counter() - start_time
        matching = split_ids(descendants)
        logger.debug(
            f"Scope filter kept {len(matching)} of {len(candidates)} candidates "
            f"in {duration * 1000:.1f}ms"
        )

        if self.collect_metrics:
            record_genealogist_metrics(
                self.genealogist.name,
                self.genealogist.statistics().since(before),
                len(candidates),
                len(matching),
                duration,
            )
        return matching

    @log_performance(threshold_ms=5000.0)
    def matching_nodes(self, candidate_ids: Iterable[int]) -> List[DTreeNode]:
        """Load the rows of the in-scope candidates.

        Rows are ordered by modification date and then id, the order in
        which the traversal checkpoints them.
        """
        matching = self.filter_candidates(candidate_ids)
        if not matching:
            return []

        stmt = (
            select(DTreeNode)
            .where(DTreeNode.data_id.in_(matching))
            .order_by(DTreeNode.modify_date, DTreeNode.data_id)
        )
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise BackingStoreError(
                f"Failed to load {len(matching)} matching nodes: {e}", matching
            ) from e
