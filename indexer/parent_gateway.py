"""SQLAlchemy parent lookups against the DTree backing store."""

import logging
from typing import Iterable, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from genealogy.errors import BackingStoreError
from genealogy.gateway import ParentRow
from genealogy.nodes import NO_PARENT, split_ids
from services.shared.models import DTreeNode

logger = logging.getLogger(__name__)


class SqlParentGateway:
    """Parent lookups over a SQLAlchemy session bound to the DTree table.

    Implements :class:`genealogy.gateway.ParentLookupGateway`.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_parent(self, node_id: int) -> Optional[int]:
        """Get the ParentID of the given node.

        The query also asks for the parent of the negated node, to handle
        volumes such as projects. It can return 0, 1, or 2 rows, since we
        are asking for the parents of two nodes, one or both of which
        might not exist.
        """
        stmt = select(DTreeNode.parent_id).where(
            DTreeNode.data_id.in_([node_id, -node_id])
        )
        try:
            parents = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise BackingStoreError(
                f"Parent lookup failed for node {node_id}: {e}", [node_id]
            ) from e

        if len(parents) == 0:
            # The nodes do not exist.
            return None
        if len(parents) == 1:
            return parents[0]
        if len(parents) == 2:
            # Both nodes exist, so one is a volume with a parent of -1.
            # Return the other one.
            return parents[0] if parents[0] != NO_PARENT else parents[1]
        raise BackingStoreError(
            f"Expected at most 2 parent rows for node {node_id}, got {len(parents)}",
            [node_id]
        )

    def get_parents(self, node_ids: Union[str, Iterable[int]]) -> List[ParentRow]:
        """Get the ParentIDs of the given nodes.

        A correlated subquery finds the stepparent of volume nodes: when
        ParentID(DataID) is -1, ParentID(-DataID) is the real container.
        """
        if isinstance(node_ids, str):
            ids = split_ids(node_ids)
        else:
            ids = list(node_ids)
        if not ids:
            return []

        step = aliased(DTreeNode)
        step_parent = (
            select(step.parent_id)
            .where(step.data_id == -DTreeNode.data_id)
            .where(step.parent_id != NO_PARENT)
            .correlate(DTreeNode)
            .scalar_subquery()
            .label('StepParentID')
        )
        stmt = select(DTreeNode.data_id, DTreeNode.parent_id, step_parent).where(
            DTreeNode.data_id.in_(ids)
        )
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as e:
            raise BackingStoreError(
                f"Parent lookup failed for {len(ids)} nodes: {e}", ids
            ) from e

        parents = []
        for data_id, parent_id, step_parent_id in rows:
            if parent_id == NO_PARENT and step_parent_id is not None:
                logger.debug(
                    f"DESCENDANTS: Substituting {step_parent_id} as stepparent for {data_id}"
                )
                parent_id = step_parent_id
            parents.append(ParentRow(data_id, parent_id))
        return parents
