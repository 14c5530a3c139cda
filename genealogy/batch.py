"""Genealogist that climbs the whole batch one hierarchy level at a time."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Set, Tuple

from .hybrid import HybridGenealogist

logger = logging.getLogger(__name__)


@dataclass
class FrontierNode:
    """Knowledge about the undecided descendants of a single ancestor."""

    # The candidates whose climb currently passes through this ancestor.
    matches: List[int] = field(default_factory=list)

    # The matches and the ancestors between them and this node, inclusive.
    possibles: List[int] = field(default_factory=list)


class Frontier:
    """The highest known ancestors whose status is unknown.

    Each entry maps an ancestor id to the candidates climbing through
    it. A frontier covers one level of the walk; the next level is
    merged into a fresh frontier, so entries without a parent row (the
    orphans) are left behind in the old one.
    """

    def __init__(self):
        self._nodes: Dict[int, FrontierNode] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get(self, node_id: int) -> FrontierNode:
        return self._nodes[node_id]

    def items(self) -> Iterator[Tuple[int, FrontierNode]]:
        return iter(list(self._nodes.items()))

    def parent_ids(self) -> List[int]:
        """Get the ids of the current frontier nodes."""
        return list(self._nodes)

    def remove(self, node_id: int) -> FrontierNode:
        return self._nodes.pop(node_id)

    def put(self, matching_id: int, parent_id: int) -> None:
        """Insert a candidate under its parent.

        Used to build the initial frontier from the candidates.
        """
        node = self._nodes.get(parent_id)
        if node is None:
            node = FrontierNode(possibles=[matching_id, parent_id])
            self._nodes[parent_id] = node
        else:
            node.possibles.append(matching_id)
        node.matches.append(matching_id)

    def merge(self, object_id: int, parent_id: int, target: "Frontier") -> None:
        """Move a node up one level, into its parent's node in the target.

        The old node is removed from this frontier, so that whatever is
        left after all of the merges is an orphan.
        """
        old = self._nodes.pop(object_id)
        node = target._nodes.get(parent_id)
        if node is None:
            old.possibles.append(parent_id)
            target._nodes[parent_id] = old
        else:
            node.possibles.extend(old.possibles)
            node.matches.extend(old.matches)


class BatchGenealogist(HybridGenealogist):
    """Uses one query per hierarchy level for the whole batch.

    The number of queries is bounded by the depth of the deepest
    undecided candidate rather than by the number of candidates. When an
    ancestor is decided, its candidates and every ancestor visited on the
    way to it are cached with the same decision.
    """

    name = "batch"

    def match_descendants(self, candidates: Sequence[int], descendants: Set[int]) -> None:
        # First, check the candidates themselves.
        undecided = self.undecided(candidates, descendants)
        if not undecided:
            return

        # Next, get all of the parents of the remaining nodes at once,
        # and then loop, looking up the further ancestors one level at
        # a time.
        frontier = Frontier()
        found = set()
        for matching_id, parent_id in self.get_parents(undecided):
            found.add(matching_id)
            frontier.put(matching_id, parent_id)
        for matching_id in undecided:
            if matching_id not in found:
                self.log_orphans([matching_id], matching_id)

        while True:
            logger.debug(f"DESCENDANTS: Checking parents: {frontier.parent_ids()}")

            # Check each ancestor in the current frontier, removing the
            # ones that are decided.
            for parent_id, node in frontier.items():
                if self.match_parent(node.matches, parent_id, node.possibles, descendants):
                    frontier.remove(parent_id)

            if not frontier:
                break

            # Get the next level of parents. We merge into a new frontier
            # so that orphan nodes (with missing parents) are left behind
            # rather than staying in the frontier forever.
            next_frontier = Frontier()
            for object_id, parent_id in self.get_parents(frontier.parent_ids()):
                frontier.merge(object_id, parent_id, next_frontier)
            for parent_id, node in frontier.items():
                self.log_orphans(node.matches, parent_id)
            frontier = next_frontier
