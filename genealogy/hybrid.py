"""Genealogist that batches the first lookup and climbs individually after that."""

from typing import List, Sequence, Set

from .base import Genealogist


class HybridGenealogist(Genealogist):
    """Uses one query to get the parents of all the undecided candidates.

    The subsequent parents are looked up individually. Once a candidate
    is decided, it is cached along with the ancestors visited, so a
    repeated batch is decided by the self-check. Orphans are never
    cached.
    """

    name = "hybrid"

    def undecided(self, candidates: Sequence[int], descendants: Set[int]) -> List[int]:
        """Check the candidates themselves, returning those still unknown."""
        return [
            matching_id for matching_id in dict.fromkeys(candidates)
            if not self.match_parent((matching_id,), matching_id, (), descendants)
        ]

    def match_descendants(self, candidates: Sequence[int], descendants: Set[int]) -> None:
        undecided = self.undecided(candidates, descendants)
        if not undecided:
            return

        found = set()
        for matching_id, parent_id in self.get_parents(undecided):
            found.add(matching_id)
            self.climb(matching_id, parent_id, [matching_id, parent_id], descendants)

        for matching_id in undecided:
            if matching_id not in found:
                self.log_orphans([matching_id], matching_id)
