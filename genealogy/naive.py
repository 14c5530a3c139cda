"""Genealogist that climbs one candidate and one level at a time."""

from typing import Sequence, Set

from .base import Genealogist


class NaiveGenealogist(Genealogist):
    """Looks up each parent for each candidate individually.

    The decision cache is consulted but never written, so every batch
    costs one query per level climbed per candidate. This is the baseline
    the other implementations are checked against.
    """

    name = "naive"
    caches_decisions = False

    def match_descendants(self, candidates: Sequence[int], descendants: Set[int]) -> None:
        for matching_id in candidates:
            self.climb(matching_id, matching_id, [], descendants)
