"""Genealogist that caches the decision for every node it visits."""

from typing import Sequence, Set

from .base import Genealogist


class CachingGenealogist(Genealogist):
    """Climbs each candidate individually, caching every visited node.

    Once a candidate is decided, the candidate and each ancestor stepped
    through on the way are cached with the same decision, so a later
    candidate sharing any of those ancestors stops there. Sibling
    candidates are still looked up separately.
    """

    name = "caching"

    def match_descendants(self, candidates: Sequence[int], descendants: Set[int]) -> None:
        for matching_id in candidates:
            self.climb(matching_id, matching_id, [matching_id], descendants)
