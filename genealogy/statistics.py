"""Statistics for evaluating genealogist cache effectiveness."""

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class GenealogistStatistics:
    """Snapshot of the counters accumulated by one genealogist instance."""

    node_count: int = 0
    query_count: int = 0
    orphan_count: int = 0
    cache_size: int = 0
    included_hits: int = 0
    included_misses: int = 0
    excluded_hits: int = 0
    excluded_misses: int = 0

    @property
    def included_hit_rate(self) -> float:
        """Fraction of included-cache checks that hit."""
        total = self.included_hits + self.included_misses
        if total == 0:
            return 0.0
        return self.included_hits / total

    @property
    def excluded_hit_rate(self) -> float:
        """Fraction of excluded-cache checks that hit."""
        total = self.excluded_hits + self.excluded_misses
        if total == 0:
            return 0.0
        return self.excluded_hits / total

    def since(self, earlier: 'GenealogistStatistics') -> 'GenealogistStatistics':
        """Get the counts accumulated after an earlier snapshot.

        The cache size is a level rather than a count, so the current
        value is kept.
        """
        return GenealogistStatistics(
            node_count=self.node_count - earlier.node_count,
            query_count=self.query_count - earlier.query_count,
            orphan_count=self.orphan_count - earlier.orphan_count,
            cache_size=self.cache_size,
            included_hits=self.included_hits - earlier.included_hits,
            included_misses=self.included_misses - earlier.included_misses,
            excluded_hits=self.excluded_hits - earlier.excluded_hits,
            excluded_misses=self.excluded_misses - earlier.excluded_misses,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = asdict(self)
        result['included_hit_rate'] = self.included_hit_rate
        result['excluded_hit_rate'] = self.excluded_hit_rate
        return result

    def __str__(self) -> str:
        return (
            f"nodes: {self.node_count}, queries: {self.query_count}, "
            f"orphans: {self.orphan_count}, cache: {self.cache_size} entries, "
            f"included: ( {self.included_hits} hits, {self.included_misses} misses ), "
            f"excluded: ( {self.excluded_hits} hits, {self.excluded_misses} misses )"
        )
