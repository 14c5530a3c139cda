"""Bounded cache of containment decisions."""

import logging
from typing import Dict, Iterable, Optional, Any

from .errors import ConfigurationError
from .nodes import Decision

logger = logging.getLogger(__name__)


class DecisionCache:
    """In-memory node id -> Decision map with bulk eviction.

    The cache grows to ``max_size`` entries. Recording a new entry into a
    full cache drops all but the ``min_size - 1`` most recently recorded
    entries in one step, so it starts over at ``min_size`` entries. This
    is not a sophisticated MRU policy, but a cold period after an
    eviction is cheap compared to tracking recency on every lookup.

    Hit and miss counts are kept by the genealogists, which track the
    included and excluded checks separately.
    """

    def __init__(self, min_size: int, max_size: int):
        if not isinstance(min_size, int) or min_size <= 0:
            raise ConfigurationError(f"Cache min_size must be a positive integer: {min_size!r}")
        if not isinstance(max_size, int) or max_size <= 0:
            raise ConfigurationError(f"Cache max_size must be a positive integer: {max_size!r}")
        if min_size > max_size:
            raise ConfigurationError(
                f"Cache min_size ({min_size}) must not exceed max_size ({max_size})"
            )
        self.min_size = min_size
        self.max_size = max_size
        self.evictions = 0
        self._store: Dict[int, Decision] = {}

    def lookup(self, node_id: int) -> Optional[Decision]:
        """Get the cached decision for a node, or None."""
        return self._store.get(node_id)

    def record(self, node_id: int, decision: Decision) -> None:
        """Cache the decision for a node, evicting first if the cache is full."""
        if node_id not in self._store and len(self._store) >= self.max_size:
            self._evict()
        self._store[node_id] = decision

    def record_all(self, node_ids: Iterable[int], decision: Decision) -> None:
        """Cache the same decision for each of the given nodes."""
        for node_id in node_ids:
            self.record(node_id, decision)

    def _evict(self) -> None:
        keep = self.min_size - 1
        if keep > 0:
            retained = list(self._store.items())[-keep:]
        else:
            retained = []
        logger.debug(
            f"CACHE: evicting {len(self._store) - len(retained)} of {len(self._store)} entries"
        )
        self._store = dict(retained)
        self.evictions += 1

    def clear(self) -> None:
        """Clear all cache entries."""
        self._store.clear()

    def size(self) -> int:
        """Get current cache size."""
        return len(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._store

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            'size': len(self._store),
            'min_size': self.min_size,
            'max_size': self.max_size,
            'evictions': self.evictions,
            'utilization': len(self._store) / self.max_size
        }

    def __repr__(self) -> str:
        return f"DecisionCache({sorted(self._store.items())})"
