"""Base class for the genealogists, which know about the node hierarchy in DTree."""

import logging
import threading
from typing import Iterable, List, Optional, Sequence, Set, Union

from .cache import DecisionCache
from .errors import ConfigurationError
from .gateway import ParentLookupGateway, ParentRow
from .nodes import NO_PARENT, Decision, get_ancestor_set, join_ids
from .statistics import GenealogistStatistics

logger = logging.getLogger(__name__)

NodeList = Union[str, Iterable[int], None]

DEFAULT_MIN_CACHE_SIZE = 1000
DEFAULT_MAX_CACHE_SIZE = 32000

# The logging level for orphan nodes in the DTree hierarchy.
LOG_ORPHANS_LEVEL = logging.WARNING


def resolve_log_level(level: Union[int, str]) -> int:
    """Convert a logging level name or number to a number."""
    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown logging level: {level!r}")
    return numeric_level


def _node_set(nodes: NodeList):
    if nodes is None or isinstance(nodes, str):
        return get_ancestor_set(nodes)
    return get_ancestor_set(join_ids(nodes))


class Genealogist:
    """Finds the candidates that are descendants of the included nodes.

    A candidate is included if the closest node on its ancestor chain
    (the candidate itself first) that is a member of either the included
    or the excluded set is an included node. If the chain reaches the top
    of the hierarchy without finding either, the candidate is included
    only if no included nodes are configured.

    Subclasses implement :meth:`match_descendants`, which walks the
    hierarchy using :meth:`match_parent`, :meth:`get_parent` and
    :meth:`get_parents`.
    """

    name = "genealogist"

    # Whether decisions for visited ancestors are written to the cache.
    caches_decisions = True

    def __init__(self, gateway: ParentLookupGateway,
                 included_nodes: NodeList = None,
                 excluded_nodes: NodeList = None,
                 min_cache_size: int = DEFAULT_MIN_CACHE_SIZE,
                 max_cache_size: int = DEFAULT_MAX_CACHE_SIZE,
                 orphan_log_level: Union[int, str] = LOG_ORPHANS_LEVEL):
        """Initialize genealogist.

        Args:
            gateway: Parent lookups against the backing store
            included_nodes: The included location nodes, as a list or a
                comma-separated string
            excluded_nodes: The excluded location nodes, as a list or a
                comma-separated string
            min_cache_size: Size the decision cache shrinks to on eviction
            max_cache_size: Maximum size of the decision cache
            orphan_log_level: Logging level for orphan nodes

        Raises:
            ConfigurationError: If the cache bounds or log level are invalid
        """
        self.gateway = gateway
        self.included_set = _node_set(included_nodes)
        self.excluded_set = _node_set(excluded_nodes)

        # If the included set is empty, then everything that hits the
        # top level without being excluded should be included. If it is
        # not empty, then everything that hits the top level without
        # being included should be excluded.
        self.default_decision = (
            Decision.INCLUDED if not self.included_set else Decision.EXCLUDED
        )
        self.orphan_log_level = resolve_log_level(orphan_log_level)
        self.cache = DecisionCache(min_cache_size, max_cache_size)

        self._lock = threading.Lock()
        self._node_count = 0
        self._query_count = 0
        self._orphan_count = 0
        self._included_hits = 0
        self._included_misses = 0
        self._excluded_hits = 0
        self._excluded_misses = 0

        logger.debug(f"DESCENDANTS: {self.name}: includedSet = {sorted(self.included_set)}")
        logger.debug(f"DESCENDANTS: {self.name}: excludedSet = {sorted(self.excluded_set)}")
        logger.debug(
            f"DESCENDANTS: {self.name}: cache size = {min_cache_size}..{max_cache_size}"
        )

    def decide(self, node_id: int) -> Optional[Decision]:
        """Get the decision known for a node, or None if nothing is known.

        The excluded checks come first, so a node in both sets is excluded.
        """
        if node_id == NO_PARENT:
            return self.default_decision

        cached = self.cache.lookup(node_id)
        if cached is Decision.EXCLUDED:
            self._excluded_hits += 1
            return Decision.EXCLUDED
        self._excluded_misses += 1
        if node_id in self.excluded_set:
            return Decision.EXCLUDED

        if cached is Decision.INCLUDED:
            self._included_hits += 1
            return Decision.INCLUDED
        self._included_misses += 1
        if node_id in self.included_set:
            return Decision.INCLUDED
        return None

    def match_parent(self, matches: Sequence[int], parent_id: int,
                     possibles: Sequence[int], descendants: Set[int]) -> bool:
        """Match the given ancestor against the included and excluded nodes.

        Args:
            matches: The original candidate or candidates
            parent_id: The current ancestor node to match
            possibles: The ancestors visited between the two, cached
                with the decision once one is found
            descendants: Receives the matches if they are included

        Returns:
            True if a decision was found, whether included or excluded,
            or False if nothing is known about ``parent_id``
        """
        decision = self.decide(parent_id)
        if decision is None:
            return False

        logger.debug(
            f"DESCENDANTS: {'Including' if decision is Decision.INCLUDED else 'Excluding'} "
            f"{list(matches)}, found {parent_id} after {list(possibles)}"
        )
        self.remember(possibles, decision)
        if decision is Decision.INCLUDED:
            descendants.update(matches)
        return True

    def remember(self, node_ids: Iterable[int], decision: Decision) -> None:
        """Cache a decision for the visited nodes."""
        if not self.caches_decisions:
            return
        self.cache.record_all(
            (node_id for node_id in node_ids if node_id != NO_PARENT), decision
        )

    def climb(self, matching_id: int, start_id: int, possibles: List[int],
              descendants: Set[int]) -> None:
        """Look up the ancestors of one candidate individually until decided."""
        parent_id = start_id
        while not self.match_parent((matching_id,), parent_id, possibles, descendants):
            parent_id = self.get_parent(matching_id, parent_id)
            if parent_id is None:
                break
            possibles.append(parent_id)

    def get_parent(self, matching_id: int, node_id: int) -> Optional[int]:
        """Get the parent of a node, logging the candidate if it is an orphan."""
        self._query_count += 1
        parent_id = self.gateway.get_parent(node_id)
        if parent_id is None:
            self.log_orphans([matching_id], node_id)
        return parent_id

    def get_parents(self, node_ids: Sequence[int]) -> List[ParentRow]:
        """Get the parents of several nodes with a single query."""
        self._query_count += 1
        return [ParentRow(*row) for row in self.gateway.get_parents(node_ids)]

    def log_orphans(self, orphans: Sequence[int], missing_id: int) -> None:
        """Log orphans discovered in the hierarchy.

        Args:
            orphans: The candidates descended from the missing node
            missing_id: The node with no record in the backing store
        """
        self._orphan_count += len(orphans)
        logger.log(
            self.orphan_log_level,
            f"DESCENDANTS: Excluding {list(orphans)}, ancestor {missing_id} does not exist."
        )

    def match_descendants(self, candidates: Sequence[int], descendants: Set[int]) -> None:
        """Find the included nodes from among the candidates.

        This is the core algorithm behind :meth:`resolve`.

        Args:
            candidates: The candidate node ids
            descendants: Receives the candidates that are included
        """
        raise NotImplementedError

    def matching_descendants(self, candidate_ids: Iterable[int]) -> List[int]:
        """Get the included candidates, in their original order."""
        candidates = [int(candidate) for candidate in candidate_ids]
        with self._lock:
            descendants: Set[int] = set()
            self.match_descendants(candidates, descendants)
            self._node_count += len(candidates)
            logger.debug(f"DESCENDANTS: {self.name}: Query statistics: {self._snapshot()}")

        matching = [candidate for candidate in candidates if candidate in descendants]
        if matching:
            logger.debug(f"DESCENDANTS: Matching descendants: {join_ids(matching)}")
        else:
            logger.debug("DESCENDANTS: No matching descendants.")
        return matching

    def resolve(self, candidate_ids: Iterable[int]) -> str:
        """Get a comma-separated list of the included candidates.

        Raises:
            BackingStoreError: If a parent lookup fails. No partial
                results are returned.
        """
        return join_ids(self.matching_descendants(candidate_ids))

    def _snapshot(self) -> GenealogistStatistics:
        return GenealogistStatistics(
            node_count=self._node_count,
            query_count=self._query_count,
            orphan_count=self._orphan_count,
            cache_size=self.cache.size(),
            included_hits=self._included_hits,
            included_misses=self._included_misses,
            excluded_hits=self._excluded_hits,
            excluded_misses=self._excluded_misses,
        )

    def statistics(self) -> GenealogistStatistics:
        """Get the statistics accumulated by this instance."""
        with self._lock:
            return self._snapshot()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(included={sorted(self.included_set)}, "
            f"excluded={sorted(self.excluded_set)})"
        )
