"""Node identifiers and location-node parsing for the DTree hierarchy."""

import re
import logging
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

# ParentID of the top-level nodes in DTree.
NO_PARENT = -1

# Separators accepted in the includedLocationNodes/excludedLocationNodes values.
_NODE_SEPARATORS = re.compile(r"[:;,. \t\n()\[\]\"']+")


class Decision(str, Enum):
    """Containment decision for a node."""
    INCLUDED = "included"
    EXCLUDED = "excluded"


def _tokens(nodes: Optional[str]) -> List[str]:
    if not nodes:
        return []
    return [token for token in _NODE_SEPARATORS.split(nodes) if token]


def _parse_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


def get_ancestor_set(nodes: Optional[str]) -> FrozenSet[int]:
    """Parse a location-node list into a set including the negated ids.

    Projects, discussions, channels and task lists are volumes: their
    contents have a ParentID that is the negation of the container's
    DataID. Adding ``-n`` for every ``n`` catches those, and negative ids
    of ordinary containers do not exist, so there are no false positives.

    Tokens that are not integers are skipped. The root sentinel is never
    a member, since reaching the top of the hierarchy is decided by the
    default rule instead.
    """
    members = set()
    for token in _tokens(nodes):
        node_id = _parse_int(token)
        if node_id is None:
            logger.debug(f"DESCENDANTS: Ignoring non-numeric location node {token!r}")
            continue
        members.add(node_id)
        members.add(-node_id)
    members.discard(NO_PARENT)
    return frozenset(members)


def get_ancestor_nodes(start_nodes: Optional[str]) -> str:
    """Duplicate the entries to include their negations: (a) becomes (a,-a).

    Non-numeric tokens are passed through unchanged, as the result is
    used verbatim in SQL predicates.
    """
    entries = []
    for token in _tokens(start_nodes):
        entries.append(token)
        node_id = _parse_int(token)
        if node_id is not None:
            entries.append(str(-node_id))
    return ",".join(entries)


def join_ids(ids: Iterable[int]) -> str:
    """Render ids as a comma-separated list."""
    return ",".join(str(node_id) for node_id in ids)


def split_ids(ids: Optional[str]) -> List[int]:
    """Parse a comma-separated list of ids, the inverse of :func:`join_ids`."""
    if not ids:
        return []
    return [int(node_id) for node_id in ids.split(",") if node_id.strip()]
