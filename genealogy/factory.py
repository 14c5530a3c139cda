"""Selects and constructs the configured genealogist implementation."""

import logging
from typing import Dict, Optional, Type, Union

from .base import Genealogist, NodeList, DEFAULT_MAX_CACHE_SIZE, DEFAULT_MIN_CACHE_SIZE
from .batch import BatchGenealogist
from .caching import CachingGenealogist
from .errors import ConfigurationError
from .gateway import ParentLookupGateway
from .hybrid import HybridGenealogist
from .naive import NaiveGenealogist

logger = logging.getLogger(__name__)

GENEALOGISTS: Dict[str, Type[Genealogist]] = {
    NaiveGenealogist.name: NaiveGenealogist,
    CachingGenealogist.name: CachingGenealogist,
    HybridGenealogist.name: HybridGenealogist,
    BatchGenealogist.name: BatchGenealogist,
}

DEFAULT_GENEALOGIST = BatchGenealogist.name


def get_genealogist_class(name: str) -> Type[Genealogist]:
    """Look up a genealogist implementation by name.

    Class names such as ``BatchGenealogist`` are accepted as well.
    """
    key = (name or "").strip().lower()
    if key.endswith("genealogist") and key != "genealogist":
        key = key[:-len("genealogist")]
    try:
        return GENEALOGISTS[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown genealogist {name!r}, expected one of {sorted(GENEALOGISTS)}"
        ) from None


def get_genealogist(name: str, gateway: ParentLookupGateway,
                    included_nodes: NodeList = None,
                    excluded_nodes: NodeList = None,
                    min_cache_size: int = DEFAULT_MIN_CACHE_SIZE,
                    max_cache_size: int = DEFAULT_MAX_CACHE_SIZE,
                    orphan_log_level: Union[int, str] = logging.WARNING) -> Genealogist:
    """Get a new instance of the named genealogist.

    Raises:
        ConfigurationError: If the name is unknown or the cache bounds
            are invalid
    """
    genealogist_class = get_genealogist_class(name)
    genealogist = genealogist_class(
        gateway,
        included_nodes=included_nodes,
        excluded_nodes=excluded_nodes,
        min_cache_size=min_cache_size,
        max_cache_size=max_cache_size,
        orphan_log_level=orphan_log_level,
    )
    logger.info(f"Created {genealogist_class.__name__} ({min_cache_size}..{max_cache_size} cache entries)")
    return genealogist


def genealogist_from_config(config, gateway: ParentLookupGateway,
                            name: Optional[str] = None) -> Genealogist:
    """Get a new genealogist from a :class:`config.genealogy.GenealogistConfig`."""
    return get_genealogist(
        name or config.genealogist,
        gateway,
        included_nodes=config.included_location_nodes,
        excluded_nodes=config.excluded_location_nodes,
        min_cache_size=config.min_cache_size,
        max_cache_size=config.max_cache_size,
        orphan_log_level=config.orphan_log_level,
    )
