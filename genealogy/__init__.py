"""Genealogy package.

Decides which nodes of the DTree hierarchy lie under the included
location nodes and not under the excluded ones.
"""

from .nodes import (
    NO_PARENT,
    Decision,
    get_ancestor_set,
    get_ancestor_nodes,
    join_ids,
    split_ids
)
from .errors import GenealogyError, ConfigurationError, BackingStoreError
from .gateway import ParentLookupGateway, ParentRow
from .cache import DecisionCache
from .statistics import GenealogistStatistics
from .base import Genealogist
from .naive import NaiveGenealogist
from .caching import CachingGenealogist
from .hybrid import HybridGenealogist
from .batch import BatchGenealogist, Frontier, FrontierNode
from .factory import (
    GENEALOGISTS,
    DEFAULT_GENEALOGIST,
    get_genealogist,
    get_genealogist_class,
    genealogist_from_config
)

__all__ = [
    # Nodes
    'NO_PARENT',
    'Decision',
    'get_ancestor_set',
    'get_ancestor_nodes',
    'join_ids',
    'split_ids',

    # Errors
    'GenealogyError',
    'ConfigurationError',
    'BackingStoreError',

    # Gateway
    'ParentLookupGateway',
    'ParentRow',

    # Cache and statistics
    'DecisionCache',
    'GenealogistStatistics',

    # Genealogists
    'Genealogist',
    'NaiveGenealogist',
    'CachingGenealogist',
    'HybridGenealogist',
    'BatchGenealogist',
    'Frontier',
    'FrontierNode',

    # Factory
    'GENEALOGISTS',
    'DEFAULT_GENEALOGIST',
    'get_genealogist',
    'get_genealogist_class',
    'genealogist_from_config'
]
