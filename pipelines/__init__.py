"""Pipelines package for the DTree connector.

Provides traversal scope filtering over the DTree hierarchy.
"""

from .traversal import ScopeFilter, descendants_predicate

__all__ = [
    'ScopeFilter',
    'descendants_predicate'
]
