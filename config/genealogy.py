"""Genealogist configuration.

Validates the hierarchy-filtering settings of a connector eagerly, so that
bad cache bounds or an unknown implementation fail at startup instead of
in the middle of a traversal.
"""

import os
import logging
from typing import Any, Dict

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from genealogy.errors import ConfigurationError
from genealogy.factory import DEFAULT_GENEALOGIST, get_genealogist_class

logger = logging.getLogger(__name__)


class GenealogistConfig(BaseModel):
    """Hierarchy filtering configuration."""
    genealogist: str = Field(default=DEFAULT_GENEALOGIST, description="Genealogist implementation name")
    included_location_nodes: str = Field(default="", description="Comma-separated included node IDs")
    excluded_location_nodes: str = Field(default="", description="Comma-separated excluded node IDs")
    min_cache_size: int = Field(default=1000, description="Size the decision cache shrinks to on eviction")
    max_cache_size: int = Field(default=32000, description="Maximum size of the decision cache")
    orphan_log_level: str = Field(default="WARNING", description="Logging level for orphan nodes")

    @field_validator('genealogist')
    @classmethod
    def _known_genealogist(cls, value: str) -> str:
        get_genealogist_class(value)
        return value

    @field_validator('min_cache_size', 'max_cache_size')
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("cache size must be positive")
        return value

    @field_validator('orphan_log_level')
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown logging level {value!r}")
        return level

    @model_validator(mode='after')
    def _ordered_bounds(self) -> 'GenealogistConfig':
        if self.min_cache_size > self.max_cache_size:
            raise ValueError(
                f"min_cache_size ({self.min_cache_size}) must not exceed "
                f"max_cache_size ({self.max_cache_size})"
            )
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenealogistConfig':
        """Create configuration from a dictionary, such as a YAML section."""
        try:
            return cls(**(data or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid genealogist configuration: {e}") from e

    @classmethod
    def from_env(cls) -> 'GenealogistConfig':
        """Create configuration from environment variables."""
        data = {
            'genealogist': os.getenv('DTREE_GENEALOGIST', DEFAULT_GENEALOGIST),
            'included_location_nodes': os.getenv('DTREE_INCLUDED_LOCATION_NODES', ''),
            'excluded_location_nodes': os.getenv('DTREE_EXCLUDED_LOCATION_NODES', ''),
            'orphan_log_level': os.getenv('DTREE_LOG_ORPHANS_LEVEL', 'WARNING'),
        }
        try:
            data['min_cache_size'] = int(os.getenv('DTREE_GENEALOGIST_MIN_CACHE_SIZE', '1000'))
            data['max_cache_size'] = int(os.getenv('DTREE_GENEALOGIST_MAX_CACHE_SIZE', '32000'))
        except ValueError as e:
            raise ConfigurationError(f"Invalid genealogist cache size: {e}") from e
        return cls.from_dict(data)
