"""Configuration module for the DTree connector.

Provides configuration management for the database, the hierarchy
filtering, and the connector YAML file.
"""

from .database import (
    DatabaseConfig,
    DatabaseType,
    DatabaseFactory,
    PostgresConfig,
    db_factory,
    get_session,
    initialize_database,
    close_database
)
from .genealogy import GenealogistConfig
from .connector_loader import ConnectorConfig, DEFAULT_CONFIG

__all__ = [
    'DatabaseConfig',
    'DatabaseType',
    'DatabaseFactory',
    'PostgresConfig',
    'db_factory',
    'get_session',
    'initialize_database',
    'close_database',
    'GenealogistConfig',
    'ConnectorConfig',
    'DEFAULT_CONFIG'
]
