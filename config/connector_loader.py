"""Configuration loader for connector settings."""

import os
import copy
import logging
from typing import Dict, Any, Optional
from pathlib import Path

import yaml

from .database import DatabaseConfig
from .genealogy import GenealogistConfig
from genealogy.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    'genealogy': {
        'genealogist': 'batch',
        'included_location_nodes': '',
        'excluded_location_nodes': '',
        'min_cache_size': 1000,
        'max_cache_size': 32000,
        'orphan_log_level': 'WARNING'
    },
    'database': {
        'type': 'sqlite',
        'sqlite_path': 'dtree.db'
    },
    'logging': {
        'level': 'INFO',
        'format': 'text'
    },
    'monitoring': {
        'collect_metrics': True
    }
}


class ConnectorConfig:
    """Connector configuration manager."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config = self._load_config()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        # Look for config file in multiple locations
        possible_paths = [
            os.environ.get('DTREE_CONNECTOR_CONFIG'),
            os.path.join(os.getcwd(), 'config', 'connector_config.yaml'),
            os.path.join(Path(__file__).parent, 'connector_config.yaml'),
            os.path.join(os.path.expanduser('~'), '.dtree', 'connector_config.yaml')
        ]

        for path in possible_paths:
            if path and os.path.exists(path):
                return path

        # Return the expected path even if it doesn't exist
        return os.path.join(Path(__file__).parent, 'connector_config.yaml')

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults."""
        config = copy.deepcopy(DEFAULT_CONFIG)

        if not os.path.exists(self.config_path):
            logger.info(f"Connector config file not found at {self.config_path}, using defaults")
            return config

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load connector config from {self.config_path}: {e}"
            ) from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Connector config at {self.config_path} must be a mapping"
            )

        logger.info(f"Loaded connector config from {self.config_path}")
        return self._deep_merge(config, file_config)

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def genealogist_config(self) -> GenealogistConfig:
        """Get the validated hierarchy filtering settings.

        Raises:
            ConfigurationError: If the genealogy section is invalid
        """
        return GenealogistConfig.from_dict(self.get('genealogy', {}))

    def database_config(self) -> DatabaseConfig:
        """Get the backing store settings."""
        try:
            return DatabaseConfig(**self.get('database', {}))
        except ValueError as e:
            raise ConfigurationError(f"Invalid database configuration: {e}") from e

    def get_log_level(self) -> str:
        return str(self.get('logging.level', 'INFO')).upper()

    def get_log_format(self) -> str:
        return self.get('logging.format', 'text')

    def should_collect_metrics(self) -> bool:
        """Check if metrics collection is enabled."""
        return self.get('monitoring.collect_metrics', True)

    def reload(self):
        """Reload configuration from file."""
        self._config = self._load_config()
