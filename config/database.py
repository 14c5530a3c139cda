"""Database configuration and factory for the DTree backing store.

Provides a unified interface for sessions against either SQLite
(development and tests) or PostgreSQL (production) backends.
"""

import os
import logging
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from services.shared.models import Base

logger = logging.getLogger(__name__)


class DatabaseType(str, Enum):
    """Supported database types."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class PostgresConfig(BaseModel):
    """PostgreSQL connection configuration."""
    host: str = "localhost"
    port: int = 5432
    database: str = "livelink"
    user: str = "livelink"
    password: str = ""
    command_timeout: int = 60


class DatabaseConfig(BaseModel):
    """Database configuration."""
    type: DatabaseType = Field(default=DatabaseType.SQLITE, description="Database type")

    # SQLite configuration
    sqlite_path: str = Field(default="dtree.db", description="SQLite database path, or :memory:")

    # PostgreSQL configuration
    postgres: PostgresConfig = Field(default_factory=PostgresConfig, description="PostgreSQL configuration")

    # Connection settings
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        """Create configuration from environment variables."""
        db_type = os.getenv('DTREE_DB_TYPE', 'sqlite').lower()

        if db_type == 'postgresql':
            postgres_config = PostgresConfig(
                host=os.getenv('POSTGRES_HOST', 'localhost'),
                port=int(os.getenv('POSTGRES_PORT', '5432')),
                database=os.getenv('POSTGRES_DB', 'livelink'),
                user=os.getenv('POSTGRES_USER', 'livelink'),
                password=os.getenv('POSTGRES_PASSWORD', ''),
                command_timeout=int(os.getenv('POSTGRES_COMMAND_TIMEOUT', '60'))
            )

            return cls(
                type=DatabaseType.POSTGRESQL,
                postgres=postgres_config,
                pool_size=int(os.getenv('DB_POOL_SIZE', '10')),
                max_overflow=int(os.getenv('DB_MAX_OVERFLOW', '20')),
                pool_timeout=int(os.getenv('DB_POOL_TIMEOUT', '30'))
            )
        else:
            return cls(
                type=DatabaseType.SQLITE,
                sqlite_path=os.getenv('SQLITE_PATH', 'dtree.db'),
                pool_size=int(os.getenv('DB_POOL_SIZE', '10')),
                max_overflow=int(os.getenv('DB_MAX_OVERFLOW', '20')),
                pool_timeout=int(os.getenv('DB_POOL_TIMEOUT', '30'))
            )

    def get_url(self) -> str:
        """Get the SQLAlchemy database URL."""
        if self.type == DatabaseType.POSTGRESQL:
            pg = self.postgres
            return f"postgresql://{pg.user}:{pg.password}@{pg.host}:{pg.port}/{pg.database}"
        if self.sqlite_path == ":memory:":
            return "sqlite://"
        return f"sqlite:///{self.sqlite_path}"


class DatabaseFactory:
    """Factory for creating database sessions."""

    _instance: Optional['DatabaseFactory'] = None
    _engine: Optional[Engine] = None
    _session_factory: Optional[sessionmaker] = None
    _config: Optional[DatabaseConfig] = None

    def __new__(cls) -> 'DatabaseFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(self, config: Optional[DatabaseConfig] = None, create_tables: bool = False):
        """Initialize the engine based on configuration."""
        if config is None:
            config = DatabaseConfig.from_env()

        self._config = config

        if config.type == DatabaseType.POSTGRESQL:
            logger.info("Initializing PostgreSQL engine")
            self._engine = create_engine(
                config.get_url(),
                pool_size=config.pool_size,
                max_overflow=config.max_overflow,
                pool_timeout=config.pool_timeout,
                pool_pre_ping=True,
                echo=config.echo_sql,
                connect_args={"options": f"-c statement_timeout={config.postgres.command_timeout * 1000}"}
            )
        else:
            logger.info("Initializing SQLite engine")
            self._engine = create_engine(
                config.get_url(),
                echo=config.echo_sql,
                connect_args={"check_same_thread": False}
            )

        if create_tables:
            Base.metadata.create_all(self._engine)

        self._session_factory = sessionmaker(bind=self._engine, autoflush=False)
        logger.info(f"Database engine initialized: {config.type.value}")

    def close(self):
        """Close database connections."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine closed")

    def get_engine(self) -> Engine:
        """Get the current database engine."""
        if self._engine is None:
            raise RuntimeError("Database engine not initialized. Call initialize() first.")
        return self._engine

    def get_session(self) -> Session:
        """Get a new session; the caller closes it."""
        if self._session_factory is None:
            raise RuntimeError("Database engine not initialized. Call initialize() first.")
        return self._session_factory()

    def get_config(self) -> DatabaseConfig:
        """Get the current database configuration."""
        if self._config is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._config

    def is_postgresql(self) -> bool:
        """Check if using PostgreSQL backend."""
        return self._config is not None and self._config.type == DatabaseType.POSTGRESQL

    def is_sqlite(self) -> bool:
        """Check if using SQLite backend."""
        return self._config is not None and self._config.type == DatabaseType.SQLITE


# Global database factory instance
db_factory = DatabaseFactory()


def initialize_database(config: Optional[DatabaseConfig] = None, create_tables: bool = False):
    """Initialize database with configuration."""
    db_factory.initialize(config, create_tables=create_tables)


def get_session() -> Session:
    """Get a new database session."""
    return db_factory.get_session()


def close_database():
    """Close database connections."""
    db_factory.close()
