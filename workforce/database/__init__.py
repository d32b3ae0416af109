"""Database package for connection and session management."""

from workforce.database.database import (
    DatabaseConfig,
    create_engine_from_config,
    create_session_factory,
    dispose_engine,
    init_db,
    session_scope,
)

__all__ = [
    "DatabaseConfig",
    "create_engine_from_config",
    "create_session_factory",
    "dispose_engine",
    "init_db",
    "session_scope",
]
