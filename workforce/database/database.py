"""Database connection and session management."""

import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from workforce.models.base import Base


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    database: str = "workforce"
    username: str = "postgres"
    password: str = ""
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: float = 30.0
    echo: bool = False
    create_schema: bool = False
    url_override: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "workforce"),
            username=os.getenv("DB_USER", "postgres"),
            password=os.getenv("DB_PASSWORD", ""),
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
            pool_timeout=float(os.getenv("DB_POOL_TIMEOUT", "30")),
            echo=os.getenv("DB_ECHO", "false").lower() == "true",
            create_schema=os.getenv("DB_CREATE_SCHEMA", "false").lower() == "true",
            url_override=os.getenv("DATABASE_URL") or None,
        )

    @property
    def url(self) -> str:
        """Generate SQLAlchemy database URL."""
        if self.url_override:
            return self.url_override
        return f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def describe(self) -> str:
        """Connection target without credentials, for logging."""
        if self.url_override:
            return self.url_override.split("@")[-1]
        return f"{self.host}:{self.port}/{self.database}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    """
    Create a SQLAlchemy engine for the given configuration.

    SQLite engines get foreign key enforcement switched on; in-memory
    SQLite shares a single connection so every session sees the same data.
    """
    if config.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in config.url or config.url.rstrip("/").endswith("sqlite:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(config.url, echo=config.echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        echo=config.echo,
        pool_pre_ping=True,  # Verify connections before use
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create the session factory bound to ``engine``."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provide a transactional session.

    Commits on success, rolls back on exception.
    """
    session = session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """
    Initialize database by creating all tables.

    Should only be used in development/testing.
    Use Alembic migrations for production.
    """
    import workforce.models  # noqa: F401  registers every table on Base.metadata

    Base.metadata.create_all(bind=engine)


def dispose_engine(engine: Optional[Engine]) -> None:
    """Dispose of the engine's connection pool."""
    if engine is not None:
        engine.dispose()
