"""Construction-time selection of the repository backend."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from workforce.config.settings import Settings
from workforce.data.memory_repository import (
    InMemoryDepartmentRepository,
    InMemoryEmployeeRepository,
    InMemoryProjectRepository,
    InMemoryStore,
)
from workforce.data.repositories import (
    DepartmentRepository,
    EmployeeRepository,
    ProjectRepository,
)
from workforce.data.sql_repository import (
    SqlDepartmentRepository,
    SqlEmployeeRepository,
    SqlProjectRepository,
)
from workforce.database.database import (
    DatabaseConfig,
    create_engine_from_config,
    create_session_factory,
    dispose_engine,
    init_db,
)

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    """The repositories of one store, plus the engine backing them if any."""

    departments: DepartmentRepository
    employees: EmployeeRepository
    projects: ProjectRepository
    engine: Optional[Engine] = None

    def close(self) -> None:
        """Release store resources."""
        dispose_engine(self.engine)


def build_memory_repositories(store: Optional[InMemoryStore] = None) -> Repositories:
    """Repositories over an in-process store."""
    store = store or InMemoryStore()
    return Repositories(
        departments=InMemoryDepartmentRepository(store),
        employees=InMemoryEmployeeRepository(store),
        projects=InMemoryProjectRepository(store),
    )


def build_sql_repositories(config: DatabaseConfig) -> Repositories:
    """Repositories over a relational store reached through SQLAlchemy."""
    engine = create_engine_from_config(config)
    if config.create_schema:
        init_db(engine)
    session_factory = create_session_factory(engine)
    return Repositories(
        departments=SqlDepartmentRepository(session_factory),
        employees=SqlEmployeeRepository(session_factory),
        projects=SqlProjectRepository(session_factory),
        engine=engine,
    )


def build_repositories(settings: Settings) -> Repositories:
    """Build the repositories selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        logger.info("Using in-memory store")
        return build_memory_repositories()

    logger.info(f"Using relational store at {settings.database.describe()}")
    return build_sql_repositories(settings.database)
