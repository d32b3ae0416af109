"""SQLAlchemy models package."""

from workforce.models.base import Base
from workforce.models.organization import (
    Department,
    Employee,
    Project,
    project_team_members,
)

__all__ = [
    "Base",
    "Department",
    "Employee",
    "Project",
    "project_team_members",
]
