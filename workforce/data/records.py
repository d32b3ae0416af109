"""Plain records exchanged between repositories and their callers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"


class ProjectPriority(str, Enum):
    """Priority level of a project."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass
class DepartmentRecord:
    """A department row."""

    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class EmployeeRecord:
    """An employee row. ``department_id`` references a department."""

    id: str
    name: str
    email: str
    department_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department_id": self.department_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class ProjectRecord:
    """A project row with the ids of its team members."""

    id: str
    name: str
    start_date: date
    end_date: date
    budget: float
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    priority: ProjectPriority = ProjectPriority.MEDIUM
    team_member_ids: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "budget": self.budget,
            "team_member_ids": list(self.team_member_ids),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
