"""Repository contracts shared by the SQL and in-memory implementations."""

import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from workforce.data.deadline import Deadline
from workforce.data.records import (
    DepartmentRecord,
    EmployeeRecord,
    ProjectRecord,
    ProjectStatus,
)
from workforce.utils.errors import create_invalid_id_error


def parse_identifier(value: str, resource_type: str, field: str = "id") -> str:
    """
    Return the canonical string form of a UUID identifier.

    Raises ValidationError when ``value`` is not a well-formed UUID.
    """
    try:
        return str(uuid.UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        raise create_invalid_id_error(resource_type, field, value) from None


def new_identifier() -> str:
    """Generate a new random identifier."""
    return str(uuid.uuid4())


class DepartmentRepository(ABC):
    """Data access for departments. Does not cascade on delete."""

    @abstractmethod
    def save(self, department: DepartmentRecord, deadline: Optional[Deadline] = None) -> None:
        """Insert a new department row."""

    @abstractmethod
    def find_by_id(self, department_id: str, deadline: Optional[Deadline] = None) -> DepartmentRecord:
        """Return the department or raise NotFoundError."""

    @abstractmethod
    def find_all(self, deadline: Optional[Deadline] = None) -> List[DepartmentRecord]:
        """Return every department ordered by name."""

    @abstractmethod
    def update(self, department: DepartmentRecord, deadline: Optional[Deadline] = None) -> None:
        """Overwrite the name of an existing department."""

    @abstractmethod
    def delete(self, department_id: str, deadline: Optional[Deadline] = None) -> None:
        """Remove a department row."""


class EmployeeRepository(ABC):
    """
    Data access for employees.

    ``save`` and ``update`` only check that identifiers are well formed.
    Whether the department exists is checked by the caller beforehand;
    the store's own constraints are reported as ConflictError.
    """

    @abstractmethod
    def save(self, employee: EmployeeRecord, deadline: Optional[Deadline] = None) -> None:
        """Insert a new employee row."""

    @abstractmethod
    def find_by_id(self, employee_id: str, deadline: Optional[Deadline] = None) -> EmployeeRecord:
        """Return the employee or raise NotFoundError."""

    @abstractmethod
    def find_all(self, deadline: Optional[Deadline] = None) -> List[EmployeeRecord]:
        """Return every employee ordered by name."""

    @abstractmethod
    def update(self, employee: EmployeeRecord, deadline: Optional[Deadline] = None) -> None:
        """Overwrite name, email and department of an existing employee."""

    @abstractmethod
    def delete(self, employee_id: str, deadline: Optional[Deadline] = None) -> None:
        """Remove an employee row and its project memberships."""

    @abstractmethod
    def find_by_department_id(
        self,
        department_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        """Return the employees of a department ordered by name."""


class ProjectRepository(ABC):
    """Data access for projects and their team membership."""

    @abstractmethod
    def save(self, project: ProjectRecord, deadline: Optional[Deadline] = None) -> None:
        """Insert a new project with its initial team."""

    @abstractmethod
    def find_by_id(self, project_id: str, deadline: Optional[Deadline] = None) -> ProjectRecord:
        """Return the project or raise NotFoundError."""

    @abstractmethod
    def find_all(self, deadline: Optional[Deadline] = None) -> List[ProjectRecord]:
        """Return every project ordered by name."""

    @abstractmethod
    def update(self, project: ProjectRecord, deadline: Optional[Deadline] = None) -> None:
        """Overwrite the scalar fields and the team of an existing project."""

    @abstractmethod
    def delete(self, project_id: str, deadline: Optional[Deadline] = None) -> None:
        """Remove a project row."""

    @abstractmethod
    def find_by_status(
        self,
        status: ProjectStatus,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        """Return the projects with the given status ordered by name."""

    @abstractmethod
    def find_by_employee_id(
        self,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        """Return the projects an employee is a team member of."""

    @abstractmethod
    def add_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> None:
        """Add an employee to a project team. Adding an existing member is a no-op."""

    @abstractmethod
    def remove_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> None:
        """Remove an employee from a project team. Removing a non-member is a no-op."""
