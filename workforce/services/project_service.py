"""Project service for project records and team membership."""

import logging
from datetime import date
from typing import List, Optional, Sequence

from workforce.data.deadline import Deadline
from workforce.data.records import ProjectPriority, ProjectRecord, ProjectStatus
from workforce.data.repositories import (
    EmployeeRepository,
    ProjectRepository,
    new_identifier,
)
from workforce.services.validation import (
    ensure_employees_exist,
    validate_project_fields,
)

logger = logging.getLogger(__name__)


class ProjectService:
    """Service layer for projects. Team members must be existing employees."""

    def __init__(self, projects: ProjectRepository, employees: EmployeeRepository):
        """Initialize service with its repositories."""
        self.projects = projects
        self.employees = employees

    def create_project(
        self,
        name: Optional[str],
        start_date: date,
        end_date: date,
        budget: float,
        description: Optional[str] = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
        priority: ProjectPriority = ProjectPriority.MEDIUM,
        team_member_ids: Sequence[str] = (),
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        """Create a project, checking every team member exists first."""
        name = validate_project_fields(name, start_date, end_date, budget)
        members = ensure_employees_exist(self.employees, team_member_ids, deadline=deadline)

        project = ProjectRecord(
            id=new_identifier(),
            name=name,
            description=description,
            status=status,
            priority=priority,
            start_date=start_date,
            end_date=end_date,
            budget=budget,
            team_member_ids=[member.id for member in members],
        )
        self.projects.save(project, deadline)
        logger.info(f"Created project {project.id} with {len(project.team_member_ids)} team members")
        return project

    def get_project(self, project_id: str, deadline: Optional[Deadline] = None) -> ProjectRecord:
        """Raises NotFoundError if the project doesn't exist."""
        return self.projects.find_by_id(project_id, deadline)

    def list_projects(self, deadline: Optional[Deadline] = None) -> List[ProjectRecord]:
        return self.projects.find_all(deadline)

    def list_projects_by_status(
        self,
        status: ProjectStatus,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        return self.projects.find_by_status(status, deadline)

    def list_projects_for_employee(
        self,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        """List the projects of an existing employee."""
        employee = self.employees.find_by_id(employee_id, deadline)
        return self.projects.find_by_employee_id(employee.id, deadline)

    def update_project(
        self,
        project_id: str,
        name: Optional[str],
        start_date: date,
        end_date: date,
        budget: float,
        description: Optional[str] = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
        priority: ProjectPriority = ProjectPriority.MEDIUM,
        team_member_ids: Optional[Sequence[str]] = None,
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        """
        Replace the fields of a project.

        The team is replaced only when ``team_member_ids`` is given.
        """
        name = validate_project_fields(name, start_date, end_date, budget)
        project = self.projects.find_by_id(project_id, deadline)
        if team_member_ids is not None:
            members = ensure_employees_exist(self.employees, team_member_ids, deadline=deadline)
            project.team_member_ids = [member.id for member in members]

        project.name = name
        project.description = description
        project.status = status
        project.priority = priority
        project.start_date = start_date
        project.end_date = end_date
        project.budget = budget
        self.projects.update(project, deadline)
        logger.info(f"Updated project {project.id}")
        return project

    def delete_project(self, project_id: str, deadline: Optional[Deadline] = None) -> None:
        self.projects.delete(project_id, deadline)
        logger.info(f"Deleted project {project_id}")

    def add_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        """Add an existing employee to a project and return the project."""
        project = self.projects.find_by_id(project_id, deadline)
        (employee,) = ensure_employees_exist(self.employees, [employee_id], "employee_id", deadline)
        self.projects.add_team_member(project.id, employee.id, deadline)
        return self.projects.find_by_id(project.id, deadline)

    def remove_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        """Remove an employee from a project and return the project."""
        self.projects.remove_team_member(project_id, employee_id, deadline)
        return self.projects.find_by_id(project_id, deadline)
