"""FastAPI dependencies wiring requests to the shared service layer."""

from typing import Annotated

from fastapi import Depends, Request

from workforce.config.settings import Settings
from workforce.data.deadline import Deadline
from workforce.data.factory import Repositories
from workforce.services.department_service import DepartmentService
from workforce.services.employee_service import EmployeeService
from workforce.services.project_service import ProjectService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_repositories(request: Request) -> Repositories:
    """Repositories built at application construction or startup."""
    return request.app.state.repositories


def get_request_deadline(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Deadline:
    """One deadline per request, bounding all of its store calls."""
    return Deadline.after(settings.request_timeout_seconds)


def get_department_service(
    repositories: Annotated[Repositories, Depends(get_repositories)],
) -> DepartmentService:
    """Get department service instance."""
    return DepartmentService(repositories.departments, repositories.employees)


def get_employee_service(
    repositories: Annotated[Repositories, Depends(get_repositories)],
) -> EmployeeService:
    """Get employee service instance."""
    return EmployeeService(repositories.employees, repositories.departments)


def get_project_service(
    repositories: Annotated[Repositories, Depends(get_repositories)],
) -> ProjectService:
    """Get project service instance."""
    return ProjectService(repositories.projects, repositories.employees)
