"""Graph-query endpoint. Always answers 200; failures travel in ``errors``."""

from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends

from workforce.api.dependencies import (
    get_app_settings,
    get_department_service,
    get_employee_service,
    get_project_service,
    get_request_deadline,
)
from workforce.config.settings import Settings
from workforce.data.deadline import Deadline
from workforce.graph.resolver import Resolver
from workforce.schemas.organization import GraphRequest
from workforce.services.department_service import DepartmentService
from workforce.services.employee_service import EmployeeService
from workforce.services.project_service import ProjectService


graph_router = APIRouter(tags=["Graph"])


def get_resolver(
    department_service: Annotated[DepartmentService, Depends(get_department_service)],
    employee_service: Annotated[EmployeeService, Depends(get_employee_service)],
    project_service: Annotated[ProjectService, Depends(get_project_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Resolver:
    """Get a resolver over the shared services."""
    return Resolver(
        department_service,
        employee_service,
        project_service,
        version=settings.app_version,
    )


@graph_router.post("/graph", summary="Execute Graph Operation")
def execute_graph_operation(
    request: GraphRequest,
    resolver: Annotated[Resolver, Depends(get_resolver)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> Dict[str, Any]:
    """
    Execute one query or mutation field.

    Body: ``{"operation": "employee", "arguments": {"id": "..."}}``.
    A missing entity on a single-entity query yields ``null`` without errors.
    """
    return resolver.execute(request.operation, request.arguments, deadline)
