"""API endpoints for employees."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from workforce.api.dependencies import (
    get_employee_service,
    get_project_service,
    get_request_deadline,
)
from workforce.data.deadline import Deadline
from workforce.schemas.organization import (
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeUpdateRequest,
    ProjectResponse,
    SuccessResponse,
)
from workforce.services.employee_service import EmployeeService
from workforce.services.project_service import ProjectService


employee_router = APIRouter(prefix="/employees", tags=["Employees"])


@employee_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Employee",
)
def create_employee(
    data: EmployeeCreateRequest,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """
    Create a new employee.

    - Validates name and email format
    - Validates the department exists (400 otherwise)
    - Returns 409 if the email is already in use
    """
    employee = service.create_employee(data.name, data.email, data.department_id, deadline)
    return SuccessResponse(
        data=EmployeeResponse.model_validate(employee),
        message="Employee created successfully",
    )


@employee_router.get(
    "",
    response_model=SuccessResponse,
    summary="List Employees",
)
def list_employees(
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """List every employee ordered by name."""
    employees = service.list_employees(deadline)
    return SuccessResponse(data=[EmployeeResponse.model_validate(e) for e in employees])


@employee_router.get(
    "/{employee_id}",
    response_model=SuccessResponse,
    summary="Get Employee",
)
def get_employee(
    employee_id: str,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """Get an employee. Returns 404 if the employee doesn't exist."""
    employee = service.get_employee(employee_id, deadline)
    return SuccessResponse(data=EmployeeResponse.model_validate(employee))


@employee_router.put(
    "/{employee_id}",
    response_model=SuccessResponse,
    summary="Update Employee",
)
def update_employee(
    employee_id: str,
    data: EmployeeUpdateRequest,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """
    Update an employee.

    - Moving to another department requires that department to exist
    - Returns 404 if the employee doesn't exist
    - Returns 409 if the new email is already in use
    """
    employee = service.update_employee(
        employee_id,
        data.name,
        data.email,
        data.department_id,
        deadline,
    )
    return SuccessResponse(
        data=EmployeeResponse.model_validate(employee),
        message="Employee updated successfully",
    )


@employee_router.delete(
    "/{employee_id}",
    response_model=SuccessResponse,
    summary="Delete Employee",
)
def delete_employee(
    employee_id: str,
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """Delete an employee. Returns 404 if the employee doesn't exist."""
    service.delete_employee(employee_id, deadline)
    return SuccessResponse(data={"id": employee_id}, message="Employee deleted successfully")


@employee_router.get(
    "/{employee_id}/projects",
    response_model=SuccessResponse,
    summary="List Employee Projects",
)
def list_employee_projects(
    employee_id: str,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """List the projects an employee is a team member of."""
    projects = service.list_projects_for_employee(employee_id, deadline)
    return SuccessResponse(data=[ProjectResponse.model_validate(p) for p in projects])
