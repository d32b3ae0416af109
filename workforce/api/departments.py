"""API endpoints for departments."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from workforce.api.dependencies import get_department_service, get_request_deadline
from workforce.data.deadline import Deadline
from workforce.schemas.organization import (
    CascadeDeleteResponse,
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentUpdateRequest,
    EmployeeResponse,
    SuccessResponse,
)
from workforce.services.department_service import DepartmentService


department_router = APIRouter(prefix="/departments", tags=["Departments"])


@department_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Department",
)
def create_department(
    data: DepartmentCreateRequest,
    service: Annotated[DepartmentService, Depends(get_department_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """
    Create a new department.

    - Name must not be blank
    - Returns the department with HTTP 201
    """
    department = service.create_department(data.name, deadline)
    return SuccessResponse(
        data=DepartmentResponse.model_validate(department),
        message="Department created successfully",
    )


@department_router.get(
    "",
    response_model=SuccessResponse,
    summary="List Departments",
)
def list_departments(
    service: Annotated[DepartmentService, Depends(get_department_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """List every department ordered by name. Empty list when there are none."""
    departments = service.list_departments(deadline)
    return SuccessResponse(
        data=[DepartmentResponse.model_validate(d) for d in departments],
    )


@department_router.get(
    "/{department_id}",
    response_model=SuccessResponse,
    summary="Get Department",
)
def get_department(
    department_id: str,
    service: Annotated[DepartmentService, Depends(get_department_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """Get a department. Returns 404 if it doesn't exist, 400 for a malformed id."""
    department = service.get_department(department_id, deadline)
    return SuccessResponse(data=DepartmentResponse.model_validate(department))


@department_router.put(
    "/{department_id}",
    response_model=SuccessResponse,
    summary="Update Department",
)
def update_department(
    department_id: str,
    data: DepartmentUpdateRequest,
    service: Annotated[DepartmentService, Depends(get_department_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """Rename a department."""
    department = service.update_department(department_id, data.name, deadline)
    return SuccessResponse(
        data=DepartmentResponse.model_validate(department),
        message="Department updated successfully",
    )


@department_router.delete(
    "/{department_id}",
    response_model=SuccessResponse,
    summary="Delete Department",
    description="Delete a department together with all of its employees.",
)
def delete_department(
    department_id: str,
    service: Annotated[DepartmentService, Depends(get_department_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """
    Delete a department with cascade.

    - Employees of the department are deleted first
    - An employee that could not be deleted is listed in
      ``failed_employee_deletes`` and ``complete`` is false
    - Returns 404 if the department doesn't exist
    """
    result = service.delete_department(department_id, deadline)
    message = "Department deleted successfully"
    if not result.complete:
        message = "Department deleted; some employees could not be deleted"
    return SuccessResponse(
        data=CascadeDeleteResponse.model_validate(result.to_dict()),
        message=message,
    )


@department_router.get(
    "/{department_id}/employees",
    response_model=SuccessResponse,
    summary="List Department Employees",
)
def list_department_employees(
    department_id: str,
    service: Annotated[DepartmentService, Depends(get_department_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """List the employees of a department ordered by name."""
    employees = service.list_department_employees(department_id, deadline)
    return SuccessResponse(
        data=[EmployeeResponse.model_validate(e) for e in employees],
    )
