"""Pydantic schemas package."""

from workforce.schemas.organization import (
    CascadeDeleteResponse,
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentUpdateRequest,
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeUpdateRequest,
    GraphRequest,
    ProjectCreateRequest,
    ProjectResponse,
    ProjectUpdateRequest,
    SuccessResponse,
)

__all__ = [
    "CascadeDeleteResponse",
    "DepartmentCreateRequest",
    "DepartmentResponse",
    "DepartmentUpdateRequest",
    "EmployeeCreateRequest",
    "EmployeeResponse",
    "EmployeeUpdateRequest",
    "GraphRequest",
    "ProjectCreateRequest",
    "ProjectResponse",
    "ProjectUpdateRequest",
    "SuccessResponse",
]
