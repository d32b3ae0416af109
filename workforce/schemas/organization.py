"""Pydantic request and response models for departments, employees and projects."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from workforce.data.records import ProjectPriority, ProjectStatus


# =============================================================================
# Response Models
# =============================================================================

class DepartmentResponse(BaseModel):
    """Department data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EmployeeResponse(BaseModel):
    """Employee data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    department_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectResponse(BaseModel):
    """Project data for API responses, team given as employee ids."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    priority: ProjectPriority
    start_date: date
    end_date: date
    budget: float
    team_member_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EmployeeDeleteFailureResponse(BaseModel):
    """A dependent employee the cascade could not delete."""

    employee_id: str
    code: str
    kind: str
    message: str


class CascadeDeleteResponse(BaseModel):
    """Result of deleting a department and its employees."""

    department_id: str
    deleted_employee_ids: List[str]
    failed_employee_deletes: List[EmployeeDeleteFailureResponse]
    complete: bool


class SuccessResponse(BaseModel):
    """Generic success response wrapper."""

    data: Any
    message: Optional[str] = None


# =============================================================================
# Request Models
# =============================================================================

class DepartmentCreateRequest(BaseModel):
    """Request model for creating a department."""

    name: str = Field(..., max_length=255, description="Department name")


class DepartmentUpdateRequest(BaseModel):
    """Request model for renaming a department."""

    name: str = Field(..., max_length=255, description="Department name")


class EmployeeCreateRequest(BaseModel):
    """
    Request model for creating an employee.

    Presence and length are checked here; content rules (non-blank name,
    email shape, department existence) are applied by the service layer.
    """

    name: str = Field(..., max_length=255, description="Employee name")
    email: str = Field(..., max_length=255, description="Work email address")
    department_id: str = Field(..., description="Department the employee belongs to")


class EmployeeUpdateRequest(BaseModel):
    """Request model for updating an employee. All fields are replaced."""

    name: str = Field(..., max_length=255, description="Employee name")
    email: str = Field(..., max_length=255, description="Work email address")
    department_id: str = Field(..., description="Department the employee belongs to")


class ProjectCreateRequest(BaseModel):
    """Request model for creating a project."""

    name: str = Field(..., max_length=255, description="Project name")
    description: Optional[str] = Field(default=None, description="Project description")
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE, description="Project status")
    priority: ProjectPriority = Field(default=ProjectPriority.MEDIUM, description="Project priority")
    start_date: date = Field(..., description="Start date")
    end_date: date = Field(..., description="End date (deadline)")
    budget: float = Field(..., description="Budget amount, must be positive")
    team_member_ids: List[str] = Field(default_factory=list, description="Employee ids on the team")


class ProjectUpdateRequest(BaseModel):
    """Request model for updating a project. Omit team_member_ids to keep the team."""

    name: str = Field(..., max_length=255, description="Project name")
    description: Optional[str] = Field(default=None, description="Project description")
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE, description="Project status")
    priority: ProjectPriority = Field(default=ProjectPriority.MEDIUM, description="Project priority")
    start_date: date = Field(..., description="Start date")
    end_date: date = Field(..., description="End date (deadline)")
    budget: float = Field(..., description="Budget amount, must be positive")
    team_member_ids: Optional[List[str]] = Field(default=None, description="Replacement team")


# =============================================================================
# Graph Requests
# =============================================================================

class GraphRequest(BaseModel):
    """A single graph operation: a query or mutation field and its arguments."""

    operation: str = Field(..., min_length=1, description="Query or mutation field name")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Field arguments")
