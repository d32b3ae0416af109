"""API endpoints for projects and project team membership."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from workforce.api.dependencies import get_project_service, get_request_deadline
from workforce.data.deadline import Deadline
from workforce.data.records import ProjectStatus
from workforce.schemas.organization import (
    ProjectCreateRequest,
    ProjectResponse,
    ProjectUpdateRequest,
    SuccessResponse,
)
from workforce.services.project_service import ProjectService


project_router = APIRouter(prefix="/projects", tags=["Projects"])


@project_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
)
def create_project(
    data: ProjectCreateRequest,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """
    Create a new project.

    - Budget must be positive and the end date not before the start date
    - Every team member must be an existing employee
    """
    project = service.create_project(
        name=data.name,
        description=data.description,
        status=data.status,
        priority=data.priority,
        start_date=data.start_date,
        end_date=data.end_date,
        budget=data.budget,
        team_member_ids=data.team_member_ids,
        deadline=deadline,
    )
    return SuccessResponse(
        data=ProjectResponse.model_validate(project),
        message="Project created successfully",
    )


@project_router.get("", response_model=SuccessResponse, summary="List Projects")
def list_projects(
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
    project_status: Annotated[Optional[ProjectStatus], Query(alias="status")] = None,
) -> SuccessResponse:
    """List projects ordered by name, optionally only those with the given status."""
    if project_status is not None:
        projects = service.list_projects_by_status(project_status, deadline)
    else:
        projects = service.list_projects(deadline)
    return SuccessResponse(data=[ProjectResponse.model_validate(p) for p in projects])


@project_router.get("/{project_id}", response_model=SuccessResponse, summary="Get Project")
def get_project(
    project_id: str,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    project = service.get_project(project_id, deadline)
    return SuccessResponse(data=ProjectResponse.model_validate(project))


@project_router.put("/{project_id}", response_model=SuccessResponse, summary="Update Project")
def update_project(
    project_id: str,
    data: ProjectUpdateRequest,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """Update a project. The team is kept unless team_member_ids is sent."""
    project = service.update_project(
        project_id,
        name=data.name,
        description=data.description,
        status=data.status,
        priority=data.priority,
        start_date=data.start_date,
        end_date=data.end_date,
        budget=data.budget,
        team_member_ids=data.team_member_ids,
        deadline=deadline,
    )
    return SuccessResponse(
        data=ProjectResponse.model_validate(project),
        message="Project updated successfully",
    )


@project_router.delete("/{project_id}", response_model=SuccessResponse, summary="Delete Project")
def delete_project(
    project_id: str,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    service.delete_project(project_id, deadline)
    return SuccessResponse(data={"id": project_id}, message="Project deleted successfully")


@project_router.post(
    "/{project_id}/members/{employee_id}",
    response_model=SuccessResponse,
    summary="Add Team Member",
)
def add_team_member(
    project_id: str,
    employee_id: str,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    """Add an employee to the project team. Adding an existing member changes nothing."""
    project = service.add_team_member(project_id, employee_id, deadline)
    return SuccessResponse(data=ProjectResponse.model_validate(project))


@project_router.delete(
    "/{project_id}/members/{employee_id}",
    response_model=SuccessResponse,
    summary="Remove Team Member",
)
def remove_team_member(
    project_id: str,
    employee_id: str,
    service: Annotated[ProjectService, Depends(get_project_service)],
    deadline: Annotated[Deadline, Depends(get_request_deadline)],
) -> SuccessResponse:
    project = service.remove_team_member(project_id, employee_id, deadline)
    return SuccessResponse(data=ProjectResponse.model_validate(project))
