"""
Graph-query face over the shared services.

Query and mutation fields are plain methods on ``QueryResolver`` and
``MutationResolver``; ``Resolver.execute`` dispatches one named field with
its arguments and renders the result in the graph response shape:
``{"data": {field: value}}`` plus ``"errors"`` when the field failed.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from workforce.data.deadline import Deadline
from workforce.data.records import (
    DepartmentRecord,
    EmployeeRecord,
    ProjectRecord,
    ProjectStatus,
)
from workforce.schemas.organization import (
    DepartmentCreateRequest,
    DepartmentUpdateRequest,
    EmployeeCreateRequest,
    EmployeeUpdateRequest,
    ProjectCreateRequest,
    ProjectUpdateRequest,
)
from workforce.services.department_service import DepartmentService
from workforce.services.employee_service import EmployeeService
from workforce.services.project_service import ProjectService
from workforce.utils.errors import (
    APIError,
    NotFoundError,
    ValidationError,
    create_field_error,
    create_validation_error,
    field_errors_from_pydantic,
)

logger = logging.getLogger(__name__)


def _parse(model: type, arguments: Dict[str, Any]) -> BaseModel:
    """Validate mutation input with the same models the REST face uses."""
    try:
        return model.model_validate(arguments)
    except PydanticValidationError as exc:
        raise create_validation_error(field_errors_from_pydantic(exc.errors())) from None


def _require(arguments: Dict[str, Any], name: str) -> Any:
    if name not in arguments or arguments[name] is None:
        raise create_validation_error(
            [create_field_error(name, f"{name} is required", code="required")]
        )
    return arguments[name]


def _without_id(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in arguments.items() if key != "id"}


# =============================================================================
# Query Fields
# =============================================================================

class QueryResolver:
    """Read fields. A single missing entity resolves to None, not an error."""

    def __init__(self, resolver: "Resolver"):
        self.resolver = resolver

    def health(self, deadline: Optional[Deadline] = None) -> Dict[str, str]:
        return {"status": "healthy", "version": self.resolver.version}

    def department(self, id: str, deadline: Optional[Deadline] = None) -> Optional[DepartmentRecord]:
        try:
            return self.resolver.department_service.get_department(id, deadline)
        except NotFoundError:
            return None

    def departments(self, deadline: Optional[Deadline] = None) -> List[DepartmentRecord]:
        return self.resolver.department_service.list_departments(deadline)

    def employee(self, id: str, deadline: Optional[Deadline] = None) -> Optional[EmployeeRecord]:
        try:
            return self.resolver.employee_service.get_employee(id, deadline)
        except NotFoundError:
            return None

    def employees(self, deadline: Optional[Deadline] = None) -> List[EmployeeRecord]:
        return self.resolver.employee_service.list_employees(deadline)

    def employees_by_department(
        self,
        department_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        return self.resolver.employee_service.list_employees_by_department(department_id, deadline)

    def project(self, id: str, deadline: Optional[Deadline] = None) -> Optional[ProjectRecord]:
        try:
            return self.resolver.project_service.get_project(id, deadline)
        except NotFoundError:
            return None

    def projects(self, deadline: Optional[Deadline] = None) -> List[ProjectRecord]:
        return self.resolver.project_service.list_projects(deadline)

    def projects_by_status(
        self,
        status: str,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        try:
            project_status = ProjectStatus(status)
        except ValueError:
            raise create_validation_error(
                [create_field_error("status", f"unknown project status '{status}'")]
            ) from None
        return self.resolver.project_service.list_projects_by_status(project_status, deadline)


# =============================================================================
# Mutation Fields
# =============================================================================

class MutationResolver:
    """Write fields. Every failure, including a missing entity, is an error."""

    def __init__(self, resolver: "Resolver"):
        self.resolver = resolver

    def create_department(self, name: Optional[str], deadline: Optional[Deadline] = None) -> DepartmentRecord:
        return self.resolver.department_service.create_department(name, deadline)

    def update_department(
        self,
        id: str,
        name: Optional[str],
        deadline: Optional[Deadline] = None,
    ) -> DepartmentRecord:
        return self.resolver.department_service.update_department(id, name, deadline)

    def delete_department(self, id: str, deadline: Optional[Deadline] = None) -> Dict[str, Any]:
        """Cascade delete; the result lists deleted and failed employee ids."""
        return self.resolver.department_service.delete_department(id, deadline).to_dict()

    def create_employee(
        self,
        name: Optional[str],
        email: Optional[str],
        department_id: Optional[str],
        deadline: Optional[Deadline] = None,
    ) -> EmployeeRecord:
        return self.resolver.employee_service.create_employee(name, email, department_id, deadline)

    def update_employee(
        self,
        id: str,
        name: Optional[str],
        email: Optional[str],
        department_id: Optional[str],
        deadline: Optional[Deadline] = None,
    ) -> EmployeeRecord:
        return self.resolver.employee_service.update_employee(id, name, email, department_id, deadline)

    def delete_employee(self, id: str, deadline: Optional[Deadline] = None) -> bool:
        self.resolver.employee_service.delete_employee(id, deadline)
        return True

    def create_project(self, data: ProjectCreateRequest, deadline: Optional[Deadline] = None) -> ProjectRecord:
        return self.resolver.project_service.create_project(
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

    def update_project(
        self,
        id: str,
        data: ProjectUpdateRequest,
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        return self.resolver.project_service.update_project(
            id,
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

    def delete_project(self, id: str, deadline: Optional[Deadline] = None) -> bool:
        self.resolver.project_service.delete_project(id, deadline)
        return True

    def add_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        return self.resolver.project_service.add_team_member(project_id, employee_id, deadline)

    def remove_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> ProjectRecord:
        return self.resolver.project_service.remove_team_member(project_id, employee_id, deadline)


# =============================================================================
# Resolver
# =============================================================================

class Resolver:
    """Root resolver holding the services both faces share."""

    def __init__(
        self,
        department_service: DepartmentService,
        employee_service: EmployeeService,
        project_service: ProjectService,
        version: str = "1.0.0",
    ):
        self.department_service = department_service
        self.employee_service = employee_service
        self.project_service = project_service
        self.version = version
        self.query = QueryResolver(self)
        self.mutation = MutationResolver(self)
        self.operations = self._build_operations()

    # -------------------------------------------------------------------------
    # Field resolvers on parent objects
    # -------------------------------------------------------------------------

    def department_employees(
        self,
        department: DepartmentRecord,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        return self.employee_service.list_employees_by_department(department.id, deadline)

    def employee_department(
        self,
        employee: EmployeeRecord,
        deadline: Optional[Deadline] = None,
    ) -> Optional[DepartmentRecord]:
        return self.query.department(employee.department_id, deadline)

    def employee_projects(
        self,
        employee: EmployeeRecord,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        return self.project_service.list_projects_for_employee(employee.id, deadline)

    def project_team_members(
        self,
        project: ProjectRecord,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        """Team members that still resolve, in team order."""
        members = []
        for employee_id in project.team_member_ids:
            employee = self.query.employee(employee_id, deadline)
            if employee is not None:
                members.append(employee)
        return members

    def _with_parent(
        self,
        lookup: Callable[[str, Optional[Deadline]], Any],
        field: Callable[[Any, Optional[Deadline]], Any],
    ) -> Callable[[Dict[str, Any], Optional[Deadline]], Any]:
        """Expose a field resolver as an operation keyed by the parent id."""

        def run(arguments: Dict[str, Any], deadline: Optional[Deadline]) -> Any:
            parent = lookup(_require(arguments, "id"), deadline)
            if parent is None:
                return None
            return field(parent, deadline)

        return run

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _build_operations(self) -> Dict[str, Callable[[Dict[str, Any], Optional[Deadline]], Any]]:
        query = self.query
        mutation = self.mutation
        return {
            # Queries
            "health": lambda a, d: query.health(d),
            "department": lambda a, d: query.department(_require(a, "id"), d),
            "departments": lambda a, d: query.departments(d),
            "employee": lambda a, d: query.employee(_require(a, "id"), d),
            "employees": lambda a, d: query.employees(d),
            "employees_by_department": lambda a, d: query.employees_by_department(
                _require(a, "department_id"), d
            ),
            "project": lambda a, d: query.project(_require(a, "id"), d),
            "projects": lambda a, d: query.projects(d),
            "projects_by_status": lambda a, d: query.projects_by_status(_require(a, "status"), d),
            # Field resolvers
            "department_employees": self._with_parent(query.department, self.department_employees),
            "employee_department": self._with_parent(query.employee, self.employee_department),
            "employee_projects": self._with_parent(query.employee, self.employee_projects),
            "project_team_members": self._with_parent(query.project, self.project_team_members),
            # Mutations
            "create_department": lambda a, d: mutation.create_department(
                _parse(DepartmentCreateRequest, a).name, d
            ),
            "update_department": lambda a, d: mutation.update_department(
                _require(a, "id"), _parse(DepartmentUpdateRequest, _without_id(a)).name, d
            ),
            "delete_department": lambda a, d: mutation.delete_department(_require(a, "id"), d),
            "create_employee": self._create_employee,
            "update_employee": self._update_employee,
            "delete_employee": lambda a, d: mutation.delete_employee(_require(a, "id"), d),
            "create_project": lambda a, d: mutation.create_project(_parse(ProjectCreateRequest, a), d),
            "update_project": lambda a, d: mutation.update_project(
                _require(a, "id"),
                _parse(ProjectUpdateRequest, _without_id(a)),
                d,
            ),
            "delete_project": lambda a, d: mutation.delete_project(_require(a, "id"), d),
            "add_team_member": lambda a, d: mutation.add_team_member(
                _require(a, "project_id"), _require(a, "employee_id"), d
            ),
            "remove_team_member": lambda a, d: mutation.remove_team_member(
                _require(a, "project_id"), _require(a, "employee_id"), d
            ),
        }

    def _create_employee(self, arguments: Dict[str, Any], deadline: Optional[Deadline]) -> EmployeeRecord:
        data = _parse(EmployeeCreateRequest, arguments)
        return self.mutation.create_employee(data.name, data.email, data.department_id, deadline)

    def _update_employee(self, arguments: Dict[str, Any], deadline: Optional[Deadline]) -> EmployeeRecord:
        employee_id = _require(arguments, "id")
        data = _parse(EmployeeUpdateRequest, _without_id(arguments))
        return self.mutation.update_employee(employee_id, data.name, data.email, data.department_id, deadline)

    def execute(
        self,
        operation: str,
        arguments: Optional[Dict[str, Any]] = None,
        deadline: Optional[Deadline] = None,
    ) -> Dict[str, Any]:
        """Run one field and render ``{"data": ..., "errors"?: [...]}``."""
        handler = self.operations.get(operation)
        if handler is None:
            error = ValidationError(
                message=f"unknown operation '{operation}'",
                details={"operation": operation},
            )
            return {"data": None, "errors": [render_error(error)]}

        try:
            value = handler(arguments or {}, deadline)
        except APIError as exc:
            logger.info(f"Graph operation {operation} failed: {exc.error_code}: {exc.message}")
            return {"data": {operation: None}, "errors": [render_error(exc)]}

        return {"data": {operation: serialize(value)}}


def serialize(value: Any) -> Any:
    """Records become plain JSON-ready dicts."""
    if isinstance(value, list):
        return [serialize(item) for item in value]
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    return jsonable_encoder(value)


def render_error(error: APIError) -> Dict[str, Any]:
    """Graph error entry carrying the machine code, kind and retryability."""
    extensions: Dict[str, Any] = {
        "code": error.error_code,
        "kind": error.kind.value,
        "retryable": error.retryable,
    }
    if error.field_errors:
        extensions["field_errors"] = [fe.to_dict() for fe in error.field_errors]
    return {"message": error.message, "extensions": extensions}
