"""In-process repository implementations used for tests and local runs."""

import logging
import threading
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from typing import Dict, Generator, List, Optional

from workforce.data.deadline import Deadline, check_deadline
from workforce.data.records import (
    DepartmentRecord,
    EmployeeRecord,
    ProjectRecord,
    ProjectStatus,
)
from workforce.data.repositories import (
    DepartmentRepository,
    EmployeeRepository,
    ProjectRepository,
    parse_identifier,
)
from workforce.models.base import utcnow
from workforce.utils.errors import (
    ConflictError,
    StoreTimeoutError,
    create_duplicate_error,
    create_field_error,
    create_not_found_error,
)

logger = logging.getLogger(__name__)


class InMemoryStore:
    """
    Maps for every entity collection, each guarded by its own lock.

    Locks are always acquired in the order departments, employees, projects
    and are held only while a map is read or mutated.
    """

    def __init__(self):
        self.departments: Dict[str, DepartmentRecord] = {}
        self.employees: Dict[str, EmployeeRecord] = {}
        self.projects: Dict[str, ProjectRecord] = {}
        self.department_lock = threading.Lock()
        self.employee_lock = threading.Lock()
        self.project_lock = threading.Lock()

    @contextmanager
    def locked(
        self,
        operation: str,
        deadline: Optional[Deadline],
        *locks: threading.Lock,
    ) -> Generator[None, None, None]:
        """Acquire ``locks`` in order, waiting no longer than the deadline allows."""
        check_deadline(deadline, operation)
        with ExitStack() as stack:
            for lock in locks:
                remaining = deadline.remaining() if deadline is not None else None
                acquired = lock.acquire(timeout=remaining if remaining is not None else -1)
                if not acquired:
                    raise StoreTimeoutError(
                        message=f"{operation} timed out waiting for the store",
                        details={"operation": operation},
                    )
                stack.callback(lock.release)
            yield

    def clear(self) -> None:
        """Drop every record."""
        with self.locked("clear store", None, self.department_lock, self.employee_lock, self.project_lock):
            self.departments.clear()
            self.employees.clear()
            self.projects.clear()


def _by_name(records):
    return sorted(records, key=lambda record: (record.name, record.id))


class InMemoryDepartmentRepository(DepartmentRepository):
    """Department repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def save(self, department: DepartmentRecord, deadline: Optional[Deadline] = None) -> None:
        department_id = parse_identifier(department.id, "Department")
        with self.store.locked("save department", deadline, self.store.department_lock):
            if department_id in self.store.departments:
                raise ConflictError(
                    message=f"Department with id '{department_id}' already exists",
                    details={"resource_type": "Department", "identifier": department_id},
                )
            now = utcnow()
            department.id = department_id
            department.created_at = now
            department.updated_at = now
            self.store.departments[department_id] = replace(department)
        logger.debug(f"Saved department {department_id}")

    def find_by_id(self, department_id: str, deadline: Optional[Deadline] = None) -> DepartmentRecord:
        department_id = parse_identifier(department_id, "Department")
        with self.store.locked("find department", deadline, self.store.department_lock):
            department = self.store.departments.get(department_id)
            if department is None:
                raise create_not_found_error("Department", department_id)
            return replace(department)

    def find_all(self, deadline: Optional[Deadline] = None) -> List[DepartmentRecord]:
        with self.store.locked("list departments", deadline, self.store.department_lock):
            return [replace(d) for d in _by_name(self.store.departments.values())]

    def update(self, department: DepartmentRecord, deadline: Optional[Deadline] = None) -> None:
        department_id = parse_identifier(department.id, "Department")
        with self.store.locked("update department", deadline, self.store.department_lock):
            existing = self.store.departments.get(department_id)
            if existing is None:
                raise create_not_found_error("Department", department_id)
            department.id = department_id
            department.created_at = existing.created_at
            department.updated_at = utcnow()
            self.store.departments[department_id] = replace(department)
        logger.debug(f"Updated department {department_id}")

    def delete(self, department_id: str, deadline: Optional[Deadline] = None) -> None:
        department_id = parse_identifier(department_id, "Department")
        store = self.store
        with store.locked("delete department", deadline, store.department_lock, store.employee_lock):
            if department_id not in store.departments:
                raise create_not_found_error("Department", department_id)
            if any(e.department_id == department_id for e in store.employees.values()):
                raise ConflictError(
                    message="Department is still referenced by employees",
                    details={"resource_type": "Department", "identifier": department_id},
                )
            del store.departments[department_id]
        logger.debug(f"Deleted department {department_id}")


class InMemoryEmployeeRepository(EmployeeRepository):
    """Employee repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _check_constraints(self, employee: EmployeeRecord) -> None:
        """Enforce the unique email and department reference. Caller holds the locks."""
        if employee.department_id not in self.store.departments:
            raise ConflictError(
                message="Referenced department does not exist",
                field_errors=[
                    create_field_error(
                        "department_id",
                        "Department does not exist",
                        code="foreign_key",
                    )
                ],
            )
        for other in self.store.employees.values():
            if other.id != employee.id and other.email == employee.email:
                raise create_duplicate_error("Employee", "email", employee.email)

    def save(self, employee: EmployeeRecord, deadline: Optional[Deadline] = None) -> None:
        employee_id = parse_identifier(employee.id, "Employee")
        department_id = parse_identifier(employee.department_id, "Department", "department_id")
        store = self.store
        with store.locked("save employee", deadline, store.department_lock, store.employee_lock):
            if employee_id in store.employees:
                raise ConflictError(
                    message=f"Employee with id '{employee_id}' already exists",
                    details={"resource_type": "Employee", "identifier": employee_id},
                )
            employee.id = employee_id
            employee.department_id = department_id
            self._check_constraints(employee)
            now = utcnow()
            employee.created_at = now
            employee.updated_at = now
            store.employees[employee_id] = replace(employee)
        logger.debug(f"Saved employee {employee_id} in department {department_id}")

    def find_by_id(self, employee_id: str, deadline: Optional[Deadline] = None) -> EmployeeRecord:
        employee_id = parse_identifier(employee_id, "Employee")
        with self.store.locked("find employee", deadline, self.store.employee_lock):
            employee = self.store.employees.get(employee_id)
            if employee is None:
                raise create_not_found_error("Employee", employee_id)
            return replace(employee)

    def find_all(self, deadline: Optional[Deadline] = None) -> List[EmployeeRecord]:
        with self.store.locked("list employees", deadline, self.store.employee_lock):
            return [replace(e) for e in _by_name(self.store.employees.values())]

    def update(self, employee: EmployeeRecord, deadline: Optional[Deadline] = None) -> None:
        employee_id = parse_identifier(employee.id, "Employee")
        department_id = parse_identifier(employee.department_id, "Department", "department_id")
        store = self.store
        with store.locked("update employee", deadline, store.department_lock, store.employee_lock):
            existing = store.employees.get(employee_id)
            if existing is None:
                raise create_not_found_error("Employee", employee_id)
            employee.id = employee_id
            employee.department_id = department_id
            self._check_constraints(employee)
            employee.created_at = existing.created_at
            employee.updated_at = utcnow()
            store.employees[employee_id] = replace(employee)
        logger.debug(f"Updated employee {employee_id}")

    def delete(self, employee_id: str, deadline: Optional[Deadline] = None) -> None:
        employee_id = parse_identifier(employee_id, "Employee")
        store = self.store
        with store.locked("delete employee", deadline, store.employee_lock, store.project_lock):
            if employee_id not in store.employees:
                raise create_not_found_error("Employee", employee_id)
            del store.employees[employee_id]
            for project in store.projects.values():
                if employee_id in project.team_member_ids:
                    project.team_member_ids.remove(employee_id)
        logger.debug(f"Deleted employee {employee_id}")

    def find_by_department_id(
        self,
        department_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        department_id = parse_identifier(department_id, "Department", "department_id")
        with self.store.locked("list department employees", deadline, self.store.employee_lock):
            members = [
                e for e in self.store.employees.values()
                if e.department_id == department_id
            ]
            return [replace(e) for e in _by_name(members)]


def _copy_project(project: ProjectRecord) -> ProjectRecord:
    return replace(project, team_member_ids=list(project.team_member_ids))


class InMemoryProjectRepository(ProjectRepository):
    """Project repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _member_ids(self, project: ProjectRecord) -> List[str]:
        """Canonical, de-duplicated team ids. Caller holds the employee lock."""
        member_ids: List[str] = []
        for member_id in project.team_member_ids:
            canonical = parse_identifier(member_id, "Employee", "team_member_ids")
            if canonical not in self.store.employees:
                raise ConflictError(
                    message="Referenced employee does not exist",
                    field_errors=[
                        create_field_error(
                            "team_member_ids",
                            "Employee does not exist",
                            code="foreign_key",
                        )
                    ],
                )
            if canonical not in member_ids:
                member_ids.append(canonical)
        return member_ids

    def save(self, project: ProjectRecord, deadline: Optional[Deadline] = None) -> None:
        project_id = parse_identifier(project.id, "Project")
        store = self.store
        with store.locked("save project", deadline, store.employee_lock, store.project_lock):
            if project_id in store.projects:
                raise ConflictError(
                    message=f"Project with id '{project_id}' already exists",
                    details={"resource_type": "Project", "identifier": project_id},
                )
            project.id = project_id
            project.team_member_ids = self._member_ids(project)
            now = utcnow()
            project.created_at = now
            project.updated_at = now
            store.projects[project_id] = _copy_project(project)
        logger.debug(f"Saved project {project_id}")

    def find_by_id(self, project_id: str, deadline: Optional[Deadline] = None) -> ProjectRecord:
        project_id = parse_identifier(project_id, "Project")
        with self.store.locked("find project", deadline, self.store.project_lock):
            project = self.store.projects.get(project_id)
            if project is None:
                raise create_not_found_error("Project", project_id)
            return _copy_project(project)

    def find_all(self, deadline: Optional[Deadline] = None) -> List[ProjectRecord]:
        with self.store.locked("list projects", deadline, self.store.project_lock):
            return [_copy_project(p) for p in _by_name(self.store.projects.values())]

    def update(self, project: ProjectRecord, deadline: Optional[Deadline] = None) -> None:
        project_id = parse_identifier(project.id, "Project")
        store = self.store
        with store.locked("update project", deadline, store.employee_lock, store.project_lock):
            existing = store.projects.get(project_id)
            if existing is None:
                raise create_not_found_error("Project", project_id)
            project.id = project_id
            project.team_member_ids = self._member_ids(project)
            project.created_at = existing.created_at
            project.updated_at = utcnow()
            store.projects[project_id] = _copy_project(project)
        logger.debug(f"Updated project {project_id}")

    def delete(self, project_id: str, deadline: Optional[Deadline] = None) -> None:
        project_id = parse_identifier(project_id, "Project")
        with self.store.locked("delete project", deadline, self.store.project_lock):
            if project_id not in self.store.projects:
                raise create_not_found_error("Project", project_id)
            del self.store.projects[project_id]
        logger.debug(f"Deleted project {project_id}")

    def find_by_status(
        self,
        status: ProjectStatus,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        with self.store.locked("list projects by status", deadline, self.store.project_lock):
            matching = [p for p in self.store.projects.values() if p.status == status]
            return [_copy_project(p) for p in _by_name(matching)]

    def find_by_employee_id(
        self,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        employee_id = parse_identifier(employee_id, "Employee", "employee_id")
        with self.store.locked("list employee projects", deadline, self.store.project_lock):
            matching = [
                p for p in self.store.projects.values()
                if employee_id in p.team_member_ids
            ]
            return [_copy_project(p) for p in _by_name(matching)]

    def add_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> None:
        project_id = parse_identifier(project_id, "Project")
        employee_id = parse_identifier(employee_id, "Employee", "employee_id")
        store = self.store
        with store.locked("add team member", deadline, store.employee_lock, store.project_lock):
            project = store.projects.get(project_id)
            if project is None:
                raise create_not_found_error("Project", project_id)
            if employee_id not in store.employees:
                raise ConflictError(
                    message="Referenced employee does not exist",
                    field_errors=[
                        create_field_error("employee_id", "Employee does not exist", code="foreign_key")
                    ],
                )
            if employee_id not in project.team_member_ids:
                project.team_member_ids.append(employee_id)
                project.updated_at = utcnow()

    def remove_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> None:
        project_id = parse_identifier(project_id, "Project")
        employee_id = parse_identifier(employee_id, "Employee", "employee_id")
        with self.store.locked("remove team member", deadline, self.store.project_lock):
            project = self.store.projects.get(project_id)
            if project is None:
                raise create_not_found_error("Project", project_id)
            if employee_id in project.team_member_ids:
                project.team_member_ids.remove(employee_id)
                project.updated_at = utcnow()
