"""SQLAlchemy implementations of the repository contracts."""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, Iterable, List, Optional

from sqlalchemy import delete, insert, select, text
from sqlalchemy.exc import (
    DataError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, selectinload, sessionmaker

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
from workforce.database.database import session_scope
from workforce.models.base import utcnow
from workforce.models.organization import (
    Department,
    Employee,
    Project,
    project_team_members,
)
from workforce.utils.errors import (
    APIError,
    ConflictError,
    StoreTimeoutError,
    StoreUnavailableError,
    ValidationError,
    create_duplicate_error,
    create_field_error,
    create_not_found_error,
)

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for a statement cancelled by statement_timeout
QUERY_CANCELED = "57014"


def _integrity_message(exc: IntegrityError) -> str:
    return str(exc.orig).lower()


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    return "foreign key" in _integrity_message(exc)


def _is_query_canceled(exc: OperationalError) -> bool:
    return getattr(exc.orig, "pgcode", None) == QUERY_CANCELED


def _apply_statement_timeout(session: Session, deadline: Optional[Deadline]) -> None:
    """Bound the current transaction's statements by the deadline (PostgreSQL only)."""
    if deadline is None:
        return
    remaining = deadline.remaining()
    if remaining is None:
        return
    if session.get_bind().dialect.name != "postgresql":
        return
    timeout_ms = max(1, int(remaining * 1000))
    session.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))


class _SqlRepository:
    """Shared session handling and error mapping for SQL repositories."""

    resource_type = "Resource"

    def __init__(self, session_factory: sessionmaker[Session]):
        """Initialize repository with a session factory."""
        self.session_factory = session_factory

    @contextmanager
    def _session(
        self,
        operation: str,
        deadline: Optional[Deadline] = None,
        on_conflict: Optional[Callable[[IntegrityError], ConflictError]] = None,
    ) -> Generator[Session, None, None]:
        """
        Run one logical operation in its own transaction.

        Store failures are translated into the error taxonomy here; nothing
        from the driver escapes as its own exception type.
        """
        check_deadline(deadline, operation)
        try:
            with session_scope(self.session_factory) as session:
                _apply_statement_timeout(session, deadline)
                yield session
        except APIError:
            raise
        except IntegrityError as exc:
            logger.error(f"{operation} violated a store constraint: {exc.orig}")
            if on_conflict is not None:
                raise on_conflict(exc) from exc
            raise ConflictError(
                message=f"{self.resource_type} violates a store constraint",
                details={"operation": operation},
            ) from exc
        except DataError as exc:
            logger.warning(f"{operation} rejected by the store: {exc.orig}")
            raise ValidationError(
                message=f"{self.resource_type} data rejected by the store",
                details={"operation": operation},
            ) from exc
        except PoolTimeoutError as exc:
            logger.error(f"{operation} timed out waiting for a connection")
            raise StoreTimeoutError(
                message=f"{operation} timed out waiting for a connection",
                details={"operation": operation},
            ) from exc
        except OperationalError as exc:
            if _is_query_canceled(exc):
                logger.error(f"{operation} exceeded its statement timeout")
                raise StoreTimeoutError(
                    message=f"{operation} exceeded its deadline",
                    details={"operation": operation},
                ) from exc
            logger.error(f"{operation} failed: {exc.orig}")
            raise StoreUnavailableError(
                message=f"Failed to {operation}",
                details={"operation": operation},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error(f"{operation} failed: {exc}")
            raise StoreUnavailableError(
                message=f"Failed to {operation}",
                details={"operation": operation},
            ) from exc

    def _duplicate_id_conflict(self, identifier: str) -> ConflictError:
        return ConflictError(
            message=f"{self.resource_type} with id '{identifier}' already exists",
            details={"resource_type": self.resource_type, "identifier": identifier},
        )


# =============================================================================
# Departments
# =============================================================================

def _to_department_record(row: Department) -> DepartmentRecord:
    return DepartmentRecord(
        id=row.id,
        name=row.name,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlDepartmentRepository(_SqlRepository, DepartmentRepository):
    """Department repository backed by a relational store."""

    resource_type = "Department"

    def save(self, department: DepartmentRecord, deadline: Optional[Deadline] = None) -> None:
        department_id = parse_identifier(department.id, "Department")
        logger.debug(f"Saving department {department_id}")

        def conflict(exc: IntegrityError) -> ConflictError:
            return self._duplicate_id_conflict(department_id)

        with self._session("save department", deadline, conflict) as session:
            row = Department(id=department_id, name=department.name)
            session.add(row)
            session.flush()
            department.id = row.id
            department.created_at = row.created_at
            department.updated_at = row.updated_at

    def find_by_id(self, department_id: str, deadline: Optional[Deadline] = None) -> DepartmentRecord:
        department_id = parse_identifier(department_id, "Department")
        logger.debug(f"Finding department {department_id}")

        with self._session("find department", deadline) as session:
            row = session.get(Department, department_id)
            if row is None:
                raise create_not_found_error("Department", department_id)
            return _to_department_record(row)

    def find_all(self, deadline: Optional[Deadline] = None) -> List[DepartmentRecord]:
        logger.debug("Finding all departments")

        with self._session("list departments", deadline) as session:
            stmt = select(Department).order_by(Department.name, Department.id)
            rows = session.execute(stmt).scalars().all()
            return [_to_department_record(row) for row in rows]

    def update(self, department: DepartmentRecord, deadline: Optional[Deadline] = None) -> None:
        department_id = parse_identifier(department.id, "Department")
        logger.debug(f"Updating department {department_id}")

        with self._session("update department", deadline) as session:
            row = session.get(Department, department_id)
            if row is None:
                raise create_not_found_error("Department", department_id)
            row.name = department.name
            row.updated_at = utcnow()
            session.flush()
            department.created_at = row.created_at
            department.updated_at = row.updated_at

    def delete(self, department_id: str, deadline: Optional[Deadline] = None) -> None:
        department_id = parse_identifier(department_id, "Department")
        logger.debug(f"Deleting department {department_id}")

        def conflict(exc: IntegrityError) -> ConflictError:
            return ConflictError(
                message="Department is still referenced by employees",
                details={"resource_type": "Department", "identifier": department_id},
            )

        with self._session("delete department", deadline, conflict) as session:
            result = session.execute(
                delete(Department).where(Department.id == department_id)
            )
            if result.rowcount == 0:
                raise create_not_found_error("Department", department_id)


# =============================================================================
# Employees
# =============================================================================

def _to_employee_record(row: Employee) -> EmployeeRecord:
    return EmployeeRecord(
        id=row.id,
        name=row.name,
        email=row.email,
        department_id=row.department_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlEmployeeRepository(_SqlRepository, EmployeeRepository):
    """Employee repository backed by a relational store."""

    resource_type = "Employee"

    def _employee_conflict(self, employee: EmployeeRecord) -> Callable[[IntegrityError], ConflictError]:
        def conflict(exc: IntegrityError) -> ConflictError:
            message = _integrity_message(exc)
            if _is_foreign_key_violation(exc):
                return ConflictError(
                    message="Referenced department does not exist",
                    field_errors=[
                        create_field_error(
                            "department_id",
                            "Department does not exist",
                            code="foreign_key",
                        )
                    ],
                )
            if "email" in message:
                return create_duplicate_error("Employee", "email", employee.email)
            return self._duplicate_id_conflict(employee.id)

        return conflict

    def save(self, employee: EmployeeRecord, deadline: Optional[Deadline] = None) -> None:
        employee_id = parse_identifier(employee.id, "Employee")
        department_id = parse_identifier(employee.department_id, "Department", "department_id")
        logger.debug(f"Saving employee {employee_id} in department {department_id}")

        with self._session("save employee", deadline, self._employee_conflict(employee)) as session:
            row = Employee(
                id=employee_id,
                name=employee.name,
                email=employee.email,
                department_id=department_id,
            )
            session.add(row)
            session.flush()
            employee.id = row.id
            employee.department_id = row.department_id
            employee.created_at = row.created_at
            employee.updated_at = row.updated_at

    def find_by_id(self, employee_id: str, deadline: Optional[Deadline] = None) -> EmployeeRecord:
        employee_id = parse_identifier(employee_id, "Employee")
        logger.debug(f"Finding employee {employee_id}")

        with self._session("find employee", deadline) as session:
            row = session.get(Employee, employee_id)
            if row is None:
                raise create_not_found_error("Employee", employee_id)
            return _to_employee_record(row)

    def find_all(self, deadline: Optional[Deadline] = None) -> List[EmployeeRecord]:
        logger.debug("Finding all employees")

        with self._session("list employees", deadline) as session:
            stmt = select(Employee).order_by(Employee.name, Employee.id)
            rows = session.execute(stmt).scalars().all()
            return [_to_employee_record(row) for row in rows]

    def update(self, employee: EmployeeRecord, deadline: Optional[Deadline] = None) -> None:
        employee_id = parse_identifier(employee.id, "Employee")
        department_id = parse_identifier(employee.department_id, "Department", "department_id")
        logger.debug(f"Updating employee {employee_id}")

        with self._session("update employee", deadline, self._employee_conflict(employee)) as session:
            row = session.get(Employee, employee_id)
            if row is None:
                raise create_not_found_error("Employee", employee_id)
            row.name = employee.name
            row.email = employee.email
            row.department_id = department_id
            row.updated_at = utcnow()
            session.flush()
            employee.department_id = row.department_id
            employee.created_at = row.created_at
            employee.updated_at = row.updated_at

    def delete(self, employee_id: str, deadline: Optional[Deadline] = None) -> None:
        employee_id = parse_identifier(employee_id, "Employee")
        logger.debug(f"Deleting employee {employee_id}")

        with self._session("delete employee", deadline) as session:
            session.execute(
                delete(project_team_members).where(
                    project_team_members.c.employee_id == employee_id
                )
            )
            result = session.execute(delete(Employee).where(Employee.id == employee_id))
            if result.rowcount == 0:
                raise create_not_found_error("Employee", employee_id)

    def find_by_department_id(
        self,
        department_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        department_id = parse_identifier(department_id, "Department", "department_id")
        logger.debug(f"Finding employees of department {department_id}")

        with self._session("list department employees", deadline) as session:
            stmt = (
                select(Employee)
                .where(Employee.department_id == department_id)
                .order_by(Employee.name, Employee.id)
            )
            rows = session.execute(stmt).scalars().all()
            return [_to_employee_record(row) for row in rows]


# =============================================================================
# Projects
# =============================================================================

def _to_project_record(row: Project) -> ProjectRecord:
    return ProjectRecord(
        id=row.id,
        name=row.name,
        description=row.description,
        status=ProjectStatus(row.status),
        priority=row.priority,
        start_date=row.start_date,
        end_date=row.end_date,
        budget=row.budget,
        team_member_ids=[member.id for member in row.team_members],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlProjectRepository(_SqlRepository, ProjectRepository):
    """Project repository backed by a relational store."""

    resource_type = "Project"

    def _project_conflict(self, project_id: str) -> Callable[[IntegrityError], ConflictError]:
        def conflict(exc: IntegrityError) -> ConflictError:
            if _is_foreign_key_violation(exc):
                return ConflictError(
                    message="Referenced employee does not exist",
                    field_errors=[
                        create_field_error(
                            "team_member_ids",
                            "Employee does not exist",
                            code="foreign_key",
                        )
                    ],
                )
            return self._duplicate_id_conflict(project_id)

        return conflict

    def _query(self):
        return select(Project).options(selectinload(Project.team_members))

    def _load(self, session: Session, project_id: str) -> Project:
        row = session.execute(
            self._query().where(Project.id == project_id)
        ).scalar_one_or_none()
        if row is None:
            raise create_not_found_error("Project", project_id)
        return row

    def _insert_members(self, session: Session, project_id: str, member_ids: Iterable[str]) -> None:
        rows = [
            {"project_id": project_id, "employee_id": member_id}
            for member_id in member_ids
        ]
        if rows:
            session.execute(insert(project_team_members), rows)

    @staticmethod
    def _member_ids(project: ProjectRecord) -> List[str]:
        seen: List[str] = []
        for member_id in project.team_member_ids:
            canonical = parse_identifier(member_id, "Employee", "team_member_ids")
            if canonical not in seen:
                seen.append(canonical)
        return seen

    def save(self, project: ProjectRecord, deadline: Optional[Deadline] = None) -> None:
        project_id = parse_identifier(project.id, "Project")
        member_ids = self._member_ids(project)
        logger.debug(f"Saving project {project_id} with {len(member_ids)} team members")

        with self._session("save project", deadline, self._project_conflict(project_id)) as session:
            row = Project(
                id=project_id,
                name=project.name,
                description=project.description,
                status=project.status,
                priority=project.priority,
                start_date=project.start_date,
                end_date=project.end_date,
                budget=project.budget,
            )
            session.add(row)
            session.flush()
            self._insert_members(session, project_id, member_ids)
            project.id = row.id
            project.team_member_ids = member_ids
            project.created_at = row.created_at
            project.updated_at = row.updated_at

    def find_by_id(self, project_id: str, deadline: Optional[Deadline] = None) -> ProjectRecord:
        project_id = parse_identifier(project_id, "Project")
        logger.debug(f"Finding project {project_id}")

        with self._session("find project", deadline) as session:
            return _to_project_record(self._load(session, project_id))

    def find_all(self, deadline: Optional[Deadline] = None) -> List[ProjectRecord]:
        logger.debug("Finding all projects")

        with self._session("list projects", deadline) as session:
            stmt = self._query().order_by(Project.name, Project.id)
            rows = session.execute(stmt).scalars().all()
            return [_to_project_record(row) for row in rows]

    def update(self, project: ProjectRecord, deadline: Optional[Deadline] = None) -> None:
        project_id = parse_identifier(project.id, "Project")
        member_ids = self._member_ids(project)
        logger.debug(f"Updating project {project_id}")

        with self._session("update project", deadline, self._project_conflict(project_id)) as session:
            row = session.get(Project, project_id)
            if row is None:
                raise create_not_found_error("Project", project_id)
            row.name = project.name
            row.description = project.description
            row.status = project.status
            row.priority = project.priority
            row.start_date = project.start_date
            row.end_date = project.end_date
            row.budget = project.budget
            row.updated_at = utcnow()
            session.execute(
                delete(project_team_members).where(
                    project_team_members.c.project_id == project_id
                )
            )
            self._insert_members(session, project_id, member_ids)
            session.flush()
            project.team_member_ids = member_ids
            project.created_at = row.created_at
            project.updated_at = row.updated_at

    def delete(self, project_id: str, deadline: Optional[Deadline] = None) -> None:
        project_id = parse_identifier(project_id, "Project")
        logger.debug(f"Deleting project {project_id}")

        with self._session("delete project", deadline) as session:
            session.execute(
                delete(project_team_members).where(
                    project_team_members.c.project_id == project_id
                )
            )
            result = session.execute(delete(Project).where(Project.id == project_id))
            if result.rowcount == 0:
                raise create_not_found_error("Project", project_id)

    def find_by_status(
        self,
        status: ProjectStatus,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        logger.debug(f"Finding projects with status {status.value}")

        with self._session("list projects by status", deadline) as session:
            stmt = (
                self._query()
                .where(Project.status == status)
                .order_by(Project.name, Project.id)
            )
            rows = session.execute(stmt).scalars().all()
            return [_to_project_record(row) for row in rows]

    def find_by_employee_id(
        self,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[ProjectRecord]:
        employee_id = parse_identifier(employee_id, "Employee", "employee_id")
        logger.debug(f"Finding projects of employee {employee_id}")

        with self._session("list employee projects", deadline) as session:
            stmt = (
                self._query()
                .join(project_team_members, project_team_members.c.project_id == Project.id)
                .where(project_team_members.c.employee_id == employee_id)
                .order_by(Project.name, Project.id)
            )
            rows = session.execute(stmt).scalars().unique().all()
            return [_to_project_record(row) for row in rows]

    def add_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> None:
        project_id = parse_identifier(project_id, "Project")
        employee_id = parse_identifier(employee_id, "Employee", "employee_id")
        logger.debug(f"Adding employee {employee_id} to project {project_id}")

        with self._session("add team member", deadline, self._project_conflict(project_id)) as session:
            row = session.get(Project, project_id)
            if row is None:
                raise create_not_found_error("Project", project_id)
            existing = session.execute(
                select(project_team_members.c.employee_id).where(
                    project_team_members.c.project_id == project_id,
                    project_team_members.c.employee_id == employee_id,
                )
            ).first()
            if existing is None:
                self._insert_members(session, project_id, [employee_id])
                row.updated_at = utcnow()

    def remove_team_member(
        self,
        project_id: str,
        employee_id: str,
        deadline: Optional[Deadline] = None,
    ) -> None:
        project_id = parse_identifier(project_id, "Project")
        employee_id = parse_identifier(employee_id, "Employee", "employee_id")
        logger.debug(f"Removing employee {employee_id} from project {project_id}")

        with self._session("remove team member", deadline) as session:
            row = session.get(Project, project_id)
            if row is None:
                raise create_not_found_error("Project", project_id)
            result = session.execute(
                delete(project_team_members).where(
                    project_team_members.c.project_id == project_id,
                    project_team_members.c.employee_id == employee_id,
                )
            )
            if result.rowcount:
                row.updated_at = utcnow()
