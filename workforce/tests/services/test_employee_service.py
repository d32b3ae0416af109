"""Tests for employee, department and project services."""

import uuid
from datetime import date
from unittest.mock import MagicMock

import pytest

from workforce.data.factory import build_memory_repositories
from workforce.data.records import ProjectStatus
from workforce.services.department_service import DepartmentService
from workforce.services.employee_service import EmployeeService
from workforce.services.project_service import ProjectService
from workforce.utils.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def repositories():
    return build_memory_repositories()


@pytest.fixture
def department_service(repositories):
    return DepartmentService(repositories.departments, repositories.employees)


@pytest.fixture
def employee_service(repositories):
    return EmployeeService(repositories.employees, repositories.departments)


@pytest.fixture
def project_service(repositories):
    return ProjectService(repositories.projects, repositories.employees)


@pytest.fixture
def engineering(department_service):
    return department_service.create_department("Engineering")


class TestEmployeeService:
    """Tests for EmployeeService."""

    def test_service_initialization(self):
        employees = MagicMock()
        departments = MagicMock()

        service = EmployeeService(employees, departments)

        assert service.employees == employees
        assert service.departments == departments

    def test_create_employee(self, employee_service, engineering):
        employee = employee_service.create_employee("John Doe", "john@x.com", engineering.id)

        assert uuid.UUID(employee.id)
        assert employee.department_id == engineering.id
        assert employee_service.get_employee(employee.id).email == "john@x.com"

    def test_invalid_fields_never_reach_store(self):
        employees = MagicMock()
        departments = MagicMock()
        service = EmployeeService(employees, departments)

        with pytest.raises(ValidationError):
            service.create_employee("John", "bad-email", str(uuid.uuid4()))

        departments.find_by_id.assert_not_called()
        employees.save.assert_not_called()

    def test_unknown_department_creates_nothing(self, employee_service):
        with pytest.raises(ValidationError) as exc_info:
            employee_service.create_employee("John", "john@x.com", str(uuid.uuid4()))

        assert exc_info.value.message == "department not found"
        assert employee_service.list_employees() == []

    def test_duplicate_email_conflicts(self, employee_service, engineering):
        employee_service.create_employee("John", "john@x.com", engineering.id)

        with pytest.raises(ConflictError):
            employee_service.create_employee("Johnny", "john@x.com", engineering.id)

    def test_move_to_another_department(self, department_service, employee_service, engineering):
        sales = department_service.create_department("Sales")
        employee = employee_service.create_employee("John Doe", "john@x.com", engineering.id)

        employee_service.update_employee(employee.id, "John Doe", "john@x.com", sales.id)

        assert employee_service.list_employees_by_department(engineering.id) == []
        moved = employee_service.list_employees_by_department(sales.id)
        assert [e.name for e in moved] == ["John Doe"]

    def test_update_missing_employee_is_not_found(self, employee_service, engineering):
        with pytest.raises(NotFoundError):
            employee_service.update_employee(
                str(uuid.uuid4()), "John", "john@x.com", engineering.id
            )

    def test_update_to_unknown_department_is_invalid(self, employee_service, engineering):
        employee = employee_service.create_employee("John", "john@x.com", engineering.id)

        with pytest.raises(ValidationError):
            employee_service.update_employee(employee.id, "John", "john@x.com", str(uuid.uuid4()))

        assert employee_service.get_employee(employee.id).department_id == engineering.id

    def test_delete_twice(self, employee_service, engineering):
        employee = employee_service.create_employee("John", "john@x.com", engineering.id)

        employee_service.delete_employee(employee.id)
        with pytest.raises(NotFoundError):
            employee_service.delete_employee(employee.id)


class TestDepartmentService:
    """Tests for DepartmentService."""

    def test_rename(self, department_service, engineering):
        renamed = department_service.update_department(engineering.id, " Platform ")

        assert renamed.name == "Platform"
        assert department_service.get_department(engineering.id).name == "Platform"

    def test_list_employees_of_missing_department(self, department_service):
        with pytest.raises(NotFoundError):
            department_service.list_department_employees(str(uuid.uuid4()))

    def test_list_departments_empty(self, department_service):
        assert department_service.list_departments() == []


class TestProjectService:
    """Tests for ProjectService."""

    @pytest.fixture
    def employee(self, employee_service, engineering):
        return employee_service.create_employee("Ada", "ada@x.com", engineering.id)

    def create(self, project_service, team=(), name="Apollo"):
        return project_service.create_project(
            name=name,
            start_date=date(2026, 1, 1),
            end_date=date(2026, 3, 1),
            budget=100.0,
            team_member_ids=team,
        )

    def test_create_with_unknown_member_is_invalid(self, project_service):
        with pytest.raises(ValidationError) as exc_info:
            self.create(project_service, team=[str(uuid.uuid4())])

        assert exc_info.value.message == "employee not found"
        assert project_service.list_projects() == []

    def test_update_without_team_keeps_team(self, project_service, employee):
        project = self.create(project_service, team=[employee.id])

        project_service.update_project(
            project.id,
            name="Apollo II",
            start_date=date(2026, 1, 1),
            end_date=date(2026, 4, 1),
            budget=150.0,
            status=ProjectStatus.COMPLETED,
        )

        found = project_service.get_project(project.id)
        assert found.name == "Apollo II"
        assert found.team_member_ids == [employee.id]
        assert [p.id for p in project_service.list_projects_by_status(ProjectStatus.COMPLETED)] == [
            project.id
        ]

    def test_team_membership(self, project_service, employee):
        project = self.create(project_service)

        added = project_service.add_team_member(project.id, employee.id)
        assert added.team_member_ids == [employee.id]
        assert [p.id for p in project_service.list_projects_for_employee(employee.id)] == [project.id]

        removed = project_service.remove_team_member(project.id, employee.id)
        assert removed.team_member_ids == []

    def test_add_unknown_employee_is_invalid(self, project_service):
        project = self.create(project_service)

        with pytest.raises(ValidationError) as exc_info:
            project_service.add_team_member(project.id, str(uuid.uuid4()))

        assert exc_info.value.field_errors[0].field == "employee_id"
