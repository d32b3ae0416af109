"""Tests for the department cascade delete."""

import uuid
from unittest.mock import MagicMock, call

import pytest

from workforce.data.factory import build_memory_repositories
from workforce.data.records import DepartmentRecord, EmployeeRecord
from workforce.services.cascade_delete import cascade_delete_department
from workforce.services.department_service import DepartmentService
from workforce.services.employee_service import EmployeeService
from workforce.utils.errors import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)


def make_employee(department_id, name):
    return EmployeeRecord(
        id=str(uuid.uuid4()),
        name=name,
        email=f"{name.lower()}@example.com",
        department_id=department_id,
    )


@pytest.fixture
def department():
    return DepartmentRecord(id=str(uuid.uuid4()), name="Engineering")


@pytest.fixture
def mock_departments(department):
    departments = MagicMock()
    departments.find_by_id.return_value = department
    return departments


@pytest.fixture
def mock_employees():
    return MagicMock()


class TestCascadeDeleteWithMocks:
    """Cascade steps checked against repository doubles."""

    def test_missing_department_stops_before_side_effects(self, mock_departments, mock_employees):
        mock_departments.find_by_id.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            cascade_delete_department(mock_departments, mock_employees, str(uuid.uuid4()))

        mock_employees.find_by_department_id.assert_not_called()
        mock_departments.delete.assert_not_called()

    def test_enumeration_failure_aborts_before_mutation(
        self, department, mock_departments, mock_employees
    ):
        mock_employees.find_by_department_id.side_effect = ConflictError()

        with pytest.raises(StoreUnavailableError) as exc_info:
            cascade_delete_department(mock_departments, mock_employees, department.id)

        assert exc_info.value.message == "Failed to check department employees"
        mock_employees.delete.assert_not_called()
        mock_departments.delete.assert_not_called()

    def test_partial_failure_continues_and_is_reported(
        self, department, mock_departments, mock_employees
    ):
        alice = make_employee(department.id, "Alice")
        bob = make_employee(department.id, "Bob")
        carol = make_employee(department.id, "Carol")
        mock_employees.find_by_department_id.return_value = [alice, bob, carol]
        mock_employees.delete.side_effect = [None, StoreUnavailableError(), None]

        result = cascade_delete_department(mock_departments, mock_employees, department.id)

        assert mock_employees.delete.call_args_list == [
            call(alice.id, None),
            call(bob.id, None),
            call(carol.id, None),
        ]
        mock_departments.delete.assert_called_once_with(department.id, None)
        assert result.deleted_employee_ids == [alice.id, carol.id]
        assert [f.employee_id for f in result.failed_employee_deletes] == [bob.id]
        assert result.complete is False
        assert result.to_dict()["failed_employee_deletes"][0]["code"] == "store_unavailable"

    def test_partial_failure_is_logged_as_warning(
        self, department, mock_departments, mock_employees, caplog
    ):
        employee = make_employee(department.id, "Alice")
        mock_employees.find_by_department_id.return_value = [employee]
        mock_employees.delete.side_effect = StoreUnavailableError()

        with caplog.at_level("WARNING"):
            cascade_delete_department(mock_departments, mock_employees, department.id)

        assert any(employee.id in record.message for record in caplog.records)

    def test_parent_delete_failure_surfaces(self, department, mock_departments, mock_employees):
        mock_employees.find_by_department_id.return_value = []
        mock_departments.delete.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            cascade_delete_department(mock_departments, mock_employees, department.id)


class TestCascadeDeleteInMemory:
    """End-to-end cascade scenarios over the in-memory store."""

    @pytest.fixture
    def services(self):
        repos = build_memory_repositories()
        return (
            DepartmentService(repos.departments, repos.employees),
            EmployeeService(repos.employees, repos.departments),
        )

    def test_delete_department_removes_all_employees(self, services):
        department_service, employee_service = services
        department = department_service.create_department("Engineering")
        first = employee_service.create_employee("Alice", "alice@example.com", department.id)
        second = employee_service.create_employee("Bob", "bob@example.com", department.id)

        result = department_service.delete_department(department.id)

        assert result.complete is True
        assert sorted(result.deleted_employee_ids) == sorted([first.id, second.id])
        assert employee_service.list_employees_by_department(department.id) == []
        with pytest.raises(NotFoundError):
            department_service.get_department(department.id)
        with pytest.raises(NotFoundError):
            department_service.delete_department(department.id)

    def test_delete_department_without_employees(self, services):
        department_service, _ = services
        department = department_service.create_department("Empty")

        result = department_service.delete_department(department.id)

        assert result.deleted_employee_ids == []
        assert result.complete is True

    def test_malformed_id_is_invalid_input(self, services):
        department_service, _ = services

        with pytest.raises(ValidationError):
            department_service.delete_department("nope")
