"""Tests for the in-memory repositories."""

import threading
import uuid
from datetime import date

import pytest

from workforce.data.deadline import Deadline
from workforce.data.memory_repository import (
    InMemoryDepartmentRepository,
    InMemoryEmployeeRepository,
    InMemoryProjectRepository,
    InMemoryStore,
)
from workforce.data.records import (
    DepartmentRecord,
    EmployeeRecord,
    ProjectRecord,
    ProjectStatus,
)
from workforce.utils.errors import (
    ConflictError,
    ErrorKind,
    NotFoundError,
    StoreTimeoutError,
    ValidationError,
)


@pytest.fixture
def store():
    """Create an empty store."""
    return InMemoryStore()


@pytest.fixture
def departments(store):
    return InMemoryDepartmentRepository(store)


@pytest.fixture
def employees(store):
    return InMemoryEmployeeRepository(store)


@pytest.fixture
def projects(store):
    return InMemoryProjectRepository(store)


def make_department(name="Engineering"):
    return DepartmentRecord(id=str(uuid.uuid4()), name=name)


def make_employee(department_id, name="John Doe", email=None):
    return EmployeeRecord(
        id=str(uuid.uuid4()),
        name=name,
        email=email or f"{uuid.uuid4().hex[:8]}@example.com",
        department_id=department_id,
    )


def make_project(name="Apollo", team_member_ids=None, status=ProjectStatus.ACTIVE):
    return ProjectRecord(
        id=str(uuid.uuid4()),
        name=name,
        start_date=date(2026, 1, 1),
        end_date=date(2026, 6, 30),
        budget=1000.0,
        status=status,
        team_member_ids=list(team_member_ids or []),
    )


# =============================================================================
# Department Repository Tests
# =============================================================================

class TestInMemoryDepartmentRepository:
    """Tests for InMemoryDepartmentRepository."""

    def test_save_then_find_returns_same_id_and_name(self, departments):
        department = make_department()
        departments.save(department)

        found = departments.find_by_id(department.id)

        assert found.id == department.id
        assert found.name == "Engineering"
        assert found.created_at is not None
        assert found.updated_at >= found.created_at

    def test_find_all_empty_store_returns_empty_list(self, departments):
        assert departments.find_all() == []

    def test_find_all_ordered_by_name(self, departments):
        for name in ["Sales", "Engineering", "Marketing"]:
            departments.save(make_department(name))

        names = [d.name for d in departments.find_all()]

        assert names == ["Engineering", "Marketing", "Sales"]

    def test_find_by_malformed_id_raises_validation_error(self, departments):
        with pytest.raises(ValidationError) as exc_info:
            departments.find_by_id("not-a-uuid")

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.message == "invalid department ID"

    def test_find_missing_raises_not_found(self, departments):
        with pytest.raises(NotFoundError):
            departments.find_by_id(str(uuid.uuid4()))

    def test_save_duplicate_id_raises_conflict(self, departments):
        department = make_department()
        departments.save(department)

        with pytest.raises(ConflictError):
            departments.save(DepartmentRecord(id=department.id, name="Other"))

    def test_update_refreshes_updated_at_and_keeps_created_at(self, departments):
        department = make_department()
        departments.save(department)
        created_at = department.created_at

        department.name = "Platform"
        departments.update(department)
        found = departments.find_by_id(department.id)

        assert found.name == "Platform"
        assert found.created_at == created_at
        assert found.updated_at >= found.created_at

    def test_update_missing_raises_not_found(self, departments):
        with pytest.raises(NotFoundError):
            departments.update(make_department())

    def test_delete_twice_second_raises_not_found(self, departments):
        department = make_department()
        departments.save(department)

        departments.delete(department.id)
        with pytest.raises(NotFoundError):
            departments.delete(department.id)

    def test_delete_with_employees_is_rejected(self, departments, employees):
        department = make_department()
        departments.save(department)
        employees.save(make_employee(department.id))

        with pytest.raises(ConflictError):
            departments.delete(department.id)

        assert departments.find_by_id(department.id).id == department.id

    def test_returned_records_are_copies(self, departments):
        department = make_department()
        departments.save(department)

        found = departments.find_by_id(department.id)
        found.name = "Mutated"

        assert departments.find_by_id(department.id).name == "Engineering"

    def test_uppercase_id_is_canonicalised(self, departments):
        department = make_department()
        departments.save(department)

        found = departments.find_by_id(department.id.upper())

        assert found.id == department.id


# =============================================================================
# Employee Repository Tests
# =============================================================================

class TestInMemoryEmployeeRepository:
    """Tests for InMemoryEmployeeRepository."""

    @pytest.fixture
    def department(self, departments):
        department = make_department()
        departments.save(department)
        return department

    def test_save_and_find(self, employees, department):
        employee = make_employee(department.id, email="john@example.com")
        employees.save(employee)

        found = employees.find_by_id(employee.id)

        assert found.email == "john@example.com"
        assert found.department_id == department.id

    def test_duplicate_email_raises_conflict(self, employees, department):
        employees.save(make_employee(department.id, email="dup@example.com"))

        with pytest.raises(ConflictError) as exc_info:
            employees.save(make_employee(department.id, name="Jane", email="dup@example.com"))

        assert exc_info.value.field_errors[0].field == "email"
        assert exc_info.value.field_errors[0].code == "duplicate"
        assert len(employees.find_all()) == 1

    def test_unknown_department_raises_conflict(self, employees):
        with pytest.raises(ConflictError) as exc_info:
            employees.save(make_employee(str(uuid.uuid4())))

        assert exc_info.value.field_errors[0].field == "department_id"
        assert employees.find_all() == []

    def test_malformed_department_id_raises_validation_error(self, employees):
        with pytest.raises(ValidationError) as exc_info:
            employees.save(make_employee("bogus"))

        assert exc_info.value.field_errors[0].field == "department_id"

    def test_find_by_department_id_ordered_by_name(self, departments, employees, department):
        other = make_department("Sales")
        departments.save(other)
        employees.save(make_employee(department.id, name="Zoe"))
        employees.save(make_employee(department.id, name="Adam"))
        employees.save(make_employee(other.id, name="Bob"))

        names = [e.name for e in employees.find_by_department_id(department.id)]

        assert names == ["Adam", "Zoe"]

    def test_find_by_department_id_without_rows_is_empty(self, employees):
        assert employees.find_by_department_id(str(uuid.uuid4())) == []

    def test_update_email_to_own_value_is_allowed(self, employees, department):
        employee = make_employee(department.id, email="same@example.com")
        employees.save(employee)

        employee.name = "John Q. Doe"
        employees.update(employee)

        assert employees.find_by_id(employee.id).name == "John Q. Doe"

    def test_delete_removes_employee_from_project_teams(self, employees, projects, department):
        employee = make_employee(department.id)
        employees.save(employee)
        project = make_project(team_member_ids=[employee.id])
        projects.save(project)

        employees.delete(employee.id)

        assert projects.find_by_id(project.id).team_member_ids == []


# =============================================================================
# Project Repository Tests
# =============================================================================

class TestInMemoryProjectRepository:
    """Tests for InMemoryProjectRepository."""

    @pytest.fixture
    def employee(self, departments, employees):
        department = make_department()
        departments.save(department)
        employee = make_employee(department.id)
        employees.save(employee)
        return employee

    def test_save_with_unknown_member_raises_conflict(self, projects):
        with pytest.raises(ConflictError):
            projects.save(make_project(team_member_ids=[str(uuid.uuid4())]))

        assert projects.find_all() == []

    def test_duplicate_team_members_are_collapsed(self, projects, employee):
        project = make_project(team_member_ids=[employee.id, employee.id.upper()])
        projects.save(project)

        assert projects.find_by_id(project.id).team_member_ids == [employee.id]

    def test_find_by_status(self, projects):
        projects.save(make_project("Apollo"))
        projects.save(make_project("Gemini", status=ProjectStatus.COMPLETED))

        completed = projects.find_by_status(ProjectStatus.COMPLETED)

        assert [p.name for p in completed] == ["Gemini"]

    def test_find_by_employee_id(self, projects, employee):
        projects.save(make_project("Apollo", team_member_ids=[employee.id]))
        projects.save(make_project("Gemini"))

        assert [p.name for p in projects.find_by_employee_id(employee.id)] == ["Apollo"]

    def test_add_team_member_is_idempotent(self, projects, employee):
        project = make_project()
        projects.save(project)

        projects.add_team_member(project.id, employee.id)
        projects.add_team_member(project.id, employee.id)

        assert projects.find_by_id(project.id).team_member_ids == [employee.id]

    def test_remove_team_member(self, projects, employee):
        project = make_project(team_member_ids=[employee.id])
        projects.save(project)

        projects.remove_team_member(project.id, employee.id)

        assert projects.find_by_id(project.id).team_member_ids == []

    def test_add_team_member_missing_project_raises_not_found(self, projects, employee):
        with pytest.raises(NotFoundError):
            projects.add_team_member(str(uuid.uuid4()), employee.id)


# =============================================================================
# Deadline Tests
# =============================================================================

class TestInMemoryDeadlines:
    """Tests for deadline handling in the in-memory store."""

    def test_cancelled_deadline_fails_before_touching_store(self, departments):
        deadline = Deadline()
        deadline.cancel()

        with pytest.raises(StoreTimeoutError) as exc_info:
            departments.save(make_department(), deadline)

        assert exc_info.value.retryable is True
        assert exc_info.value.kind == ErrorKind.STORE_UNAVAILABLE
        assert departments.find_all() == []

    def test_lock_wait_is_bounded_by_deadline(self, store, departments):
        acquired = threading.Event()
        release = threading.Event()

        def hold_lock():
            with store.department_lock:
                acquired.set()
                release.wait(5)

        holder = threading.Thread(target=hold_lock)
        holder.start()
        acquired.wait(5)
        try:
            with pytest.raises(StoreTimeoutError):
                departments.find_all(Deadline.after(0.05))
        finally:
            release.set()
            holder.join()

    def test_unbounded_deadline_never_expires(self, departments):
        deadline = Deadline()

        departments.save(make_department(), deadline)

        assert deadline.remaining() is None
        assert len(departments.find_all(deadline)) == 1
