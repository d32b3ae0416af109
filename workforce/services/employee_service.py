"""Employee service for business logic and referential checks."""

import logging
from typing import List, Optional

from workforce.data.deadline import Deadline
from workforce.data.records import EmployeeRecord
from workforce.data.repositories import (
    DepartmentRepository,
    EmployeeRepository,
    new_identifier,
)
from workforce.services.validation import (
    ensure_department_exists,
    validate_employee_fields,
)

logger = logging.getLogger(__name__)


class EmployeeService:
    """
    Service layer for employee CRUD operations.

    Create and update run in three stages: field validation, the
    department existence check, then the repository call.
    """

    def __init__(self, employees: EmployeeRepository, departments: DepartmentRepository):
        """Initialize service with its repositories."""
        self.employees = employees
        self.departments = departments

    # =========================================================================
    # Create Operations
    # =========================================================================

    def create_employee(
        self,
        name: Optional[str],
        email: Optional[str],
        department_id: Optional[str],
        deadline: Optional[Deadline] = None,
    ) -> EmployeeRecord:
        """
        Create a new employee.

        Raises ValidationError for bad fields or an unknown department and
        ConflictError when the email is already taken.
        """
        name, email, department_id = validate_employee_fields(name, email, department_id)
        department = ensure_department_exists(self.departments, department_id, deadline)

        employee = EmployeeRecord(
            id=new_identifier(),
            name=name,
            email=email,
            department_id=department.id,
        )
        self.employees.save(employee, deadline)
        logger.info(f"Created employee {employee.id} in department {department.id}")
        return employee

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_employee(self, employee_id: str, deadline: Optional[Deadline] = None) -> EmployeeRecord:
        """Raises NotFoundError if employee doesn't exist."""
        return self.employees.find_by_id(employee_id, deadline)

    def list_employees(self, deadline: Optional[Deadline] = None) -> List[EmployeeRecord]:
        return self.employees.find_all(deadline)

    def list_employees_by_department(
        self,
        department_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        return self.employees.find_by_department_id(department_id, deadline)

    # =========================================================================
    # Update / Delete Operations
    # =========================================================================

    def update_employee(
        self,
        employee_id: str,
        name: Optional[str],
        email: Optional[str],
        department_id: Optional[str],
        deadline: Optional[Deadline] = None,
    ) -> EmployeeRecord:
        """
        Replace name, email and department of an employee.

        Moving an employee to another department goes through the same
        existence check as create.
        """
        name, email, department_id = validate_employee_fields(name, email, department_id)
        employee = self.employees.find_by_id(employee_id, deadline)
        department = ensure_department_exists(self.departments, department_id, deadline)

        employee.name = name
        employee.email = email
        employee.department_id = department.id
        self.employees.update(employee, deadline)
        logger.info(f"Updated employee {employee.id}")
        return employee

    def delete_employee(self, employee_id: str, deadline: Optional[Deadline] = None) -> None:
        self.employees.delete(employee_id, deadline)
        logger.info(f"Deleted employee {employee_id}")
