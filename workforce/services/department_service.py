"""Department service shared by the REST and graph API faces."""

import logging
from typing import List, Optional

from workforce.data.deadline import Deadline
from workforce.data.records import DepartmentRecord, EmployeeRecord
from workforce.data.repositories import (
    DepartmentRepository,
    EmployeeRepository,
    new_identifier,
)
from workforce.services.cascade_delete import CascadeDeleteResult, cascade_delete_department
from workforce.services.validation import validate_department_fields

logger = logging.getLogger(__name__)


class DepartmentService:
    """
    Service layer for department operations.

    Validates input before touching the store and deletes departments
    through the cascade orchestrator.
    """

    def __init__(self, departments: DepartmentRepository, employees: EmployeeRepository):
        """Initialize service with its repositories."""
        self.departments = departments
        self.employees = employees

    def create_department(self, name: Optional[str], deadline: Optional[Deadline] = None) -> DepartmentRecord:
        """Create a department with a freshly generated id."""
        name = validate_department_fields(name)
        department = DepartmentRecord(id=new_identifier(), name=name)
        self.departments.save(department, deadline)
        logger.info(f"Created department {department.id}")
        return department

    def get_department(self, department_id: str, deadline: Optional[Deadline] = None) -> DepartmentRecord:
        """Raises NotFoundError if the department doesn't exist."""
        return self.departments.find_by_id(department_id, deadline)

    def list_departments(self, deadline: Optional[Deadline] = None) -> List[DepartmentRecord]:
        return self.departments.find_all(deadline)

    def update_department(
        self,
        department_id: str,
        name: Optional[str],
        deadline: Optional[Deadline] = None,
    ) -> DepartmentRecord:
        """Rename a department."""
        name = validate_department_fields(name)
        department = self.departments.find_by_id(department_id, deadline)
        department.name = name
        self.departments.update(department, deadline)
        logger.info(f"Updated department {department.id}")
        return department

    def delete_department(self, department_id: str, deadline: Optional[Deadline] = None) -> CascadeDeleteResult:
        """Delete a department together with its employees."""
        return cascade_delete_department(
            self.departments,
            self.employees,
            department_id,
            deadline,
        )

    def list_department_employees(
        self,
        department_id: str,
        deadline: Optional[Deadline] = None,
    ) -> List[EmployeeRecord]:
        """List the employees of an existing department."""
        department = self.departments.find_by_id(department_id, deadline)
        return self.employees.find_by_department_id(department.id, deadline)
