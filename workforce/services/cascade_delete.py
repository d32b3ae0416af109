"""Department delete that first removes the employees referencing it."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from workforce.data.deadline import Deadline
from workforce.data.repositories import DepartmentRepository, EmployeeRepository
from workforce.utils.errors import (
    APIError,
    NotFoundError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


@dataclass
class EmployeeDeleteFailure:
    """A dependent employee that could not be deleted."""

    employee_id: str
    error: APIError

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "code": self.error.error_code,
            "kind": self.error.kind.value,
            "message": self.error.message,
        }


@dataclass
class CascadeDeleteResult:
    """
    Outcome of a cascade delete that removed the department.

    ``failed_employee_deletes`` lists dependents whose delete failed; they
    may survive the department if the store permits orphans.
    """

    department_id: str
    deleted_employee_ids: List[str] = field(default_factory=list)
    failed_employee_deletes: List[EmployeeDeleteFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_employee_deletes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "department_id": self.department_id,
            "deleted_employee_ids": list(self.deleted_employee_ids),
            "failed_employee_deletes": [f.to_dict() for f in self.failed_employee_deletes],
            "complete": self.complete,
        }


def cascade_delete_department(
    departments: DepartmentRepository,
    employees: EmployeeRepository,
    department_id: str,
    deadline: Optional[Deadline] = None,
) -> CascadeDeleteResult:
    """
    Delete a department and, before it, every employee that references it.

    Steps:
    1. Verify the department exists (NotFoundError stops here, nothing changed).
    2. Enumerate its employees. Any failure aborts with StoreUnavailableError
       before anything is mutated.
    3. Delete each employee. A failed delete is recorded and the batch
       continues; this is best effort, not all-or-nothing.
    4. Delete the department. Its failure is raised to the caller.

    Employees created between steps 2 and 4 are not seen by this call.
    """
    department = departments.find_by_id(department_id, deadline)

    try:
        dependents = employees.find_by_department_id(department.id, deadline)
    except NotFoundError:
        dependents = []
    except StoreUnavailableError:
        raise
    except APIError as exc:
        logger.error(f"Could not enumerate employees of department {department.id}: {exc.message}")
        raise StoreUnavailableError(
            message="Failed to check department employees",
            details={"department_id": department.id},
        ) from exc

    result = CascadeDeleteResult(department_id=department.id)

    for employee in dependents:
        try:
            employees.delete(employee.id, deadline)
        except APIError as exc:
            logger.warning(
                f"Cascade delete of department {department.id}: "
                f"failed to delete employee {employee.id}: {exc.message}"
            )
            result.failed_employee_deletes.append(
                EmployeeDeleteFailure(employee_id=employee.id, error=exc)
            )
            continue
        result.deleted_employee_ids.append(employee.id)

    departments.delete(department.id, deadline)

    logger.info(
        f"Deleted department {department.id}: "
        f"{len(result.deleted_employee_ids)} employees removed, "
        f"{len(result.failed_employee_deletes)} failed"
    )
    return result
