"""Field validation and referential checks run before any store mutation."""

import re
from datetime import date
from typing import Iterable, List, Optional, Tuple

from workforce.data.deadline import Deadline
from workforce.data.records import DepartmentRecord, EmployeeRecord
from workforce.data.repositories import DepartmentRepository, EmployeeRepository
from workforce.utils.errors import (
    FieldError,
    NotFoundError,
    create_field_error,
    create_reference_error,
    create_validation_error,
)


# local-part@domain.tld, at least one dot in the domain, final label >= 2 letters
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")

# Matches the String(255) text columns
MAX_TEXT_LENGTH = 255


def is_valid_email(email: Optional[str]) -> bool:
    """Check the basic email shape."""
    if not email:
        return False
    return EMAIL_PATTERN.match(email) is not None


def _check_required(value: Optional[str], field: str, label: str) -> Optional[FieldError]:
    if value is None:
        return create_field_error(field, f"{label} is required", code="required")
    if not isinstance(value, str):
        return create_field_error(field, f"{label} must be a string", code="invalid_type")
    if not value.strip():
        return create_field_error(field, f"{label} is required", code="required")
    return None


def _check_text(value: Optional[str], field: str, label: str) -> Optional[FieldError]:
    """Required text no longer than the column allows."""
    error = _check_required(value, field, label)
    if error is None and len(value.strip()) > MAX_TEXT_LENGTH:
        error = create_field_error(
            field,
            f"{label} must be at most {MAX_TEXT_LENGTH} characters",
            code="too_long",
        )
    return error


def _raise_if_any(errors: List[Optional[FieldError]]) -> None:
    field_errors = [error for error in errors if error is not None]
    if field_errors:
        raise create_validation_error(field_errors)


def validate_department_fields(name: Optional[str]) -> str:
    """Return the trimmed department name or raise ValidationError."""
    _raise_if_any([_check_text(name, "name", "department name")])
    return name.strip()


def validate_employee_fields(
    name: Optional[str],
    email: Optional[str],
    department_id: Optional[str],
) -> Tuple[str, str, str]:
    """
    Validate employee fields and return ``(name, email, department_id)`` trimmed.

    Every failing field is reported in one ValidationError.
    """
    errors = [
        _check_text(name, "name", "name"),
        _check_required(department_id, "department_id", "department ID"),
    ]
    email_error = _check_text(email, "email", "email")
    if email_error is None and not is_valid_email(email.strip()):
        email_error = create_field_error("email", "invalid email format", code="invalid_format")
    errors.insert(1, email_error)
    _raise_if_any(errors)
    return name.strip(), email.strip(), department_id.strip()


def validate_project_fields(
    name: Optional[str],
    start_date: date,
    end_date: date,
    budget: float,
) -> str:
    """Validate project fields and return the trimmed name."""
    errors = [_check_text(name, "name", "project name")]
    if end_date < start_date:
        errors.append(
            create_field_error("end_date", "end date must not be before start date", code="invalid_range")
        )
    if budget is None or budget <= 0:
        errors.append(create_field_error("budget", "budget must be positive", code="invalid_range"))
    _raise_if_any(errors)
    return name.strip()


def ensure_department_exists(
    departments: DepartmentRepository,
    department_id: str,
    deadline: Optional[Deadline] = None,
) -> DepartmentRecord:
    """
    Resolve the department an employee will reference.

    A department that does not exist is reported as invalid input.
    """
    try:
        return departments.find_by_id(department_id, deadline)
    except NotFoundError:
        raise create_reference_error("Department", "department_id", department_id) from None


def ensure_employees_exist(
    employees: EmployeeRepository,
    employee_ids: Iterable[str],
    field: str = "team_member_ids",
    deadline: Optional[Deadline] = None,
) -> List[EmployeeRecord]:
    """Resolve every referenced employee, reporting the first missing one."""
    found = []
    for employee_id in employee_ids:
        try:
            found.append(employees.find_by_id(employee_id, deadline))
        except NotFoundError:
            raise create_reference_error("Employee", field, employee_id) from None
    return found
