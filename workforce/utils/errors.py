"""Custom exception classes and error response utilities."""

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories surfaced by the core."""

    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass
class FieldError:
    """Error details for a specific field."""

    field: str
    message: str
    code: str = "invalid"

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for JSON response."""
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
        }


@dataclass
class ErrorResponse:
    """Structured error response for API endpoints."""

    message: str
    status_code: int
    error_code: str
    kind: ErrorKind
    retryable: bool = False
    details: Optional[Dict[str, Any]] = None
    field_errors: List[FieldError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "error": {
                "message": self.message,
                "code": self.error_code,
                "kind": self.kind.value,
                "retryable": self.retryable,
            }
        }

        if self.details:
            result["error"]["details"] = self.details

        if self.field_errors:
            result["error"]["field_errors"] = [
                fe.to_dict() for fe in self.field_errors
            ]

        return result


class APIError(Exception):
    """Base exception for every failure the core surfaces to its callers."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE
    retryable: bool = False
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        field_errors: Optional[List[FieldError]] = None,
    ):
        self.message = message or self.__class__.message
        self.details = details
        self.field_errors = field_errors or []
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to structured error response."""
        return ErrorResponse(
            message=self.message,
            status_code=self.status_code,
            error_code=self.error_code,
            kind=self.kind,
            retryable=self.retryable,
            details=self.details,
            field_errors=self.field_errors,
        )


class ValidationError(APIError):
    """Malformed identifier, empty required field, bad email, unresolved reference."""

    status_code: int = HTTPStatus.BAD_REQUEST
    error_code: str = "validation_error"
    kind: ErrorKind = ErrorKind.INVALID_INPUT
    message: str = "Request validation failed"


class NotFoundError(APIError):
    """Exception for resource not found."""

    status_code: int = HTTPStatus.NOT_FOUND
    error_code: str = "not_found"
    kind: ErrorKind = ErrorKind.NOT_FOUND
    message: str = "Resource not found"


class ConflictError(APIError):
    """Exception for store-level constraint violations."""

    status_code: int = HTTPStatus.CONFLICT
    error_code: str = "conflict"
    kind: ErrorKind = ErrorKind.CONFLICT
    message: str = "Resource conflicts with existing data"


class StoreUnavailableError(APIError):
    """Exception for store I/O and connection failures. Always retryable."""

    status_code: int = HTTPStatus.SERVICE_UNAVAILABLE
    error_code: str = "store_unavailable"
    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE
    retryable: bool = True
    message: str = "Data store is unavailable"


class StoreTimeoutError(StoreUnavailableError):
    """Store operation exceeded its deadline or was cancelled."""

    error_code: str = "store_timeout"
    message: str = "Data store operation timed out"


def create_field_error(field: str, message: str, code: str = "invalid") -> FieldError:
    """Helper to create a field error."""
    return FieldError(field=field, message=message, code=code)


def create_validation_error(field_errors: List[FieldError]) -> ValidationError:
    """Create a validation error with field-level details."""
    message = "Request validation failed"
    if len(field_errors) == 1:
        message = field_errors[0].message
    return ValidationError(message=message, field_errors=field_errors)


def create_not_found_error(resource_type: str, identifier: Any) -> NotFoundError:
    """Create a not found error for a specific resource."""
    return NotFoundError(
        message=f"{resource_type} not found",
        details={"resource_type": resource_type, "identifier": str(identifier)},
    )


def create_invalid_id_error(resource_type: str, field: str, value: Any) -> ValidationError:
    """Create a validation error for a malformed identifier."""
    return ValidationError(
        message=f"invalid {resource_type.lower()} ID",
        details={"resource_type": resource_type, "identifier": str(value)},
        field_errors=[
            FieldError(field=field, message="must be a valid UUID", code="invalid_id")
        ],
    )


def create_reference_error(resource_type: str, field: str, value: Any) -> ValidationError:
    """Create a validation error for a reference that does not resolve."""
    return ValidationError(
        message=f"{resource_type.lower()} not found",
        details={"resource_type": resource_type, "identifier": str(value)},
        field_errors=[
            FieldError(
                field=field,
                message=f"{resource_type} does not exist",
                code="not_found",
            )
        ],
    )


def create_duplicate_error(
    resource_type: str,
    field: str,
    value: Any,
) -> ConflictError:
    """Create a conflict error for a duplicate unique field."""
    return ConflictError(
        message=f"{resource_type} with {field} '{value}' already exists",
        field_errors=[
            FieldError(
                field=field,
                message=f"This {field} is already in use",
                code="duplicate",
            )
        ],
    )


def field_errors_from_pydantic(errors: List[Dict[str, Any]]) -> List[FieldError]:
    """Flatten pydantic error entries into field errors."""
    field_errors = []
    for error in errors:
        loc = [str(x) for x in error["loc"] if x != "body"]
        field_errors.append(
            FieldError(
                field=".".join(loc) or "body",
                message=error["msg"],
                code=error["type"],
            )
        )
    return field_errors
