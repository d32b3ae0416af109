"""API route registration and error rendering for the REST face."""

from fastapi import APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from workforce.api.departments import department_router
from workforce.api.employees import employee_router
from workforce.api.projects import project_router
from workforce.utils.errors import (
    APIError,
    create_validation_error,
    field_errors_from_pydantic,
)


api_router = APIRouter(prefix="/api/v1")


# =============================================================================
# Register Routes
# =============================================================================

api_router.include_router(department_router)
api_router.include_router(employee_router)
api_router.include_router(project_router)


# =============================================================================
# Exception Handlers (to be registered with FastAPI app)
# =============================================================================

async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle API errors and return structured responses."""
    response = exc.to_response()
    headers = {"Retry-After": "1"} if response.retryable else None
    return JSONResponse(
        status_code=response.status_code,
        content=response.to_dict(),
        headers=headers,
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request body and parameter failures as 400 validation errors."""
    error = create_validation_error(field_errors_from_pydantic(exc.errors()))
    return await api_error_handler(request, error)
