"""
Error Handlers
Maps service-layer exceptions to JSON error responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import (
    AdminError,
    FunctionInvocationError,
    InvalidDecisionTransition,
    NotFoundError,
    ShippingPreconditionError,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

# Most specific classes first
ERROR_STATUS = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationFailed, status.HTTP_400_BAD_REQUEST),
    (ShippingPreconditionError, status.HTTP_400_BAD_REQUEST),
    (InvalidDecisionTransition, status.HTTP_409_CONFLICT),
    (FunctionInvocationError, status.HTTP_502_BAD_GATEWAY),
]


class APIError(Exception):
    """Base exception for errors raised directly by the API layer."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidRequestError(APIError):
    """Exception raised for invalid requests."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED)


def status_for(exc: AdminError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, message: str, error_type: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "type": error_type, "details": details or {}}},
    )


def setup_error_handlers(app: FastAPI) -> None:
    """
    Set up custom error handlers for the FastAPI app.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle custom API errors."""
        logger.error(
            f"API error: {exc.message}",
            extra={"status_code": exc.status_code, "details": exc.details,
                   "path": request.url.path},
        )
        return _error_response(exc.status_code, exc.message, exc.__class__.__name__, exc.details)

    @app.exception_handler(AdminError)
    async def admin_error_handler(request: Request, exc: AdminError):
        """Handle service-layer errors."""
        status_code = status_for(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={"status_code": status_code, "path": request.url.path},
        )
        return _error_response(status_code, exc.message, exc.__class__.__name__, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.warning(f"Validation error: {exc}", extra={"path": request.url.path})

        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "Request validation failed", "ValidationError",
            errors,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True, extra={"path": request.url.path})
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred",
            "InternalServerError",
        )
