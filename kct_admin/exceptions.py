"""
Domain exceptions raised by the service layer.
The API maps each of them to an HTTP status in api/errors.py.
"""

from typing import Any, Dict, List, Optional, Union


class AdminError(Exception):
    """Base class for service-layer errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AdminError):
    """Raised when a row does not exist."""

    def __init__(self, resource: str, resource_id: Union[str, int, None] = None):
        super().__init__(
            f"{resource} not found",
            details={"resource": resource, "id": str(resource_id) if resource_id else None},
        )
        self.resource = resource
        self.resource_id = resource_id


class ValidationFailed(AdminError):
    """Raised when submitted data fails validation. Carries every message."""

    def __init__(self, errors: Union[str, List[str]]):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors), details={"errors": self.errors})


class CSVImportError(ValidationFailed):
    """Raised when a CSV file has row errors; nothing is imported."""


class InvalidDecisionTransition(AdminError):
    """Raised for an illegal vendor import decision change."""

    def __init__(self, current: str, target: str, item_id: Any = None):
        super().__init__(
            f"Cannot change decision from '{current}' to '{target}'",
            details={"current": current, "target": target, "id": item_id},
        )
        self.current = current
        self.target = target


class ShippingPreconditionError(AdminError):
    """Raised when a shipping step is attempted out of order."""


class FunctionInvocationError(AdminError):
    """Raised when a remote edge function fails."""

    def __init__(self, function_name: str, message: str, status_code: Optional[int] = None,
                 payload: Any = None):
        super().__init__(
            f"{function_name}: {message}",
            details={"function": function_name, "status_code": status_code},
        )
        self.function_name = function_name
        self.status_code = status_code
        self.payload = payload
