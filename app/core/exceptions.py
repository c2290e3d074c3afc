"""
Application exceptions.

Services raise these; the handlers registered in app.main turn them into the
standard error envelope. Client errors (not found, validation, conflict) are
never retried; InfrastructureError marks a failure that may succeed on retry.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes exposed in API error responses"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    ROOM_FULL = "ROOM_FULL"
    ALREADY_ADMITTED = "ALREADY_ADMITTED"
    ALREADY_DISCHARGED = "ALREADY_DISCHARGED"
    BILL_SETTLED = "BILL_SETTLED"
    NOTHING_TO_BILL = "NOTHING_TO_BILL"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base exception carrying an HTTP status and a stable error code"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class NotFoundError(AppException):
    """A referenced entity does not exist"""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} with ID {resource_id} not found.",
            ErrorCode.RESOURCE_NOT_FOUND,
            404,
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class ValidationError(AppException):
    """Malformed input or a business rule rejecting the request"""

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, 400, details)


class ConflictError(AppException):
    """The request collides with current state (capacity, active admission, settled bill)"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFLICT,
        status_code: int = 409,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, status_code, details)


class InfrastructureError(AppException):
    """Database or transport failure; the transaction was rolled back"""

    def __init__(self, message: str = "Service temporarily unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.DATABASE_ERROR, 503, details)
