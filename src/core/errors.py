"""
Custom exceptions and error handling for the PlanIt trip history service.

Defines application-specific exceptions with error codes for consistent
error handling across Lambda handlers and client communication.

Usage:
    from core.errors import ForbiddenError, ErrorCode

    raise ForbiddenError("Trip owned by another user", code=ErrorCode.ACCESS_DENIED)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Authentication errors
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_FAILED = "AUTH_FAILED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRIP_ID = "INVALID_TRIP_ID"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Trip errors
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    TRIP_ALREADY_EXISTS = "TRIP_ALREADY_EXISTS"

    # Audit errors
    AUDIT_WRITE_FAILED = "AUDIT_WRITE_FAILED"

    # System errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_REQUIRED: "Authentication is required. Please sign in.",
    ErrorCode.AUTH_FAILED: "Authentication failed. Please sign in again.",
    ErrorCode.INVALID_TOKEN: "Your session has expired. Please sign in again.",
    ErrorCode.VALIDATION_ERROR: "Your request contains invalid information. Please check and try again.",
    ErrorCode.INVALID_TRIP_ID: "Invalid trip ID format. It must be a valid UUID.",
    ErrorCode.INVALID_REQUEST: "Invalid request format. Please try again.",
    ErrorCode.TRIP_NOT_FOUND: "The requested trip does not exist.",
    ErrorCode.ACCESS_DENIED: "You do not have permission to access this trip.",
    ErrorCode.TRIP_ALREADY_EXISTS: "A trip with this ID already exists.",
    ErrorCode.AUDIT_WRITE_FAILED: "The audit trail could not be updated.",
    ErrorCode.STORE_UNAVAILABLE: "Trip history is temporarily unavailable. Please try again later.",
    ErrorCode.TIMEOUT: "The request timed out. Please try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}

HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.AUTH_REQUIRED: 401,
    ErrorCode.AUTH_FAILED: 401,
    ErrorCode.INVALID_TOKEN: 401,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_TRIP_ID: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.TRIP_NOT_FOUND: 404,
    ErrorCode.ACCESS_DENIED: 403,
    ErrorCode.TRIP_ALREADY_EXISTS: 409,
    ErrorCode.AUDIT_WRITE_FAILED: 500,
    ErrorCode.STORE_UNAVAILABLE: 503,
    ErrorCode.TIMEOUT: 503,
    ErrorCode.INTERNAL_ERROR: 500,
}


class PlanItError(Exception):
    """Base exception for all PlanIt errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])

    @property
    def status_code(self) -> int:
        return HTTP_STATUS.get(self.code, 500)


class AuthenticationError(PlanItError):
    """Authentication failed or is required but missing."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUTH_FAILED):
        super().__init__(message, code)


class ValidationError(PlanItError):
    """Malformed query parameters, path parameters or body."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, code)


class NotFoundError(PlanItError):
    """No live trip with the requested id."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.TRIP_NOT_FOUND):
        super().__init__(message, code)


class ForbiddenError(PlanItError):
    """The trip exists but the requester does not own it."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ACCESS_DENIED):
        super().__init__(message, code)


class ConflictError(PlanItError):
    """Integrity violation, e.g. a colliding trip id on create."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.TRIP_ALREADY_EXISTS):
        super().__init__(message, code)


class StoreUnavailableError(PlanItError):
    """Backing store unreachable, pool exhausted, or statement timed out."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORE_UNAVAILABLE):
        super().__init__(message, code)


class AuditWriteFailedError(PlanItError):
    """An audit entry could not be appended. Never surfaced to HTTP callers."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUDIT_WRITE_FAILED):
        super().__init__(message, code)
