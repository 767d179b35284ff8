"""
Domain exceptions for attendance operations

All of them are atams AppExceptions so they carry an HTTP status code,
but they render as {"error": ..., "details": ...} for the face scan and
scheduler clients instead of the generic atams envelope.
"""
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from atams.exceptions import AppException
from atams.logging import get_logger

logger = get_logger(__name__)


class AttendanceError(AppException):
    """Base class for errors reported as {"error": message}"""


class InvalidInput(AttendanceError):
    """400 - a required request field is missing or unacceptable"""

    def __init__(
        self,
        message: str = "Invalid input",
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None
    ):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)
        self.hint = hint


class ConfigurationError(AttendanceError):
    """500 - provider credentials or environment are missing"""

    def __init__(self, message: str = "Service not configured", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class ProviderError(AttendanceError):
    """500 - an external provider call failed or returned an error"""

    def __init__(self, message: str = "Provider request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class NotFound(AttendanceError):
    """404 - a user or row required by an administrative operation is absent"""

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class AttendanceConflict(AttendanceError):
    """409 - the attendance row changed between read and conditional write"""

    def __init__(self, message: str = "Attendance was updated by another request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class ArchiveError(AttendanceError):
    """500 - copying live rows into attendance_history failed"""

    def __init__(self, message: str = "Failed to archive records", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class PartialFailure(AttendanceError):
    """500 - rows were archived but could not be removed from the live table"""

    def __init__(
        self,
        message: str = "Records archived but failed to delete from main table",
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        details.setdefault(
            "warning",
            "Records now exist in both attendance and attendance_history; manual reconciliation required"
        )
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class CreateError(AttendanceError):
    """500 - fresh rows for the new day could not be created"""

    def __init__(self, message: str = "Failed to create new attendance records", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


async def attendance_exception_handler(request: Request, exc: AttendanceError):
    content: Dict[str, Any] = {"error": exc.message}
    hint = getattr(exc, "hint", None)
    if hint:
        content["message"] = hint
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: report {"error": message} with 500 instead of crashing"""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={
            'extra_data': {
                'error_type': type(exc).__name__,
                'path': request.url.path,
                'method': request.method
            }
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or "Unknown error"}
    )


def setup_attendance_exception_handlers(app) -> None:
    """Register on top of atams setup_exception_handlers()"""
    app.add_exception_handler(AttendanceError, attendance_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
