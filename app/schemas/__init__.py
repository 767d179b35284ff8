from .face_match import (
    GeoPoint,
    ScanLocation,
    FaceMatchRequest,
    FaceMatchResponse,
    FaceScanRequest,
    FaceScanResponse,
    MatchedUser
)
from .attendance import (
    AttendanceStatus,
    AttendanceRecord,
    AttendanceHistoryRecord,
    DailyResetResponse,
    ArchiveResponse,
    NoCheckoutResponse
)
from .user import (
    DeleteUserResponse,
    AdminPasswordResetRequest,
    AdminPasswordResetResponse,
    PasswordResetResult
)
from .image import ImageUploadResponse
from atams.schemas import DataResponse, PaginationResponse

__all__ = [
    # Face match schemas
    "GeoPoint",
    "ScanLocation",
    "FaceMatchRequest",
    "FaceMatchResponse",
    "FaceScanRequest",
    "FaceScanResponse",
    "MatchedUser",
    # Attendance schemas
    "AttendanceStatus",
    "AttendanceRecord",
    "AttendanceHistoryRecord",
    "DailyResetResponse",
    "ArchiveResponse",
    "NoCheckoutResponse",
    # User schemas
    "DeleteUserResponse",
    "AdminPasswordResetRequest",
    "AdminPasswordResetResponse",
    "PasswordResetResult",
    # Image schemas
    "ImageUploadResponse",
    # Common schemas
    "DataResponse",
    "PaginationResponse"
]
