from .geofence_service import GeofenceService
from .status_policy import AttendanceStatusPolicy
from .facepp_service import FaceppService
from .identity_service import IdentityService
from .imgbb_service import ImgbbService
from .attendance_service import AttendanceService
from .face_match_service import FaceMatchService
from .daily_reset_service import DailyResetService
from .user_service import UserService
from .image_service import ImageService

__all__ = [
    "GeofenceService",
    "AttendanceStatusPolicy",
    "FaceppService",
    "IdentityService",
    "ImgbbService",
    "AttendanceService",
    "FaceMatchService",
    "DailyResetService",
    "UserService",
    "ImageService"
]
