"""
Face Match Service - Face comparison and the check-in/check-out decision
"""
from typing import Optional
from urllib.parse import urlparse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import InvalidInput, ConfigurationError, ProviderError, NotFound
from app.repositories.user_repository import UserRepository
from app.services.attendance_service import AttendanceService, LOCATION_UNVERIFIABLE
from app.services.facepp_service import FaceppService
from app.services.geofence_service import GeofenceService
from app.schemas.face_match import (
    FaceMatchRequest,
    FaceMatchResponse,
    FaceScanRequest,
    FaceScanResponse,
    MatchedUser
)
from app.models.user import User
from atams.logging import get_logger

logger = get_logger(__name__)

USER_NOT_FOUND = "User not found. Please check with admin."
NO_REGISTERED_PHOTO = "User does not have a registered photo. Please check with admin."
COMPARE_FAILED = "Failed to compare faces. Please try again."
PROVIDER_ERROR = "Face recognition service error. Please try again."
NO_MATCH = "Face does not match. Please check with admin."


class FaceMatchService:
    def __init__(self) -> None:
        self.facepp = FaceppService()
        self.geofence = GeofenceService()
        self.user_repo = UserRepository()
        self.attendance_service = AttendanceService()

    def is_match(self, confidence: Optional[float]) -> bool:
        """Strictly above the threshold; exactly 70 does not match"""
        return confidence is not None and confidence > settings.FACE_MATCH_CONFIDENCE_THRESHOLD

    def _ensure_configured(self) -> None:
        if not self.facepp.is_configured:
            raise ConfigurationError("Face++ API credentials not configured")

    async def compare_face(self, db: Session, request: FaceMatchRequest) -> FaceMatchResponse:
        """
        Decide whether a captured face belongs to the user and may be
        recorded at the given location

        Args:
            db: Database session
            request: Captured image URL, user ID and device location

        Returns:
            FaceMatchResponse: matched with user and confidence, or not
            matched with a human-readable reason

        Raises:
            InvalidInput: If image URL, user ID or location is missing
            ConfigurationError: If Face++ credentials are not configured
        """
        if not request.captured_image_url:
            raise InvalidInput("No image URL provided")
        if not request.user_id:
            raise InvalidInput("No user ID provided")
        location = request.location
        if location is None or location.latitude is None or location.longitude is None:
            raise InvalidInput("No location provided")
        self._ensure_configured()

        try:
            return await self._compare_for_user(db, request)
        except Exception as e:
            logger.error(
                f"Face comparison failed: {str(e)}",
                exc_info=True,
                extra={'extra_data': {'user_id': request.user_id}}
            )
            return FaceMatchResponse(matched=False, message=COMPARE_FAILED)

    async def _compare_for_user(self, db: Session, request: FaceMatchRequest) -> FaceMatchResponse:
        user = self.user_repo.get_by_id(db, request.user_id)
        if not user:
            return FaceMatchResponse(matched=False, message=USER_NOT_FOUND)
        if not user.photo_url:
            return FaceMatchResponse(matched=False, message=NO_REGISTERED_PHOTO)

        try:
            result = await self.facepp.compare(request.captured_image_url, user.photo_url)
        except ProviderError:
            return FaceMatchResponse(matched=False, message=COMPARE_FAILED)

        if result.get("error_message"):
            logger.error(
                f"Face++ API error: {result['error_message']}",
                extra={'extra_data': {'user_id': user.user_id}}
            )
            return FaceMatchResponse(matched=False, message=PROVIDER_ERROR)

        confidence = result.get("confidence")
        if not self.is_match(confidence):
            return FaceMatchResponse(matched=False, message=NO_MATCH, confidence=confidence)

        if self.attendance_service.is_check_out(db, user.user_id):
            rejection = self._check_out_location_rejection(db, user, request)
            if rejection:
                return FaceMatchResponse(matched=False, message=rejection)

        return FaceMatchResponse(
            matched=True,
            user=MatchedUser(user_id=user.user_id, name=user.full_name),
            confidence=confidence
        )

    def _check_out_location_rejection(
        self,
        db: Session,
        user: User,
        request: FaceMatchRequest
    ) -> Optional[str]:
        """Return a rejection message if check-out happens outside the geofence"""
        schedule = self.attendance_service.schedule_for_user(db, user)
        try:
            fence = self.geofence.check(
                schedule, request.location.latitude, request.location.longitude
            )
        except ValueError as e:
            logger.error(
                f"Invalid assigned location for user {user.user_id}: {str(e)}",
                extra={'extra_data': {'source': schedule.source}}
            )
            return LOCATION_UNVERIFIABLE

        if fence.allowed:
            return None

        logger.info(
            f"Check-out rejected outside geofence for user {user.user_id}",
            extra={'extra_data': {
                'distance_m': round(fence.distance_m),
                'radius_m': fence.radius_m,
                'source': schedule.source
            }}
        )
        return (
            f"You are {fence.distance_m:.0f}m away (allowed: {fence.radius_m}m) "
            f"from your assigned location. Check-out is not permitted."
        )

    def _scan_threshold(self, result: dict) -> float:
        thresholds = result.get("thresholds") or {}
        return thresholds.get("1e-3", settings.FACE_SCAN_DEFAULT_THRESHOLD)

    async def scan_face(self, db: Session, request: FaceScanRequest) -> FaceScanResponse:
        """
        Identify a captured face among all registered users and record
        attendance for the first match

        Raises:
            InvalidInput: If the image is not hosted on an allowed domain
            ConfigurationError: If Face++ credentials are not configured
            NotFound: If no user has a registered photo
            AttendanceConflict: If the attendance row changed concurrently
        """
        host = urlparse(request.captured_image_url).hostname or ""
        if host not in settings.allowed_image_hosts_list:
            raise InvalidInput("Image URL from untrusted domain")
        self._ensure_configured()

        users = self.user_repo.get_users_with_photo(db)
        if not users:
            raise NotFound("No registered users found")

        for user in users:
            try:
                result = await self.facepp.compare(request.captured_image_url, user.photo_url)
            except ProviderError:
                continue

            if result.get("error_message"):
                logger.error(
                    f"Face++ API error for user {user.user_id}: {result['error_message']}"
                )
                continue

            confidence = result.get("confidence")
            if confidence is not None and confidence > self._scan_threshold(result):
                return self.attendance_service.record_scan(
                    db,
                    user,
                    confidence,
                    request.user_location.latitude,
                    request.user_location.longitude
                )

        return FaceScanResponse(matched=False, message="User not found")
