"""
Face Match Endpoints - Face comparison for check-in/check-out
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.face_match_service import FaceMatchService
from app.schemas import FaceMatchRequest, FaceMatchResponse, FaceScanRequest, FaceScanResponse
from app.api.deps import require_min_role_level

router = APIRouter()
face_match_service = FaceMatchService()


@router.post(
    "/compare",
    response_model=FaceMatchResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(1))]
)
async def compare_faces(
    request: FaceMatchRequest,
    db: Session = Depends(get_db)
):
    """
    Compare a captured face with the user's registered photo

    **Authentication:**
    - Requires valid user authentication (role level >= 1)

    **Process:**
    1. Validate image URL, user ID and location
    2. Compare faces with Face++ (match when confidence > 70)
    3. For a check-out, verify the location against the assigned geofence

    **Response:**
    - matched: true with user and confidence
    - matched: false with a message explaining why

    **Errors:**
    - 400: Image URL, user ID or location missing
    - 500: Face++ credentials not configured
    """
    return await face_match_service.compare_face(db, request)


@router.post(
    "/scan",
    response_model=FaceScanResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK
)
async def scan_face(
    request: FaceScanRequest,
    db: Session = Depends(get_db)
):
    """
    Identify a face among registered users and record attendance

    Used by the shared kiosk, so no user authentication is required.

    **Response:**
    - action: "check-in" or "check-out", with the recorded status
    - error: "Location mismatch" when outside the geofence

    **Errors:**
    - 400: Image hosted on an untrusted domain
    - 404: No registered users
    - 409: Attendance changed by a concurrent scan
    """
    return await face_match_service.scan_face(db, request)
