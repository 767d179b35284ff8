"""
User Endpoints - Member account administration
"""
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.user_service import UserService
from app.schemas import DeleteUserResponse, AdminPasswordResetRequest, AdminPasswordResetResponse
from app.api.deps import require_min_role_level

router = APIRouter()
user_service = UserService()


@router.delete(
    "/{user_id}",
    response_model=DeleteUserResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db)
):
    """
    Delete a member with their attendance rows and auth account

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Errors:**
    - 404: User not found
    - 500: Identity provider not configured or rejected the request
    """
    return await user_service.delete_user(db, str(user_id))


@router.post(
    "/admin-password-reset",
    response_model=AdminPasswordResetResponse,
    status_code=status.HTTP_200_OK
)
async def send_admin_password_reset(
    request: AdminPasswordResetRequest,
    db: Session = Depends(get_db)
):
    """
    Send password recovery emails to every admin account

    **Errors:**
    - 400: redirectUrl missing
    - 404: No admin accounts with an email address
    """
    return await user_service.send_admin_reset_emails(db, request.redirect_url)
