"""
User Service - Member account administration
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from app.repositories.user_repository import UserRepository
from app.repositories.attendance_repository import AttendanceRepository
from app.services.identity_service import IdentityService
from app.schemas.user import DeleteUserResponse, AdminPasswordResetResponse, PasswordResetResult
from app.core.exceptions import InvalidInput, NotFound, ProviderError
from atams.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self) -> None:
        self.user_repo = UserRepository()
        self.attendance_repo = AttendanceRepository()
        self.identity = IdentityService()

    async def delete_user(self, db: Session, user_id: str) -> DeleteUserResponse:
        """
        Delete a member, their live attendance rows and their auth account

        Raises:
            NotFound: If the user does not exist
            ConfigurationError: If the identity provider is not configured
            ProviderError: If the auth account could not be deleted
        """
        user = self.user_repo.get_by_id(db, user_id)
        if not user:
            raise NotFound("User not found")

        self.identity.ensure_configured()
        auth_uuid = user.auth_uuid

        deleted_rows = self.attendance_repo.delete_for_user(db, user_id)
        self.user_repo.delete_by_id(db, user_id)
        logger.info(
            f"Deleted user {user_id}",
            extra={'extra_data': {'attendance_rows': deleted_rows}}
        )

        if auth_uuid:
            await self.identity.delete_account(auth_uuid)
            logger.info(f"Deleted auth account for user {user_id}")

        return DeleteUserResponse(message="User deleted successfully")

    async def send_admin_reset_emails(
        self,
        db: Session,
        redirect_url: Optional[str]
    ) -> AdminPasswordResetResponse:
        """
        Send a password recovery email to every admin with an email address

        Failures for one recipient are collected in the results.

        Raises:
            InvalidInput: If redirect_url is missing
            NotFound: If there are no admins with an email address
        """
        if not redirect_url:
            raise InvalidInput("Missing required parameters")

        self.identity.ensure_configured()

        admins = self.user_repo.get_admins_with_email(db)
        if not admins:
            raise NotFound("No admin accounts with email addresses found")

        results: List[PasswordResetResult] = []
        for admin in admins:
            try:
                await self.identity.send_recovery_email(admin.email, redirect_url)
                results.append(PasswordResetResult(email=admin.email, success=True))
            except ProviderError as e:
                logger.error(f"Password reset email failed for {admin.email}: {e.message}")
                results.append(PasswordResetResult(email=admin.email, success=False, error=e.message))

        return AdminPasswordResetResponse(
            message=f"Password reset emails sent to {len(admins)} admin account(s)",
            results=results,
            count=len(admins)
        )
