"""
Identity Service - Supabase Auth admin API for member accounts
"""
from typing import Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ConfigurationError, ProviderError
from atams.logging import get_logger

logger = get_logger(__name__)


class IdentityService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.SUPABASE_URL or "").rstrip("/")
        self.service_key = service_key if service_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        self.timeout = timeout or settings.IDENTITY_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.service_key)

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError("Missing identity provider configuration")

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}"
        }

    async def delete_account(self, auth_uuid: str) -> None:
        """
        Delete an auth account

        Raises:
            ProviderError: If the identity provider rejects the request
        """
        self.ensure_configured()
        try:
            async with httpx.AsyncClient() as client:
                response = await client.delete(
                    f"{self.base_url}/auth/v1/admin/users/{auth_uuid}",
                    headers=self._headers(),
                    timeout=self.timeout
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity provider request failed: {str(e)}")
            raise ProviderError("Identity provider request failed", {"error": str(e)})

        if response.status_code >= 400:
            logger.error(f"Failed to delete auth account {auth_uuid}: HTTP {response.status_code}")
            raise ProviderError(
                "Failed to delete auth account",
                {"status_code": response.status_code, "error": response.text}
            )

    async def send_recovery_email(self, email: str, redirect_url: str) -> None:
        """
        Ask the identity provider to email a password recovery link

        Raises:
            ProviderError: If the identity provider rejects the request
        """
        self.ensure_configured()
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/auth/v1/recover",
                    params={"redirect_to": redirect_url},
                    json={"email": email},
                    headers=self._headers(),
                    timeout=self.timeout
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity provider request failed: {str(e)}")
            raise ProviderError("Identity provider request failed", {"error": str(e)})

        if response.status_code >= 400:
            raise ProviderError(
                f"Failed to send recovery email to {email}",
                {"status_code": response.status_code, "error": response.text}
            )
