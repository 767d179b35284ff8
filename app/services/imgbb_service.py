"""
ImgBB Service - Client for the ImgBB image upload API
"""
import base64
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ProviderError
from atams.logging import get_logger

logger = get_logger(__name__)


class ImgbbService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        upload_url: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.IMGBB_API_KEY
        self.upload_url = upload_url or settings.IMGBB_UPLOAD_URL
        self.timeout = timeout or settings.IMGBB_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def upload(self, content: bytes) -> Dict[str, Any]:
        """
        Upload raw image bytes

        Returns:
            dict: ImgBB `data` object (url, display_url, delete_url, ...)

        Raises:
            ProviderError: If the call fails or ImgBB rejects the image
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.upload_url,
                    params={"key": self.api_key},
                    data={"image": base64.b64encode(content).decode("ascii")},
                    timeout=self.timeout
                )
            body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"ImgBB request failed: {str(e)}")
            raise ProviderError("Failed to upload image to ImgBB", {"error": str(e)})
        except ValueError as e:
            logger.error(f"ImgBB returned a non-JSON body: {str(e)}")
            raise ProviderError("ImgBB returned an invalid response", {"error": str(e)})

        if response.status_code >= 400 or not isinstance(body.get("data"), dict):
            error = body.get("error") if isinstance(body.get("error"), dict) else {}
            message = error.get("message") or "Failed to upload image to ImgBB"
            logger.error(
                f"ImgBB API error: {message}",
                extra={'extra_data': {'status_code': response.status_code}}
            )
            raise ProviderError(message, {"status_code": response.status_code})

        return body["data"]
