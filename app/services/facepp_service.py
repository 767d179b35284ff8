"""
Face++ Service - Client for the Face++ compare API
"""
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ProviderError
from atams.logging import get_logger

logger = get_logger(__name__)


class FaceppService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        compare_url: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.FACEPP_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.FACEPP_API_SECRET
        self.compare_url = compare_url or settings.FACEPP_COMPARE_URL
        self.timeout = timeout or settings.FACEPP_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_secret)

    async def compare(self, image_url1: str, image_url2: str) -> Dict[str, Any]:
        """
        Compare the faces found in two image URLs

        Args:
            image_url1: Captured image
            image_url2: Registered photo

        Returns:
            dict: Face++ body, containing either `confidence` (0-100,
            with `thresholds`) or `error_message`

        Raises:
            ProviderError: If the call fails or the body is not JSON
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.compare_url,
                    data={
                        "api_key": self.api_key,
                        "api_secret": self.api_secret,
                        "image_url1": image_url1,
                        "image_url2": image_url2
                    },
                    timeout=self.timeout
                )
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Face++ request failed: {str(e)}")
            raise ProviderError("Face++ request failed", {"error": str(e)})
        except ValueError as e:
            logger.error(f"Face++ returned a non-JSON body: {str(e)}")
            raise ProviderError("Face++ returned an invalid response", {"error": str(e)})
