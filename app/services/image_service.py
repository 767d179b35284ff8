"""
Image Service - Validate captured photos and publish them to the image host
"""
from typing import Optional

from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import InvalidInput, ConfigurationError
from app.services.imgbb_service import ImgbbService
from app.schemas.image import ImageUploadResponse
from atams.logging import get_logger

logger = get_logger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/webp", "image/jpg")


class ImageService:
    def __init__(self, max_upload_bytes: Optional[int] = None) -> None:
        self.imgbb = ImgbbService()
        self.max_upload_bytes = max_upload_bytes or settings.MAX_IMAGE_UPLOAD_BYTES

    async def upload_image(self, image: Optional[UploadFile]) -> ImageUploadResponse:
        """
        Upload a captured photo so it can be passed to face matching by URL

        Raises:
            ConfigurationError: If the ImgBB API key is not configured
            InvalidInput: If the file is missing, too large or not an image
            ProviderError: If ImgBB rejects the upload
        """
        if not self.imgbb.is_configured:
            raise ConfigurationError("ImgBB API key not configured")
        if image is None:
            raise InvalidInput("No image file provided")

        content = await image.read()
        if not content:
            raise InvalidInput("No image file provided")

        size = len(content)
        if size > self.max_upload_bytes:
            logger.error(f"File too large: {size} bytes")
            raise InvalidInput(
                "File too large",
                details={"size": size},
                hint=f"Maximum file size is {self.max_upload_bytes // (1024 * 1024)}MB"
            )

        if image.content_type not in ALLOWED_CONTENT_TYPES:
            logger.error(f"Invalid file type: {image.content_type}")
            raise InvalidInput(
                "Invalid file type",
                details={"received_type": image.content_type},
                hint="Only JPEG, PNG, and WebP images are allowed"
            )

        logger.info(
            f"Uploading image {image.filename}",
            extra={'extra_data': {'size': size, 'content_type': image.content_type}}
        )
        data = await self.imgbb.upload(content)
        logger.info(f"Image uploaded: {data.get('url')}")

        return ImageUploadResponse(success=True, url=data.get("url"), image_data=data)
