"""
Image Endpoints - Publish captured photos for face matching
"""
from typing import Optional

from fastapi import APIRouter, File, UploadFile, status

from app.services.image_service import ImageService
from app.schemas import ImageUploadResponse

router = APIRouter()
image_service = ImageService()


@router.post(
    "/upload",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_200_OK
)
async def upload_image(image: Optional[UploadFile] = File(None)):
    """
    Upload a captured photo to ImgBB and return its hosted URL

    The returned URL is what the compare and scan endpoints accept.

    **Request:** multipart/form-data with an `image` field

    **Errors:**
    - 400: No file, file larger than 10MB, or not JPEG/PNG/WebP
    - 500: ImgBB API key not configured or upload rejected
    """
    return await image_service.upload_image(image)
