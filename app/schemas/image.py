"""
Image Schemas for the upload endpoint
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class ImageUploadResponse(BaseModel):
    """Hosted URL of an uploaded photo, plus the host's metadata"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    url: Optional[str] = None
    image_data: Dict[str, Any] = Field(default_factory=dict, alias="imageData")
