"""
Face Match Schemas for the compare and scan endpoints
"""
import math
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeoPoint(BaseModel):
    """Device location; unreadable coordinates become None and are rejected by the service"""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coerce_coordinate(cls, value):
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None


class ScanLocation(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class FaceMatchRequest(BaseModel):
    """
    Request schema for the compare endpoint

    Fields are optional here so that missing values are reported by the
    service as {"error": ...} with 400 instead of a 422 validation envelope.
    """
    model_config = ConfigDict(populate_by_name=True)

    captured_image_url: Optional[str] = Field(None, alias="capturedImageUrl")
    user_id: Optional[str] = Field(None, alias="userId")
    location: Optional[GeoPoint] = None

    @field_validator("location", mode="before")
    @classmethod
    def drop_malformed_location(cls, value):
        return value if value is None or isinstance(value, (dict, GeoPoint)) else None


class MatchedUser(BaseModel):
    user_id: str
    name: str


class FaceMatchResponse(BaseModel):
    """Response schema for the compare endpoint"""
    matched: bool
    message: Optional[str] = None
    user: Optional[MatchedUser] = None
    confidence: Optional[float] = None


class FaceScanRequest(BaseModel):
    """Request schema for the public scan endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    captured_image_url: str = Field(..., alias="capturedImageUrl", max_length=2048)
    user_location: ScanLocation = Field(..., alias="userLocation")


class FaceScanResponse(BaseModel):
    """Response schema for the public scan endpoint"""
    matched: bool
    user: Optional[MatchedUser] = None
    confidence: Optional[float] = None
    action: Optional[Literal["check-in", "check-out"]] = None
    status: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
