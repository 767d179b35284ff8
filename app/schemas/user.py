"""
User administration schemas
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DeleteUserResponse(BaseModel):
    success: bool = True
    message: str


class AdminPasswordResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    redirect_url: Optional[str] = Field(None, alias="redirectUrl")


class PasswordResetResult(BaseModel):
    email: str
    success: bool
    error: Optional[str] = None


class AdminPasswordResetResponse(BaseModel):
    success: bool = True
    message: str
    results: List[PasswordResetResult]
    count: int
