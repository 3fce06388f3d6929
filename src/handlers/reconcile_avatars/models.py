"""Pydantic models for profile picture deletion response."""

from pydantic import BaseModel, Field


class DeleteAvatarsResponse(BaseModel):
    """Response model for successful profile picture deletion."""

    owner_id: str = Field(..., description="Owner whose pictures were removed")
    removed: list[str] = Field(..., description="Object keys that were deleted")
    message: str = Field(..., description="Success message")
