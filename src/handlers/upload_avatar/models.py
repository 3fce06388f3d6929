"""Pydantic models for profile picture upload request/response."""

import base64

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import MAX_REQUEST_FILE_SIZE

logger = Logger(UTC=True)


class AvatarUploadRequest(BaseModel):
    """Validation model for profile picture upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    file_name: str = Field(
        ..., min_length=1, max_length=255, description="Original image filename"
    )
    content_type: str | None = Field(
        None, max_length=100, description="Content type reported by the client"
    )
    replace_existing: bool = Field(
        False, description="Remove the caller's previous profile pictures after upload"
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must not exceed MAX_REQUEST_FILE_SIZE
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except Exception as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_REQUEST_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(
                f"File size exceeds {MAX_REQUEST_FILE_SIZE // (1024 * 1024)}MB limit"
            )

        return value

    @field_validator("content_type")
    @classmethod
    def blank_content_type_is_missing(cls, value: str | None) -> str | None:
        return value or None

    def decoded_file(self) -> bytes:
        return base64.b64decode(self.file)


class AvatarUploadResponse(BaseModel):
    """Response model for successful profile picture upload."""

    url: str = Field(..., description="Public URL of the stored picture")
    key: str = Field(..., description="Object key the picture was stored under")
    message: str = Field(..., description="Success message")
