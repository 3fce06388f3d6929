"""Pipeline configuration, fixed at construction time."""

import os

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.constants import (
    DEFAULT_BUCKET,
    DEFAULT_CACHE_CONTROL,
    DEFAULT_FOLDER,
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
    ENV_AVATAR_BUCKET_NAME,
    ENV_AVATAR_FOLDER,
    ENV_AVATAR_MAX_SIZE_BYTES,
    ENV_AVATAR_MAX_WIDTH,
    ENV_AVATAR_PUBLIC_BASE_URL,
    ENV_AVATAR_QUALITY,
    ENV_AVATAR_STRICT_CONTENT_TYPE,
)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class StorageConfig(BaseModel):
    """Bucket and folder the pipeline writes into."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    bucket: StrictStr = Field(DEFAULT_BUCKET, min_length=1)
    folder: StrictStr = Field(DEFAULT_FOLDER, min_length=1)
    public_base_url: StrictStr | None = Field(
        None, description="Base URL objects are publicly served from (CDN or bucket website)"
    )

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            bucket=os.getenv(ENV_AVATAR_BUCKET_NAME) or DEFAULT_BUCKET,
            folder=(os.getenv(ENV_AVATAR_FOLDER) or DEFAULT_FOLDER).strip("/"),
            public_base_url=os.getenv(ENV_AVATAR_PUBLIC_BASE_URL) or None,
        )


class CompressionConfig(BaseModel):
    """Downsampling target for images above the compression threshold."""

    model_config = ConfigDict(frozen=True)

    max_width: int = Field(DEFAULT_MAX_WIDTH, ge=1, description="Longest side in pixels")
    quality: float = Field(DEFAULT_QUALITY, gt=0, le=1, description="JPEG quality (0..1]")

    @classmethod
    def from_env(cls) -> "CompressionConfig":
        return cls(
            max_width=int(os.getenv(ENV_AVATAR_MAX_WIDTH) or DEFAULT_MAX_WIDTH),
            quality=float(os.getenv(ENV_AVATAR_QUALITY) or DEFAULT_QUALITY),
        )


class UploadPolicy(BaseModel):
    """Acceptance rules applied by the upload orchestrator."""

    model_config = ConfigDict(frozen=True)

    strict_content_type: bool = Field(
        False,
        description="Reject content whose bytes do not match the resolved image type",
    )
    max_size_bytes: int | None = Field(
        None, ge=1, description="Reject processed payloads larger than this"
    )
    cache_control: StrictStr = DEFAULT_CACHE_CONTROL

    @classmethod
    def from_env(cls) -> "UploadPolicy":
        max_size = os.getenv(ENV_AVATAR_MAX_SIZE_BYTES)
        return cls(
            strict_content_type=_env_flag(ENV_AVATAR_STRICT_CONTENT_TYPE),
            max_size_bytes=int(max_size) if max_size else None,
        )
