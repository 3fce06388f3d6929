"""Caller-visible outcomes of pipeline operations."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class UploadSuccess(BaseModel):
    """Object stored and addressable."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    url: StrictStr = Field(..., description="Public URL of the stored object")
    key: StrictStr = Field(..., description="Object key the payload was written to")


class UploadFailure(BaseModel):
    """Upload did not produce an addressable object."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    reason: StrictStr = Field(..., description="Human-readable failure message")
    error_code: StrictStr | None = Field(None, description="Machine-readable failure category")


UploadResult = UploadSuccess | UploadFailure


class ReconcileResult(BaseModel):
    """Outcome of a retention pass; failures are reported, never raised."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: StrictStr | None = None
    removed: list[StrictStr] = Field(default_factory=list)
