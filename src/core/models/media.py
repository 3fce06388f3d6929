"""Immutable file values passed between pipeline stages."""

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictStr, computed_field


class SourceFile(BaseModel):
    """Raw file as received from the caller."""

    model_config = ConfigDict(frozen=True)

    data: StrictBytes = Field(..., description="Raw file content")
    file_name: StrictStr = Field(..., description="Filename claimed by the client")
    content_type: StrictStr | None = Field(
        None, description="Content type claimed by the client, if any"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size(self) -> int:
        return len(self.data)


class NormalizedFile(SourceFile):
    """Source file carrying an authoritative content type."""

    content_type: StrictStr = Field(..., description="Resolved content type")


class ProcessedFile(NormalizedFile):
    """Payload ready to be written to the object store."""

    compressed: bool = Field(
        False, description="Whether the payload was resampled and re-encoded"
    )


class StorageKey(BaseModel):
    """Owner-scoped object key: ``{folder}/{owner_id}/{file_name}``."""

    model_config = ConfigDict(frozen=True)

    folder: StrictStr
    owner_id: StrictStr
    file_name: StrictStr

    @property
    def prefix(self) -> str:
        return f"{self.folder}/{self.owner_id}"

    @property
    def path(self) -> str:
        return f"{self.prefix}/{self.file_name}"

    def __str__(self) -> str:
        return self.path


class StoredObject(BaseModel):
    """Entry returned by an object store listing."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(..., description="Object name relative to the listed prefix")
    key: StrictStr = Field(..., description="Full object key")
    size: int | None = None
    last_modified: StrictStr | None = None


class Principal(BaseModel):
    """Authenticated caller resolved by the identity collaborator."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr = Field(..., min_length=1)
    email: StrictStr | None = None


class Session(BaseModel):
    """Proof of an active authenticated session."""

    model_config = ConfigDict(frozen=True)

    subject: StrictStr | None = None
    expires_at: int | None = None
