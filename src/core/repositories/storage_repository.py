"""Abstract contract for the backing object store."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from core.models.media import StoredObject


class ObjectStoreRepository(ABC):
    """Contract for bucketed byte storage with public URL resolution.

    Implementations could be S3, GCS, Supabase Storage, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def upload(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
        cache_control: str | None = None,
    ) -> None:
        """Write an object.

        Args:
            key: Full object key
            data: Binary content
            content_type: MIME type stored with the object
            upsert: Replace an existing object at ``key`` instead of failing
            cache_control: Optional max-age in seconds for public caching

        Raises:
            UploadError: If the store rejects the write
        """

    @abstractmethod
    def get_public_url(self, *, key: str) -> str | None:
        """Return the public URL for ``key``, or None if none can be built."""

    @abstractmethod
    def list(self, *, prefix: str, limit: int) -> list[StoredObject]:
        """List up to ``limit`` objects directly under ``prefix``.

        Raises:
            ListObjectsError: If listing fails
        """

    @abstractmethod
    def remove(self, *, keys: Sequence[str]) -> None:
        """Delete all ``keys`` in one request.

        Raises:
            RemoveObjectsError: If any deletion fails
        """
