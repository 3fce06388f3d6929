"""Storage key derivation.

Write access is granted only under ``{folder}/{owner_id}/``, so the owner id is
always its own path segment, not just a filename prefix.
"""

from core.models.media import StorageKey
from core.utils.constants import DEFAULT_EXTENSION, DEFAULT_FOLDER
from core.utils.mime import file_extension
from core.utils.time import Clock, SystemClock


class KeyBuilder:
    """Builds ``{folder}/{owner_id}/{owner_id}_{millis}.{ext}`` keys."""

    def __init__(self, folder: str = DEFAULT_FOLDER, clock: Clock | None = None) -> None:
        self._folder = folder.strip("/")
        self._clock: Clock = clock or SystemClock()

    def file_name(self, owner_id: str, original_file_name: str) -> str:
        extension = file_extension(original_file_name) or DEFAULT_EXTENSION
        return f"{owner_id}_{self._clock.now_millis()}.{extension}"

    def owner_prefix(self, owner_id: str) -> str:
        return f"{self._folder}/{owner_id}"

    def build(self, owner_id: str, original_file_name: str) -> StorageKey:
        return StorageKey(
            folder=self._folder,
            owner_id=owner_id,
            file_name=self.file_name(owner_id, original_file_name),
        )
