"""S3-backed implementation of ObjectStoreRepository."""

from collections.abc import Sequence
from urllib.parse import quote

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import ListObjectsError, RemoveObjectsError, UploadError
from core.models.media import StoredObject
from core.repositories.storage_repository import ObjectStoreRepository

logger = Logger(UTC=True)


def _client_error_message(exc: ClientError) -> str:
    error = exc.response.get("Error", {})
    return str(error.get("Message") or error.get("Code") or exc)


class S3ObjectStore(ObjectStoreRepository):
    """Object storage implementation backed by Amazon S3."""

    def __init__(
        self,
        adapter: S3AdapterProtocol | None = None,
        *,
        public_base_url: str | None = None,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def upload(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
        cache_control: str | None = None,
    ) -> None:
        """Upload bytes to S3, replacing any existing object when ``upsert``."""
        logger.debug(
            "Uploading object",
            extra={"key": key, "size": len(data), "upsert": upsert},
        )

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=content_type,
                cache_control=cache_control,
                if_none_match=None if upsert else "*",
            )
            logger.info("Object uploaded successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise UploadError(
                message=_client_error_message(exc),
                details={"key": key},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error uploading object")
            raise UploadError(message=str(exc), details={"key": key}) from exc

    def get_public_url(self, *, key: str) -> str | None:
        """Build the public URL for ``key``.

        Uses the configured public base URL when present, otherwise a
        path-style URL on the client endpoint.
        """
        quoted = quote(key)

        if self._public_base_url:
            return f"{self._public_base_url}/{quoted}"

        endpoint = self._s3.endpoint_url
        if not endpoint:
            logger.warning("No endpoint to build public URL from", extra={"key": key})
            return None

        return f"{endpoint.rstrip('/')}/{self._s3.bucket}/{quoted}"

    def list(self, *, prefix: str, limit: int) -> list[StoredObject]:
        """List objects stored directly under ``prefix``."""
        folder = prefix.rstrip("/") + "/"
        logger.debug("Listing objects", extra={"prefix": folder, "limit": limit})

        try:
            response = self._s3.list_objects(prefix=folder, max_keys=limit)

        except ClientError as exc:
            logger.error("S3 list failed", extra={"prefix": folder})
            raise ListObjectsError(
                message=_client_error_message(exc),
                details={"prefix": folder},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error listing objects")
            raise ListObjectsError(message=str(exc), details={"prefix": folder}) from exc

        entries: list[StoredObject] = []
        for item in response.get("Contents", []):
            key = item["Key"]
            name = key[len(folder):]

            # Skip nested "subfolders"
            if not name or "/" in name:
                continue

            last_modified = item.get("LastModified")
            entries.append(
                StoredObject(
                    name=name,
                    key=key,
                    size=item.get("Size"),
                    last_modified=last_modified.isoformat() if last_modified else None,
                )
            )

        return entries

    def remove(self, *, keys: Sequence[str]) -> None:
        """Delete ``keys`` with a single DeleteObjects request."""
        if not keys:
            return

        logger.debug("Removing objects", extra={"count": len(keys)})

        try:
            response = self._s3.delete_objects(keys=keys)

        except ClientError as exc:
            logger.error("S3 bulk delete failed", extra={"keys": list(keys)})
            raise RemoveObjectsError(
                message=_client_error_message(exc),
                details={"keys": list(keys)},
            ) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error removing objects")
            raise RemoveObjectsError(message=str(exc), details={"keys": list(keys)}) from exc

        errors = response.get("Errors") or []
        if errors:
            logger.error("S3 bulk delete partially failed", extra={"errors": errors})
            raise RemoveObjectsError(
                message=str(errors[0].get("Message") or "Unable to delete objects"),
                details={"failed": [err.get("Key") for err in errors]},
            )

        logger.info("Objects removed", extra={"count": len(keys)})
