"""Retention cleanup for stored profile pictures.

Uploads never wait on cleanup of older objects; this service is invoked
explicitly, either after an upload that asked to replace the existing picture
or by the delete endpoint. Failures are reported in the result, never raised.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.models.config import StorageConfig
from core.models.errors import MediaPipelineError, ReconciliationError
from core.models.results import ReconcileResult
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import MESSAGE_DELETE_FAILED, RECONCILE_PAGE_SIZE

logger = Logger(UTC=True)


class RetentionReconciler:
    """Removes an owner's superseded objects from the store."""

    def __init__(
        self,
        store: ObjectStoreRepository | None = None,
        config: StorageConfig | None = None,
        *,
        page_size: int = RECONCILE_PAGE_SIZE,
    ) -> None:
        self.config = config or StorageConfig.from_env()
        self.store = store or S3ObjectStore(
            S3Adapter(bucket=self.config.bucket),
            public_base_url=self.config.public_base_url,
        )
        self.page_size = page_size

    def owner_prefix(self, owner_id: str) -> str:
        return f"{self.config.folder}/{owner_id}"

    def stale_keys(self, owner_id: str, *, keep: str | None = None) -> list[str]:
        """Keys under the owner's folder named after the owner, minus ``keep``.

        Raises:
            ReconciliationError: If the owner id is empty
            ObjectStoreError: If listing fails
        """
        if not owner_id:
            raise ReconciliationError(message="Owner id is required")

        entries = self.store.list(prefix=self.owner_prefix(owner_id), limit=self.page_size)

        return [
            entry.key
            for entry in entries
            if entry.name.startswith(owner_id) and entry.key != keep
        ]

    def reconcile(self, owner_id: str, *, keep: str | None = None) -> ReconcileResult:
        """Delete every stored object for ``owner_id`` except ``keep``.

        The flow is:
        1. List one page of objects under ``{folder}/{owner_id}``
        2. Keep only names starting with the owner id
        3. Remove that exact set in one bulk request

        Args:
            owner_id: Owner whose objects are pruned
            keep: Full key to preserve, typically the object just uploaded

        Returns:
            ReconcileResult; ``success`` is False on any failure
        """
        logger.debug("Starting reconciliation", extra={"owner_id": owner_id, "keep": keep})

        try:
            keys = self.stale_keys(owner_id, keep=keep)
            if keys:
                self.store.remove(keys=keys)

        except MediaPipelineError as exc:
            logger.warning(
                "Reconciliation failed",
                extra={"owner_id": owner_id, "error": exc.message, "error_code": exc.error_code},
            )
            return ReconcileResult(success=False, error=exc.message)

        except Exception as exc:
            logger.exception("Unexpected error during reconciliation", extra={"owner_id": owner_id})
            return ReconcileResult(success=False, error=str(exc) or MESSAGE_DELETE_FAILED)

        logger.info(
            "Reconciliation completed",
            extra={"owner_id": owner_id, "removed": len(keys)},
        )
        return ReconcileResult(success=True, removed=keys)

    def delete_profile_picture(self, owner_id: str) -> ReconcileResult:
        """Remove all of the owner's stored profile pictures."""
        return self.reconcile(owner_id)
