"""Business logic for profile picture uploads.

This module coordinates the authentication check, content normalization,
compression, key derivation and the object store write. It is the single
error boundary of the pipeline: every outcome is returned as an
``UploadResult`` value.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.media.compressor import ImageCompressor
from core.media.keys import KeyBuilder
from core.models.config import CompressionConfig, StorageConfig, UploadPolicy
from core.models.errors import (
    AuthenticationError,
    FileSizeError,
    MediaPipelineError,
    UrlResolutionError,
)
from core.models.media import ProcessedFile, SourceFile, StorageKey
from core.models.results import UploadFailure, UploadResult, UploadSuccess
from core.repositories.identity_repository import IdentityRepository
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import (
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_NOT_AUTHENTICATED,
    ERROR_CODE_OWNER_MISMATCH,
    MESSAGE_AUTHENTICATION_FAILED,
    MESSAGE_NOT_AUTHENTICATED,
    MESSAGE_OWNER_MISMATCH,
    MESSAGE_PUBLIC_URL_FAILED,
    MESSAGE_UPLOAD_FAILED,
    format_file_size,
)
from core.utils.mime import normalize
from core.utils.time import Clock

from handlers.reconcile_avatars.service import RetentionReconciler

logger = Logger(UTC=True)


class AvatarUploadService:
    """Application service responsible for profile picture uploads.

    This service orchestrates:
    - Session and principal verification
    - Content type resolution and image compression
    - Owner-scoped key derivation
    - Upserting the payload and resolving its public URL
    - Optional cleanup of the owner's previous pictures
    """

    def __init__(
        self,
        identity: IdentityRepository,
        store: ObjectStoreRepository | None = None,
        *,
        storage_config: StorageConfig | None = None,
        compression_config: CompressionConfig | None = None,
        policy: UploadPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the upload service with its collaborators."""
        self.identity = identity
        self.storage_config = storage_config or StorageConfig.from_env()
        self.policy = policy or UploadPolicy()
        self.store = store or S3ObjectStore(
            S3Adapter(bucket=self.storage_config.bucket),
            public_base_url=self.storage_config.public_base_url,
        )
        self.compressor = ImageCompressor(compression_config)
        self.keys = KeyBuilder(self.storage_config.folder, clock)
        self.reconciler = RetentionReconciler(self.store, self.storage_config)

    def upload(
        self,
        source: SourceFile,
        owner_id: str | None = None,
        *,
        replace_existing: bool = False,
    ) -> UploadResult:
        """Upload a profile picture for the authenticated user.

        The upload flow is:
        1. Verify the session and resolve the principal
        2. Resolve the content type and compress the image
        3. Derive the storage key
        4. Upsert the payload and resolve its public URL
        5. Optionally prune the owner's older pictures

        Args:
            source: File received from the client
            owner_id: Expected owner; must match the principal when given
            replace_existing: Remove the owner's other pictures after success

        Returns:
            UploadSuccess with the public URL, or UploadFailure with a reason
        """
        try:
            owner = self._authorize(owner_id)
        except AuthenticationError as exc:
            logger.warning(
                "Upload rejected by authentication check",
                extra={"owner_id": owner_id, "error": exc.message},
            )
            return UploadFailure(reason=exc.message, error_code=exc.error_code)
        except Exception as exc:
            logger.exception("Unexpected error resolving identity", extra={"owner_id": owner_id})
            return UploadFailure(
                reason=str(exc) or MESSAGE_UPLOAD_FAILED,
                error_code=ERROR_CODE_INTERNAL_ERROR,
            )

        try:
            payload = self._prepare(source)
            key = self.keys.build(owner, payload.file_name)
            url = self._store(key, payload)

        except MediaPipelineError as exc:
            logger.warning(
                "Profile picture upload failed",
                extra={"owner_id": owner, "error": exc.message, "error_code": exc.error_code},
            )
            return UploadFailure(reason=exc.message, error_code=exc.error_code)

        except Exception as exc:
            logger.exception("Unexpected error uploading profile picture", extra={"owner_id": owner})
            return UploadFailure(
                reason=str(exc) or MESSAGE_UPLOAD_FAILED,
                error_code=ERROR_CODE_INTERNAL_ERROR,
            )

        if replace_existing:
            outcome = self.reconciler.reconcile(owner, keep=key.path)
            if not outcome.success:
                logger.warning(
                    "Previous profile pictures were not removed",
                    extra={"owner_id": owner, "error": outcome.error},
                )

        logger.info(
            "Profile picture uploaded successfully",
            extra={"owner_id": owner, "key": key.path, "size": payload.size},
        )
        return UploadSuccess(url=url, key=key.path)

    def _authorize(self, owner_id: str | None) -> str:
        """Return the owner id the upload is written under.

        Raises:
            AuthenticationError: If there is no session, no principal, or the
                principal is not the requested owner
        """
        try:
            self.identity.get_session()
        except AuthenticationError as exc:
            raise AuthenticationError(
                message=f"{MESSAGE_AUTHENTICATION_FAILED}: {exc.message}",
                details=exc.details,
            ) from exc
        except Exception as exc:
            raise AuthenticationError(
                message=f"{MESSAGE_AUTHENTICATION_FAILED}: {exc}",
            ) from exc

        principal = self.identity.get_current_user()
        if principal is None:
            raise AuthenticationError(
                message=MESSAGE_NOT_AUTHENTICATED,
                error_code=ERROR_CODE_NOT_AUTHENTICATED,
            )

        if owner_id is not None and owner_id != principal.id:
            raise AuthenticationError(
                message=MESSAGE_OWNER_MISMATCH,
                error_code=ERROR_CODE_OWNER_MISMATCH,
                details={"owner_id": owner_id},
            )

        return principal.id

    def _prepare(self, source: SourceFile) -> ProcessedFile:
        normalized = normalize(source, strict=self.policy.strict_content_type)
        processed = self.compressor.process(normalized)

        limit = self.policy.max_size_bytes
        if limit is not None and processed.size > limit:
            raise FileSizeError(
                message=f"File size must be less than {format_file_size(limit)}",
                details={"size": processed.size},
            )

        return processed

    def _store(self, key: StorageKey, payload: ProcessedFile) -> str:
        self.store.upload(
            key=key.path,
            data=payload.data,
            content_type=payload.content_type,
            upsert=True,
            cache_control=self.policy.cache_control,
        )

        url = self.store.get_public_url(key=key.path)
        if not url:
            raise UrlResolutionError(
                message=MESSAGE_PUBLIC_URL_FAILED,
                details={"key": key.path},
            )

        return url
