"""Custom exception classes for the avatar media pipeline."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_AUTHENTICATION_FAILED,
    ERROR_CODE_COMPRESSION_FAILED,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_LIST_FAILED,
    ERROR_CODE_OBJECT_STORE,
    ERROR_CODE_PUBLIC_URL_FAILED,
    ERROR_CODE_RECONCILIATION_FAILED,
    ERROR_CODE_REMOVE_FAILED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_UPLOAD_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
)


class MediaPipelineError(Exception):
    """
    Base exception for all media pipeline errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(MediaPipelineError):
    """Raised when request validation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class AuthenticationError(MediaPipelineError):
    """Raised when no valid session or principal can be resolved."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_AUTHENTICATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class MIMETypeError(MediaPipelineError):
    """Raised when content cannot be matched to a supported image type."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UNSUPPORTED_MIME_TYPE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class FileSizeError(MediaPipelineError):
    """Raised when file size exceeds the allowed limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SIZE_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class CompressionError(MediaPipelineError):
    """Raised when an image cannot be decoded or re-encoded."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_COMPRESSION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ObjectStoreError(MediaPipelineError):
    """Raised when a backing object store operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_OBJECT_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class UploadError(ObjectStoreError):
    """Raised when the object store rejects a write."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UPLOAD_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ListObjectsError(ObjectStoreError):
    """Raised when listing objects under a prefix fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_LIST_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class RemoveObjectsError(ObjectStoreError):
    """Raised when a bulk remove fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_REMOVE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class UrlResolutionError(MediaPipelineError):
    """Raised when a stored object has no resolvable public URL."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PUBLIC_URL_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ReconciliationError(MediaPipelineError):
    """Raised when retention cleanup cannot complete."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RECONCILIATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)
