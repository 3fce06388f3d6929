"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"

# Authentication Errors
ERROR_CODE_AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
ERROR_CODE_NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
ERROR_CODE_OWNER_MISMATCH = "OWNER_MISMATCH"

# Processing Errors
ERROR_CODE_COMPRESSION_FAILED = "COMPRESSION_FAILED"

# Storage Errors
ERROR_CODE_OBJECT_STORE = "OBJECT_STORE_ERROR"
ERROR_CODE_UPLOAD_FAILED = "UPLOAD_FAILED"
ERROR_CODE_LIST_FAILED = "LIST_FAILED"
ERROR_CODE_REMOVE_FAILED = "REMOVE_FAILED"
ERROR_CODE_PUBLIC_URL_FAILED = "PUBLIC_URL_FAILED"
ERROR_CODE_RECONCILIATION_FAILED = "RECONCILIATION_FAILED"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Result Messages
# ============================================================================

MESSAGE_AUTHENTICATION_FAILED = "Authentication failed"
MESSAGE_NOT_AUTHENTICATED = "User not authenticated"
MESSAGE_OWNER_MISMATCH = "User not authorized to upload for this owner"
MESSAGE_PUBLIC_URL_FAILED = "Failed to get public URL"
MESSAGE_UPLOAD_FAILED = "Upload failed"
MESSAGE_DELETE_FAILED = "Delete failed"


# ============================================================================
# Content Types
# ============================================================================

DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"
DEFAULT_EXTENSION = "jpg"

EXTENSION_MIME_TYPE_MAP: Final[dict[str, str]] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

RASTER_MIME_TYPES: Final[frozenset[str]] = frozenset(EXTENSION_MIME_TYPE_MAP.values())


# ============================================================================
# Compression
# ============================================================================

COMPRESSION_THRESHOLD_BYTES = 1024 * 1024  # 1MB in bytes
DEFAULT_MAX_WIDTH = 400
DEFAULT_QUALITY = 0.8


# ============================================================================
# Storage
# ============================================================================

DEFAULT_BUCKET = "avatars"
DEFAULT_FOLDER = "profile-pictures"
DEFAULT_CACHE_CONTROL = "3600"
RECONCILE_PAGE_SIZE = 100

# Upper bound on the decoded request payload accepted by the HTTP handler
MAX_REQUEST_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_AVATAR_BUCKET_NAME = "AVATAR_BUCKET_NAME"
ENV_AVATAR_FOLDER = "AVATAR_FOLDER"
ENV_AVATAR_PUBLIC_BASE_URL = "AVATAR_PUBLIC_BASE_URL"
ENV_AVATAR_MAX_WIDTH = "AVATAR_MAX_WIDTH"
ENV_AVATAR_QUALITY = "AVATAR_QUALITY"
ENV_AVATAR_STRICT_CONTENT_TYPE = "AVATAR_STRICT_CONTENT_TYPE"
ENV_AVATAR_MAX_SIZE_BYTES = "AVATAR_MAX_SIZE_BYTES"

DEFAULT_AWS_REGION = "us-east-1"

# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
