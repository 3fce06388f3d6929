"""Content type resolution for incoming image files.

Browsers and API clients frequently send a missing or generic content type,
so the claimed type is only trusted when it names a supported raster format.
Otherwise the type is inferred from the filename extension.
"""

import re
from collections.abc import Mapping

from aws_lambda_powertools import Logger

from core.models.errors import MIMETypeError
from core.models.media import NormalizedFile, SourceFile
from core.utils.constants import (
    DEFAULT_IMAGE_CONTENT_TYPE,
    EXTENSION_MIME_TYPE_MAP,
    RASTER_MIME_TYPES,
)

logger = Logger(UTC=True)

_EXTENSION_PATTERN = re.compile(r"[a-z0-9]+")

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    """Return the image type indicated by the file signature."""
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def file_extension(file_name: str) -> str | None:
    """Lower-cased alphanumeric text after the last dot, or None.

    The result is embedded in object keys, so anything that is not plain
    ASCII letters and digits is rejected.
    """
    _, dot, extension = file_name.rpartition(".")
    extension = extension.lower()
    if not dot or not _EXTENSION_PATTERN.fullmatch(extension):
        return None
    return extension


def content_type_for_name(file_name: str) -> str:
    extension = file_extension(file_name)
    if extension is None:
        return DEFAULT_IMAGE_CONTENT_TYPE
    return EXTENSION_MIME_TYPE_MAP.get(extension, DEFAULT_IMAGE_CONTENT_TYPE)


def resolve_content_type(source: SourceFile) -> str:
    """Return the authoritative content type for ``source``.

    A specific raster type passes through unchanged. Anything else (absent,
    ``application/octet-stream``, or a non-image type) is replaced by the type
    mapped from the filename extension, defaulting to ``image/jpeg``.
    """
    claimed = (source.content_type or "").strip().lower()

    if claimed in RASTER_MIME_TYPES:
        return claimed

    resolved = content_type_for_name(source.file_name)
    logger.debug(
        "Content type inferred from filename",
        extra={
            "file_name": source.file_name,
            "claimed": source.content_type,
            "resolved": resolved,
        },
    )
    return resolved


def normalize(source: SourceFile, *, strict: bool = False) -> NormalizedFile:
    """Build a NormalizedFile carrying the resolved content type.

    With ``strict`` the resolved type must also agree with the file signature.

    Raises:
        MIMETypeError: In strict mode, if the bytes are not a supported image
            or do not match the resolved type
    """
    content_type = resolve_content_type(source)

    if strict:
        try:
            detected = detect_mime_type(source.data)
        except ValueError as exc:
            raise MIMETypeError(
                message="Unsupported or unknown file type",
                details={"file_name": source.file_name},
            ) from exc

        if detected != content_type:
            raise MIMETypeError(
                message=f"File content is {detected}, not {content_type}",
                details={"file_name": source.file_name, "detected": detected},
            )

    return NormalizedFile(
        data=source.data,
        file_name=source.file_name,
        content_type=content_type,
    )
