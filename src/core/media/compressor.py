"""
Image normalization and compression.

Pipeline (conservative):
- Force a raster content type (non-image types become ``image/jpeg``).
- Leave files up to 1MB untouched.
- Above 1MB, downsample so the longest side fits ``max_width`` and
  re-encode as JPEG at the configured quality.

A failed decode or encode never blocks an upload: the type-corrected
original is returned instead.
"""

from io import BytesIO

from aws_lambda_powertools import Logger
from PIL import Image, UnidentifiedImageError

from core.models.config import CompressionConfig
from core.models.errors import CompressionError
from core.models.media import NormalizedFile, ProcessedFile, SourceFile
from core.utils.constants import (
    COMPRESSION_THRESHOLD_BYTES,
    DEFAULT_IMAGE_CONTENT_TYPE,
    RASTER_MIME_TYPES,
    format_file_size,
)

logger = Logger(UTC=True)


def _jpeg_name(file_name: str) -> str:
    stem, dot, _ = file_name.rpartition(".")
    return f"{stem if dot else file_name}.jpg"


def scale_factor(width: int, height: int, max_width: int) -> float:
    """Uniform factor fitting both sides within ``max_width``; never enlarges."""
    return min(max_width / width, max_width / height, 1.0)


class ImageCompressor:
    """Turns a normalized upload into a storage-ready payload."""

    def __init__(self, config: CompressionConfig | None = None) -> None:
        self._config = config or CompressionConfig()

    @property
    def config(self) -> CompressionConfig:
        return self._config

    def process(self, file: SourceFile) -> ProcessedFile:
        """Return the payload to store for ``file``.

        Args:
            file: Normalized (or raw) upload

        Returns:
            ProcessedFile with a raster content type. When compression
            triggers, its size never exceeds the input size.
        """
        content_type = file.content_type
        if content_type not in RASTER_MIME_TYPES:
            logger.warning(
                "Non-image content type forced to JPEG",
                extra={"file_name": file.file_name, "content_type": content_type},
            )
            content_type = DEFAULT_IMAGE_CONTENT_TYPE

        corrected = ProcessedFile(
            data=file.data,
            file_name=file.file_name,
            content_type=content_type,
        )

        if corrected.size <= COMPRESSION_THRESHOLD_BYTES:
            return corrected

        try:
            compressed = self._resample(corrected)
        except CompressionError as exc:
            logger.warning(
                "Image compression failed, storing original",
                extra={"file_name": file.file_name, "error": exc.message},
            )
            return corrected

        if compressed.size > corrected.size:
            logger.info(
                "Re-encoded image larger than original, storing original",
                extra={"file_name": file.file_name, "size": corrected.size},
            )
            return corrected

        logger.info(
            "Image compressed",
            extra={
                "file_name": file.file_name,
                "original_size": format_file_size(corrected.size),
                "compressed_size": format_file_size(compressed.size),
            },
        )
        return compressed

    def _resample(self, file: NormalizedFile) -> ProcessedFile:
        """Decode, downsample and re-encode as JPEG.

        Raises:
            CompressionError: If the bytes cannot be decoded or encoded
        """
        try:
            with Image.open(BytesIO(file.data)) as img:
                img.load()
                factor = scale_factor(img.width, img.height, self._config.max_width)
                size = (max(1, round(img.width * factor)), max(1, round(img.height * factor)))

                resized = img if factor >= 1.0 else img.resize(size, Image.Resampling.LANCZOS)
                if resized.mode != "RGB":
                    resized = resized.convert("RGB")

                buffer = BytesIO()
                resized.save(
                    buffer,
                    format="JPEG",
                    quality=round(self._config.quality * 100),
                    optimize=True,
                )
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise CompressionError(
                message=f"Unable to compress image: {exc}",
                details={"file_name": file.file_name},
            ) from exc

        return ProcessedFile(
            data=buffer.getvalue(),
            file_name=_jpeg_name(file.file_name),
            content_type=DEFAULT_IMAGE_CONTENT_TYPE,
            compressed=True,
        )
