"""Profile Picture Media Pipeline Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless profile picture ingestion using AWS Lambda, S3, and Pillow"
)

__all__ = ["handlers", "core"]
