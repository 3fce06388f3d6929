"""
Lambda handler responsible for profile picture uploads.
"""

from functools import lru_cache
from http import HTTPStatus
import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.api_gateway_identity import ApiGatewayIdentity
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.models.config import CompressionConfig, StorageConfig, UploadPolicy
from core.models.media import SourceFile
from core.models.results import UploadFailure
from core.utils.constants import (
    ERROR_CODE_AUTHENTICATION_FAILED,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_NOT_AUTHENTICATED,
    ERROR_CODE_OWNER_MISMATCH,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
)
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import AvatarUploadRequest, AvatarUploadResponse
from .service import AvatarUploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()

_UNAUTHORIZED_CODES = frozenset(
    {ERROR_CODE_AUTHENTICATION_FAILED, ERROR_CODE_NOT_AUTHENTICATED, ERROR_CODE_OWNER_MISMATCH}
)
_REJECTED_CODES = frozenset({ERROR_CODE_UNSUPPORTED_MIME_TYPE, ERROR_CODE_FILE_SIZE_EXCEEDED})


@lru_cache(maxsize=1)
def _settings() -> tuple[StorageConfig, CompressionConfig, UploadPolicy]:
    return StorageConfig.from_env(), CompressionConfig.from_env(), UploadPolicy.from_env()


@lru_cache(maxsize=1)
def _object_store() -> S3ObjectStore:
    storage_config, _, _ = _settings()
    return S3ObjectStore(
        S3Adapter(bucket=storage_config.bucket),
        public_base_url=storage_config.public_base_url,
    )


def build_service(event: dict[str, Any]) -> AvatarUploadService:
    """Create an upload service bound to the caller of ``event``."""
    storage_config, compression_config, policy = _settings()
    return AvatarUploadService(
        ApiGatewayIdentity(event),
        _object_store(),
        storage_config=storage_config,
        compression_config=compression_config,
        policy=policy,
    )


def _failure_response(result: UploadFailure) -> dict[str, Any]:
    if result.error_code in _UNAUTHORIZED_CODES:
        return ResponseBuilder.unauthorized(result.reason)

    if result.error_code in _REJECTED_CODES:
        return ResponseBuilder.error(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            error=result.error_code,
            message=result.reason,
        )

    if result.error_code == ERROR_CODE_INTERNAL_ERROR:
        return ResponseBuilder.internal_error(result.reason)

    return ResponseBuilder.error(
        status=HTTPStatus.BAD_GATEWAY,
        error=result.error_code,
        message=result.reason,
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle profile picture upload requests.

    The handler validates the JSON payload, decodes the base64 image and runs
    the upload pipeline for the caller identified by the API Gateway
    authorizer.

    Expected API Gateway event structure:
    {
        "body": "{...}",           # JSON string containing upload data
        "requestContext": {"authorizer": {"claims": {"sub": "..."}}}
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with the picture's public URL
    """
    logger.info(
        "Received profile picture upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.validation_error(message="Invalid JSON body")

    try:
        request = validate_request(AvatarUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    source = SourceFile(
        data=request.decoded_file(),
        file_name=request.file_name,
        content_type=request.content_type,
    )

    result = build_service(event).upload(source, replace_existing=request.replace_existing)

    if isinstance(result, UploadFailure):
        metrics.add_metric(name="AvatarUploadFailed", unit=MetricUnit.Count, value=1)
        return _failure_response(result)

    metrics.add_metric(name="AvatarUploaded", unit=MetricUnit.Count, value=1)

    response = AvatarUploadResponse(
        url=result.url,
        key=result.key,
        message="Profile picture uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump())
