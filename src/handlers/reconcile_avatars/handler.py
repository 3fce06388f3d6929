"""
Lambda handler responsible for removing the caller's profile pictures.
"""

from functools import lru_cache
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.api_gateway_identity import ApiGatewayIdentity
from core.models.errors import AuthenticationError
from core.utils.constants import MESSAGE_DELETE_FAILED, MESSAGE_NOT_AUTHENTICATED
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder

from .models import DeleteAvatarsResponse
from .service import RetentionReconciler

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@lru_cache(maxsize=1)
def _reconciler() -> RetentionReconciler:
    """Reconciler reused across invocations of a warm container."""
    return RetentionReconciler()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle profile picture deletion requests.

    This function:
    - Resolves the caller from the API Gateway authorizer context
    - Removes every stored profile picture owned by the caller
    - Reports a soft reconciliation failure as a 500 response

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received profile picture delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    identity = ApiGatewayIdentity(event)

    try:
        identity.get_session()
    except AuthenticationError as exc:
        logger.warning("Delete rejected by authentication check", extra={"error": exc.message})
        return ResponseBuilder.unauthorized(f"Authentication failed: {exc.message}")

    principal = identity.get_current_user()
    if principal is None:
        return ResponseBuilder.unauthorized(MESSAGE_NOT_AUTHENTICATED)

    result = _reconciler().delete_profile_picture(principal.id)

    if not result.success:
        metrics.add_metric(name="AvatarDeleteFailed", unit=MetricUnit.Count, value=1)
        return ResponseBuilder.internal_error(result.error or MESSAGE_DELETE_FAILED)

    metrics.add_metric(name="AvatarsDeleted", unit=MetricUnit.Count, value=len(result.removed))

    response = DeleteAvatarsResponse(
        owner_id=principal.id,
        removed=result.removed,
        message="Profile pictures deleted successfully",
    )

    return ResponseBuilder.ok(response.model_dump())
