import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


def _authorizer(subject: str | None) -> dict[str, Any]:
    if subject is None:
        return {}
    return {"authorizer": {"claims": {"sub": subject, "email": f"{subject}@example.com"}}}


@pytest.fixture
def upload_event_factory() -> Callable[..., dict[str, Any]]:
    """Build an authorized upload event for ``subject`` (None for anonymous)."""

    def _build(
        file_data: bytes,
        *,
        file_name: str = "avatar.png",
        content_type: str | None = "image/png",
        subject: str | None = "user-123",
        replace_existing: bool = False,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "file": base64.b64encode(file_data).decode("utf-8"),
            "file_name": file_name,
            "replace_existing": replace_existing,
        }
        if content_type is not None:
            payload["content_type"] = content_type

        return {
            "httpMethod": "POST",
            "path": "/avatars",
            "body": json.dumps(payload),
            "headers": {"Content-Type": "application/json"},
            "requestContext": _authorizer(subject),
        }

    return _build


@pytest.fixture
def delete_event_factory() -> Callable[..., dict[str, Any]]:
    def _build(subject: str | None = "user-123") -> dict[str, Any]:
        return {
            "httpMethod": "DELETE",
            "path": "/avatars",
            "requestContext": _authorizer(subject),
        }

    return _build
