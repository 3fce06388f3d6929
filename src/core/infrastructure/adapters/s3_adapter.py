"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping, Sequence
import os
from typing import Any, Protocol

import boto3

from core.utils.constants import (
    DEFAULT_AWS_REGION,
    ENV_AVATAR_BUCKET_NAME,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
)


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    meta: Any

    def put_object(self, **kwargs: Any) -> Any: ...

    def list_objects_v2(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def delete_objects(
        self,
        *,
        Bucket: str,
        Delete: Mapping[str, Any],
    ) -> Mapping[str, Any]: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    @property
    def bucket(self) -> str: ...

    @property
    def endpoint_url(self) -> str | None: ...

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str | None = None,
        if_none_match: str | None = None,
    ) -> None: ...

    def list_objects(self, *, prefix: str, max_keys: int) -> Mapping[str, Any]: ...

    def delete_objects(self, *, keys: Sequence[str]) -> Mapping[str, Any]: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, bucket: str | None = None) -> None:
        """Create S3 client from environment configuration."""
        bucket_name = bucket or os.getenv(ENV_AVATAR_BUCKET_NAME)
        if not bucket_name:
            raise RuntimeError(f"{ENV_AVATAR_BUCKET_NAME} environment variable is not set")

        self._bucket = bucket_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION, DEFAULT_AWS_REGION),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def endpoint_url(self) -> str | None:
        endpoint: str | None = self._client.meta.endpoint_url
        return endpoint

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str | None = None,
        if_none_match: str | None = None,
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }

        if cache_control:
            kwargs["CacheControl"] = f"max-age={cache_control}"

        if if_none_match:
            kwargs["IfNoneMatch"] = if_none_match

        self._client.put_object(**kwargs)

    def list_objects(self, *, prefix: str, max_keys: int) -> Mapping[str, Any]:
        """List one page of objects under a prefix.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.list_objects_v2(
            Bucket=self._bucket,
            Prefix=prefix,
            MaxKeys=max_keys,
        )

    def delete_objects(self, *, keys: Sequence[str]) -> Mapping[str, Any]:
        """Delete several objects in one request.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.delete_objects(
            Bucket=self._bucket,
            Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
        )
