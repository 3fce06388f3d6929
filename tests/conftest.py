"""
Pytest configuration and fixtures for avatar pipeline tests.
Provides AWS mocking, S3 fixtures with proper cleanup, image payloads and
in-memory collaborators for the upload and retention services.
"""

import os

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AVATAR_BUCKET_NAME", "test-avatars")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "AvatarPipelineTests")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "avatar-pipeline-tests")
os.environ.pop("AWS_ENDPOINT_URL", None)

import random
from collections.abc import Callable, Sequence
from io import BytesIO
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from core.models.config import StorageConfig
from core.models.errors import (
    AuthenticationError,
    ListObjectsError,
    RemoveObjectsError,
    UploadError,
)
from core.models.media import Principal, Session, StoredObject
from core.repositories.identity_repository import IdentityRepository
from core.repositories.storage_repository import ObjectStoreRepository

ONE_MIB = 1024 * 1024


# ============================================================================
# Test doubles
# ============================================================================


class FixedClock:
    """Clock returning a settable millisecond value."""

    def __init__(self, millis: int = 1_700_000_000_000) -> None:
        self.millis = millis

    def now_millis(self) -> int:
        return self.millis

    def advance(self, millis: int = 1) -> None:
        self.millis += millis


class StaticIdentity(IdentityRepository):
    """Identity collaborator with a fixed session and principal."""

    def __init__(
        self,
        principal: Principal | None = None,
        *,
        session_error: str | None = None,
    ) -> None:
        self.principal = principal
        self.session_error = session_error

    def get_session(self) -> Session:
        if self.session_error:
            raise AuthenticationError(message=self.session_error)
        return Session(subject=self.principal.id if self.principal else None)

    def get_current_user(self) -> Principal | None:
        return self.principal


class FakeObjectStore(ObjectStoreRepository):
    """In-memory object store recording every call."""

    def __init__(
        self,
        *,
        upload_error: str | None = None,
        list_error: str | None = None,
        remove_error: str | None = None,
        public_url: bool = True,
    ) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.upload_calls: list[dict[str, Any]] = []
        self.removed: list[str] = []
        self.listed: list[tuple[str, int]] = []
        self.extra_listing: list[StoredObject] = []
        self.upload_error = upload_error
        self.list_error = list_error
        self.remove_error = remove_error
        self.public_url = public_url

    def upload(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
        cache_control: str | None = None,
    ) -> None:
        self.upload_calls.append(
            {"key": key, "content_type": content_type, "upsert": upsert, "cache_control": cache_control}
        )
        if self.upload_error:
            raise UploadError(message=self.upload_error)
        if not upsert and key in self.objects:
            raise UploadError(message="The resource already exists")
        self.objects[key] = data
        self.content_types[key] = content_type

    def get_public_url(self, *, key: str) -> str | None:
        if not self.public_url:
            return None
        return f"https://cdn.example.com/{key}"

    def list(self, *, prefix: str, limit: int) -> list[StoredObject]:
        self.listed.append((prefix, limit))
        if self.list_error:
            raise ListObjectsError(message=self.list_error)

        folder = prefix.rstrip("/") + "/"
        entries = [
            StoredObject(name=key[len(folder):], key=key)
            for key in sorted(self.objects)
            if key.startswith(folder) and "/" not in key[len(folder):]
        ]
        return (entries + self.extra_listing)[:limit]

    def remove(self, *, keys: Sequence[str]) -> None:
        if self.remove_error:
            raise RemoveObjectsError(message=self.remove_error)
        for key in keys:
            self.objects.pop(key, None)
            self.removed.append(key)


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def principal() -> Principal:
    return Principal(id="user-123", email="user@example.com")


@pytest.fixture
def identity(principal) -> StaticIdentity:
    return StaticIdentity(principal)


@pytest.fixture
def identity_factory() -> Callable[..., StaticIdentity]:
    return StaticIdentity


@pytest.fixture
def fake_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def fake_store_factory() -> Callable[..., FakeObjectStore]:
    return FakeObjectStore


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(bucket="test-avatars", folder="profile-pictures")


# ============================================================================
# Image payloads
# ============================================================================


def _encode(image: Image.Image, fmt: str, **kwargs: Any) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def _noise_image(width: int, height: int, mode: str = "RGB") -> Image.Image:
    channels = len(mode)
    noise = random.Random(1234).randbytes(width * height * channels)
    return Image.frombytes(mode, (width, height), noise)


@pytest.fixture
def small_png_bytes() -> bytes:
    """Tiny 16x16 PNG well under the compression threshold."""
    return _encode(Image.new("RGB", (16, 16), (200, 30, 30)), "PNG")


@pytest.fixture
def large_png_bytes() -> bytes:
    """Noise PNG of roughly 2MB; noise defeats PNG compression."""
    data = _encode(_noise_image(900, 800), "PNG")
    assert len(data) > ONE_MIB
    return data


@pytest.fixture
def large_rgba_png_bytes() -> bytes:
    data = _encode(_noise_image(700, 500, "RGBA"), "PNG")
    assert len(data) > ONE_MIB
    return data


@pytest.fixture
def large_garbage_bytes() -> bytes:
    """Over-threshold payload that no image decoder accepts."""
    return b"not-an-image" * (2 * ONE_MIB // 12)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    return _encode(Image.new("RGB", (8, 8), (0, 128, 255)), "JPEG")


# ============================================================================
# AWS
# ============================================================================


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(Bucket=bucket_name, Delete={"Objects": delete_keys})
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (reused, moto cleans up on context exit)
    """
    bucket_name = os.getenv("AVATAR_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("profile-pictures/u/u_1.jpg", image_bytes, "image/jpeg")
    """

    def _put(key: str, body: bytes = b"data", content_type: str = "image/jpeg"):
        bucket_name = os.getenv("AVATAR_BUCKET_NAME")
        return s3_client.put_object(Bucket=bucket_name, Key=key, Body=body, ContentType=content_type)

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], dict[str, Any]]:
    """
    Helper to get an object (body and headers) from S3.

    Usage:
        obj = s3_get_object("profile-pictures/u/u_1.jpg")
    """

    def _get(key: str) -> dict[str, Any]:
        bucket_name = os.getenv("AVATAR_BUCKET_NAME")
        response: dict[str, Any] = s3_client.get_object(Bucket=bucket_name, Key=key)
        return {
            "body": response["Body"].read(),
            "content_type": response.get("ContentType"),
            "cache_control": response.get("CacheControl"),
        }

    return _get


@pytest.fixture
def s3_list_keys(s3_client) -> Callable[[str], list[str]]:
    def _list(prefix: str = "") -> list[str]:
        bucket_name = os.getenv("AVATAR_BUCKET_NAME")
        response = s3_client.list_objects_v2(Bucket=bucket_name, Prefix=prefix)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _list
