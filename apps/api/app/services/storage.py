"""MinIO-backed storage helpers for uploaded documents."""

import re
import time
from datetime import timedelta
from io import BytesIO

from flashdeck_core.utils.logging import get_logger, log_exceptions
from minio import Minio
from minio.error import S3Error

from app.settings import settings

logger = get_logger(__name__)

_client: Minio | None = None

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def get_client() -> Minio:
    """Get the MinIO client instance."""
    global _client
    if _client is None:
        _client = Minio(
            settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
        )
    return _client


async def init_storage() -> None:
    """Initialize storage bucket."""
    client = get_client()
    try:
        if not client.bucket_exists(settings.minio_bucket):
            client.make_bucket(settings.minio_bucket)
    except S3Error as e:
        # Bucket might already exist
        if e.code != "BucketAlreadyOwnedByYou":
            raise


def build_object_key(filename: str, now_ms: int | None = None) -> str:
    """Build a unique object key from a timestamp and a sanitized filename."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{_UNSAFE_FILENAME_CHARS.sub('_', filename)}"


@log_exceptions(logger)
async def upload_file(
    object_key: str,
    data: bytes,
    content_type: str = "application/octet-stream",
) -> str:
    """Upload a file to storage."""
    client = get_client()
    client.put_object(
        settings.minio_bucket,
        object_key,
        BytesIO(data),
        length=len(data),
        content_type=content_type,
    )
    return object_key


@log_exceptions(logger)
async def download_file(object_key: str) -> bytes:
    """Download a file from storage."""
    client = get_client()
    response = client.get_object(settings.minio_bucket, object_key)
    try:
        return response.read()
    finally:
        response.close()
        response.release_conn()


@log_exceptions(logger)
async def get_presigned_url(
    object_key: str,
    expires: timedelta | None = None,
) -> str:
    """Get a signed read URL, valid for the configured number of days by default."""
    client = get_client()
    return client.presigned_get_object(
        settings.minio_bucket,
        object_key,
        expires=expires or timedelta(days=settings.signed_url_expiry_days),
    )


async def delete_file(object_key: str) -> None:
    """Delete a file from storage."""
    client = get_client()
    client.remove_object(settings.minio_bucket, object_key)
