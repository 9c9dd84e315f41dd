"""S3 object storage wrapper for image bytes.

Works against AWS S3 or any S3-compatible endpoint (MinIO, R2) when
``s3_endpoint_url`` is set. Keys follow one convention:
    collections/{collection_id}/{image_id}.jpg
so deleting a collection is a single prefix delete.
"""

from __future__ import annotations

from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import ClientError

from centralapi.config import settings

logger = structlog.get_logger()


def collection_prefix(collection_id: int) -> str:
    return f"collections/{collection_id}/"


def image_key(collection_id: int, image_id: str, extension: str) -> str:
    return f"{collection_prefix(collection_id)}{image_id}{extension}"


def _build_client() -> Any:
    kwargs: dict[str, Any] = {
        "region_name": settings.s3_region,
        "config": Config(signature_version="s3v4"),
    }
    if settings.s3_endpoint_url:
        kwargs["endpoint_url"] = settings.s3_endpoint_url
    # Empty credentials fall through to boto3's default chain (env, profile, IAM role)
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    return boto3.client("s3", **kwargs)


_client: Any = None


def _get_client() -> Any:
    """Lazy-init singleton client."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = _build_client()
    return _client


def reset_client() -> None:
    """Drop the cached client (tests, credential rotation)."""
    global _client  # noqa: PLW0603
    _client = None


def public_url(key: str) -> str:
    """Canonical (unsigned) URL recorded on the image row."""
    if settings.s3_endpoint_url:
        return f"{settings.s3_endpoint_url.rstrip('/')}/{settings.s3_bucket_name}/{key}"
    return f"https://{settings.s3_bucket_name}.s3.{settings.s3_region}.amazonaws.com/{key}"


def upload_object(key: str, data: bytes, content_type: str = "image/jpeg") -> str:
    """Upload bytes. Returns the storage key."""
    client = _get_client()
    client.put_object(
        Bucket=settings.s3_bucket_name,
        Key=key,
        Body=data,
        ContentType=content_type,
    )
    logger.info("storage_upload", key=key, size=len(data), content_type=content_type)
    return key


def generate_presigned_url(key: str) -> str:
    """Pre-signed GET URL valid for ``presigned_url_expiry_seconds``."""
    client = _get_client()
    try:
        url: str = client.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.s3_bucket_name, "Key": key},
            ExpiresIn=settings.presigned_url_expiry_seconds,
        )
    except ClientError as e:
        logger.error("storage_presign_failed", key=key, error=str(e))
        raise
    return url


def head_object(key: str) -> bool:
    """True if the object exists."""
    client = _get_client()
    try:
        client.head_object(Bucket=settings.s3_bucket_name, Key=key)
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] in ("404", "NoSuchKey", "NotFound"):
            return False
        logger.error("storage_head_failed", key=key, error=str(e))
        raise


def head_bucket() -> None:
    """Raise if the configured bucket is unreachable (used by /health)."""
    _get_client().head_bucket(Bucket=settings.s3_bucket_name)


def delete_object(key: str) -> None:
    client = _get_client()
    client.delete_object(Bucket=settings.s3_bucket_name, Key=key)
    logger.info("storage_delete", key=key)


def delete_prefix(prefix: str) -> int:
    """Delete every object under ``prefix``. Returns the number deleted."""
    client = _get_client()
    paginator = client.get_paginator("list_objects_v2")
    deleted_count = 0
    for page in paginator.paginate(Bucket=settings.s3_bucket_name, Prefix=prefix):
        objects = page.get("Contents", [])
        if not objects:
            continue
        response = client.delete_objects(
            Bucket=settings.s3_bucket_name,
            Delete={"Objects": [{"Key": obj["Key"]} for obj in objects]},
        )
        errors = response.get("Errors", [])
        if errors:
            logger.warning("storage_delete_partial_failure", prefix=prefix, errors=errors)
        deleted_count += len(objects) - len(errors)
    logger.info("storage_delete_prefix", prefix=prefix, deleted_count=deleted_count)
    return deleted_count
