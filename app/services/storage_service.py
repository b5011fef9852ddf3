"""
S3-compatible object storage for invoice PDFs. Uses global config; no per-call reconfiguration.

A missing bucket is created on demand and the operation retried once; any
other storage error surfaces as StorageError.
"""
import asyncio
import re
from typing import Any, Callable, Optional, TypeVar
from uuid import uuid4

import boto3
from botocore.exceptions import ClientError

from app.config import settings
from app.core.exceptions import ResourceNotFoundError, StorageError
from app.core.logging import get_logger
from app.utils.time import utc_timestamp_ms

logger = get_logger(__name__)

T = TypeVar("T")

# Suffix is optional: keys without it predate the random token
_PDF_NAME_PATTERN = r"invoice-\d+(?:-[0-9a-f]{8})?\.pdf"

PDF_CONTENT_TYPE = "application/pdf"
NO_CACHE = "max-age=0"


def _s3_client():
    if not settings.STORAGE_ACCESS_KEY_ID or not settings.STORAGE_SECRET_ACCESS_KEY:
        raise StorageError(
            "Object storage not configured: set STORAGE_ACCESS_KEY_ID and STORAGE_SECRET_ACCESS_KEY"
        )
    return boto3.client(
        service_name="s3",
        endpoint_url=settings.STORAGE_ENDPOINT_URL or None,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        region_name=settings.STORAGE_REGION,
        config=boto3.session.Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )


def _error_parts(exc: ClientError) -> tuple:
    error = exc.response.get("Error", {}) or {}
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return str(status), str(error.get("Code", "")), str(error.get("Message", "")).lower()


def is_bucket_not_found(exc: ClientError) -> bool:
    """404 plus a bucket-not-found code or message."""
    status, code, message = _error_parts(exc)
    return status == "404" and (
        code == "NoSuchBucket"
        or "bucket not found" in message
        or "bucket does not exist" in message
    )


def is_object_not_found(exc: ClientError) -> bool:
    status, code, _ = _error_parts(exc)
    return code in ("NoSuchKey", "404") or (status == "404" and code != "NoSuchBucket")


def _ensure_bucket(client) -> None:
    bucket = settings.STORAGE_BUCKET_NAME
    kwargs = {"Bucket": bucket}
    if settings.STORAGE_REGION not in ("auto", "us-east-1", ""):
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": settings.STORAGE_REGION}
    try:
        client.create_bucket(**kwargs)
        logger.info("Created storage bucket %s", bucket)
    except ClientError as e:
        _, code, message = _error_parts(e)
        if code in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists") or "already exists" in message:
            return
        raise


def _with_bucket_retry(client, operation: Callable[[Any], T]) -> T:
    try:
        return operation(client)
    except ClientError as e:
        if not is_bucket_not_found(e):
            raise
        logger.warning("Bucket %s missing; creating it and retrying once", settings.STORAGE_BUCKET_NAME)
    _ensure_bucket(client)
    return operation(client)


def build_invoice_pdf_path(
    invoice_id: Any,
    timestamp_ms: Optional[int] = None,
    suffix: Optional[str] = None,
) -> str:
    """Fresh object key per generation: invoices/<invoice_id>/invoice-<ms>-<hex8>.pdf"""
    stamp = utc_timestamp_ms() if timestamp_ms is None else timestamp_ms
    token = suffix or uuid4().hex[:8]
    return f"{invoice_pdf_prefix(invoice_id)}invoice-{stamp}-{token}.pdf"


def invoice_pdf_prefix(invoice_id: Any) -> str:
    return f"{settings.INVOICE_STORAGE_PREFIX.strip('/')}/{invoice_id}/"


def is_invoice_pdf_path(invoice_id: Any, path: str) -> bool:
    """True only for keys this service generates for the given invoice."""
    pattern = re.escape(invoice_pdf_prefix(invoice_id)) + _PDF_NAME_PATTERN
    return re.fullmatch(pattern, path) is not None


async def upload(
    path: str,
    content: bytes,
    content_type: str = "application/octet-stream",
) -> str:
    """
    Upsert bytes at `path` with caching disabled and return the path.
    """
    client = _s3_client()
    bucket = settings.STORAGE_BUCKET_NAME

    def _put():
        try:
            _with_bucket_retry(
                client,
                lambda c: c.put_object(
                    Bucket=bucket,
                    Key=path,
                    Body=content,
                    ContentType=content_type,
                    CacheControl=NO_CACHE,
                ),
            )
        except ClientError as e:
            raise StorageError(f"Storage upload failed: {e}") from e

    await asyncio.to_thread(_put)
    logger.info("Uploaded object", extra={"path": path, "size": len(content)})
    return path


async def download(path: str) -> bytes:
    """Return the stored bytes for `path` unchanged."""
    client = _s3_client()
    bucket = settings.STORAGE_BUCKET_NAME

    def _get() -> bytes:
        try:
            response = _with_bucket_retry(
                client, lambda c: c.get_object(Bucket=bucket, Key=path)
            )
        except ClientError as e:
            if is_object_not_found(e):
                raise ResourceNotFoundError("Stored object", path) from e
            raise StorageError(f"Storage download failed: {e}") from e
        return response["Body"].read()

    return await asyncio.to_thread(_get)


async def delete(path: str) -> None:
    client = _s3_client()
    bucket = settings.STORAGE_BUCKET_NAME

    def _delete():
        try:
            _with_bucket_retry(client, lambda c: c.delete_object(Bucket=bucket, Key=path))
        except ClientError as e:
            raise StorageError(f"Storage delete failed: {e}") from e

    await asyncio.to_thread(_delete)
    logger.info("Deleted object", extra={"path": path})


async def create_signed_url(path: str, expires_seconds: int = 60 * 60) -> str:
    """Time-limited GET URL for a stored object."""
    client = _s3_client()
    bucket = settings.STORAGE_BUCKET_NAME

    def _sign() -> str:
        def _head_then_sign(c) -> str:
            # presigning is local; head_object proves the object exists
            c.head_object(Bucket=bucket, Key=path)
            return c.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": path},
                ExpiresIn=expires_seconds,
            )

        try:
            return _with_bucket_retry(client, _head_then_sign)
        except ClientError as e:
            if is_object_not_found(e):
                raise ResourceNotFoundError("Stored object", path) from e
            raise StorageError(f"Could not sign URL: {e}") from e

    url = await asyncio.to_thread(_sign)
    if not url:
        raise StorageError("Failed to create signed URL for invoice PDF")
    return url
