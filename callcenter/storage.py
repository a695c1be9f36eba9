"""
Object storage for topic images (Cloudflare R2 or any S3-compatible bucket).

Objects live flat in the bucket; the stored reference on a topic is the public
URL, whose last path segment is the object key.
"""

import logging
import uuid
from typing import Iterable, Optional
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException

from . import config
from .security_utils import sanitize_filename

logger = logging.getLogger(__name__)

__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "MAX_IMAGE_SIZE",
    "get_r2_client",
    "public_url",
    "key_from_url",
    "validate_image",
    "upload_image",
    "remove_objects",
    "discard_objects",
]

# Allowed image types for topic images, with the extension used when the name has none
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

MAX_IMAGE_SIZE = 2 * 1024 * 1024  # 2MB

MISSING_BUCKET_CODES = {"NoSuchBucket", "404"}


def _endpoint_url() -> str:
    return config.R2_ENDPOINT_URL or f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=_endpoint_url(),
        aws_access_key_id=config.R2_ACCESS_KEY_ID,
        aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
        region_name="auto",
        config=Config(signature_version="s3v4"),
    )


def public_url(key: str) -> str:
    """Public URL of an object in the image bucket."""
    base = config.R2_PUBLIC_URL.rstrip("/")
    if base:
        return f"{base}/{key}"
    return f"{_endpoint_url().rstrip('/')}/{config.R2_BUCKET_NAME}/{key}"


def key_from_url(url: Optional[str]) -> Optional[str]:
    """Object key referenced by a stored image URL (its last path segment)."""
    if not url:
        return None
    key = urlparse(url).path.rsplit("/", 1)[-1]
    return key or None


def _raise_storage_error(e: Exception, action: str):
    if isinstance(e, ClientError):
        code = e.response.get("Error", {}).get("Code", "")
        if code in MISSING_BUCKET_CODES:
            logger.error(f"❌ Bucket {config.R2_BUCKET_NAME} not found during {action}")
            raise HTTPException(
                status_code=503,
                detail=(
                    "Image storage is not configured. Ask an administrator to create the "
                    f'"{config.R2_BUCKET_NAME}" bucket.'
                ),
            ) from e
    logger.error(f"❌ Storage {action} failed: {str(e)}")
    raise HTTPException(status_code=500, detail=f"Image {action} failed") from e


def validate_image(content_type: Optional[str], size: int) -> None:
    """Reject anything but JPEG/PNG/WebP up to 2MB."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Please choose a JPEG, PNG or WebP image",
        )
    if size > MAX_IMAGE_SIZE:
        raise HTTPException(status_code=400, detail="Image size must not exceed 2MB")


def upload_image(contents: bytes, filename: Optional[str], content_type: str) -> str:
    """Store an image under a random key and return its public URL."""
    validate_image(content_type, len(contents))

    safe_name = sanitize_filename(filename) if filename else ""
    ext = safe_name.rsplit(".", 1)[-1].lower() if "." in safe_name else ""
    if not ext:
        ext = ALLOWED_IMAGE_TYPES[content_type]
    key = f"{uuid.uuid4().hex}.{ext}"

    try:
        get_r2_client().put_object(
            Bucket=config.R2_BUCKET_NAME,
            Key=key,
            Body=contents,
            ContentType=content_type,
        )
    except (ClientError, BotoCoreError) as e:
        _raise_storage_error(e, "upload")

    logger.info(f"📤 Uploaded image {key} ({len(contents)} bytes)")
    return public_url(key)


def remove_objects(keys: Iterable[str]) -> int:
    """Delete objects by key. Returns the number of delete calls made."""
    keys = [k for k in keys if k]
    if not keys:
        return 0

    client = get_r2_client()
    for key in keys:
        try:
            client.delete_object(Bucket=config.R2_BUCKET_NAME, Key=key)
        except (ClientError, BotoCoreError) as e:
            _raise_storage_error(e, "removal")
        logger.info(f"🗑️ Removed image {key}")
    return len(keys)


def discard_objects(keys: Iterable[str]) -> int:
    """
    Best-effort removal of objects no longer referenced by any topic.

    Failures are logged and skipped. Returns the number of objects removed.
    """
    keys = [k for k in keys if k]
    if not keys:
        return 0

    removed = 0
    try:
        client = get_r2_client()
    except (ClientError, BotoCoreError) as e:
        logger.warning(f"⚠️ Could not reach storage, leaving {len(keys)} orphan image(s): {str(e)}")
        return 0

    for key in keys:
        try:
            client.delete_object(Bucket=config.R2_BUCKET_NAME, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"⚠️ Could not remove orphan image {key}: {str(e)}")
            continue
        removed += 1
        logger.info(f"🗑️ Removed image {key}")
    return removed
