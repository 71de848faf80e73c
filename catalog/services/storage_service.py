"""S3 client construction and object upload for the remote media backend."""

import io
from typing import Optional

import boto3
from botocore.config import Config

from catalog.config import Settings, get_settings


def s3_client(settings: Optional[Settings] = None):
    settings = settings or get_settings()
    kwargs = {
        "region_name": settings.s3_region,
        "aws_access_key_id": settings.aws_access_key_id or None,
        "aws_secret_access_key": settings.aws_secret_access_key or None,
        "config": Config(signature_version="s3v4"),
    }
    if settings.s3_endpoint_url:
        kwargs["endpoint_url"] = settings.s3_endpoint_url
    else:
        # Regional endpoint so object URLs don't go through a 307 redirect.
        kwargs["endpoint_url"] = f"https://s3.{settings.s3_region}.amazonaws.com"
    return boto3.client("s3", **kwargs)


def object_url(key: str, bucket: str, settings: Optional[Settings] = None) -> str:
    """Public or path-style URL of an uploaded object."""
    settings = settings or get_settings()
    if settings.s3_endpoint_url:
        return f"{settings.s3_endpoint_url.rstrip('/')}/{bucket}/{key}"
    return f"https://{bucket}.s3.{settings.s3_region}.amazonaws.com/{key}"


def upload_bytes(client, key: str, data: bytes, content_type: str, bucket: str) -> None:
    """Upload an in-memory buffer to S3 under key."""
    client.upload_fileobj(
        io.BytesIO(data),
        bucket,
        key,
        ExtraArgs={"ContentType": content_type},
    )
