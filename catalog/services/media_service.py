"""
Media ingestion: turn an optional uploaded image into a stored reference string.

Three interchangeable backends share one contract:

- ``LocalDiskIngestor`` writes under the upload directory and returns a
  relative path served by the app (``/uploads/episodes/...``).
- ``RemoteBufferedIngestor`` uploads the in-memory buffer to S3 and returns
  the absolute object URL.
- ``NoopIngestor`` is for deployments without any media backend and always
  returns an empty reference.

No attachment means an empty reference and no side effect. A rejected
attachment raises ValidationError before anything is written; a failed write
raises StorageUnavailableError.
"""

import abc
import logging
import os
import random
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from catalog.config import Settings
from catalog.core.exceptions import StorageUnavailableError, ValidationError
from catalog.services import storage_service

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {"jpeg", "jpg", "png", "gif"}
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}


@dataclass(frozen=True)
class MediaAttachment:
    """An uploaded file as received from the request."""

    filename: str
    mime_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename or "")[1].lower()


def validate_image(attachment: MediaAttachment, max_bytes: Optional[int] = None) -> None:
    """Raise ValidationError unless the attachment is an allowed, non-empty image."""
    ext = attachment.extension.lstrip(".")
    mime = (attachment.mime_type or "").lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS or mime not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Allowed: jpeg, jpg, png, gif")
    if not attachment.data:
        raise ValidationError("Uploaded image is empty")
    if max_bytes is not None and len(attachment.data) > max_bytes:
        raise ValidationError(f"Uploaded image exceeds {max_bytes} bytes")


def generate_name(category: str, suffix: str, ext: str) -> str:
    return f"{category}-{int(time.time() * 1000)}-{suffix}{ext}"


class MediaIngestor(abc.ABC):
    """Converts an optional attachment into a stored-resource reference."""

    name: str = "abstract"

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes

    def ingest(self, attachment: Optional[MediaAttachment], category: str) -> str:
        if attachment is None:
            return ""
        validate_image(attachment, self.max_bytes)
        return self._store(attachment, category)

    @abc.abstractmethod
    def _store(self, attachment: MediaAttachment, category: str) -> str:
        """Persist a validated attachment exactly once; return its reference."""


class LocalDiskIngestor(MediaIngestor):
    name = "local"

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads", max_bytes: Optional[int] = None):
        super().__init__(max_bytes)
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def _store(self, attachment: MediaAttachment, category: str) -> str:
        filename = generate_name(category, str(random.randint(0, 10**9)), attachment.extension)
        target_dir = self.upload_dir / category
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / filename).write_bytes(attachment.data)
        except OSError as e:
            logger.error("Writing %s to %s failed: %s", filename, target_dir, e, exc_info=True)
            raise StorageUnavailableError("Could not store uploaded image")
        logger.info("Stored %s (%d bytes) on local disk", filename, len(attachment.data))
        return f"{self.url_prefix}/{category}/{filename}"


class RemoteBufferedIngestor(MediaIngestor):
    name = "s3"

    def __init__(
        self,
        client,
        bucket: str,
        key_prefix: str = "",
        settings: Optional[Settings] = None,
        max_bytes: Optional[int] = None,
    ):
        super().__init__(max_bytes)
        self.client = client
        self.bucket = bucket
        self.key_prefix = key_prefix.strip("/")
        self.settings = settings

    def _store(self, attachment: MediaAttachment, category: str) -> str:
        filename = generate_name(category, secrets.token_hex(6), attachment.extension)
        key = "/".join(p for p in (self.key_prefix, category, filename) if p)
        try:
            storage_service.upload_bytes(
                self.client, key, attachment.data, attachment.mime_type.lower(), self.bucket
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload of %s failed: %s", key, e, exc_info=True)
            raise StorageUnavailableError("Could not upload image to media store")
        logger.info("Uploaded %s (%d bytes) to bucket %s", key, len(attachment.data), self.bucket)
        return storage_service.object_url(key, self.bucket, settings=self.settings)


class NoopIngestor(MediaIngestor):
    """Degenerate backend: no media support configured, attachments are ignored."""

    name = "none"

    def ingest(self, attachment: Optional[MediaAttachment], category: str) -> str:
        if attachment is not None:
            logger.debug("No media backend configured; ignoring %s", attachment.filename)
        return ""

    def _store(self, attachment: MediaAttachment, category: str) -> str:
        return ""


def build_media_ingestor(settings: Settings) -> MediaIngestor:
    """Select the ingestion backend from configuration."""
    if settings.media_backend == "local":
        return LocalDiskIngestor(
            settings.media_upload_dir,
            url_prefix=settings.media_url_prefix,
            max_bytes=settings.media_max_upload_bytes,
        )
    if settings.media_backend == "s3":
        return RemoteBufferedIngestor(
            storage_service.s3_client(settings),
            settings.s3_bucket,
            key_prefix=settings.s3_key_prefix,
            settings=settings,
            max_bytes=settings.media_max_upload_bytes,
        )
    return NoopIngestor(max_bytes=settings.media_max_upload_bytes)

