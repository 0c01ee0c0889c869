# =============================================================================
# core/services/storage_service.py - Image Storage (Blob Upload Adapter)
# =============================================================================
# Stores image attachments in Supabase Storage and returns their public URL.
# An upload either yields a durable URL or raises AttachmentUploadError;
# it never returns a placeholder.
# =============================================================================

import logging
from typing import Protocol
from uuid import uuid4

from supabase import Client

from app.exceptions import AttachmentUploadError
from core.models.business import Attachment
from lib.images import UnsupportedImageError, fit_within

logger = logging.getLogger(__name__)

# Fallback extension when the filename carries none
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class ImageStorage(Protocol):
    """Anything that turns an attachment into a public URL."""

    def upload(self, attachment: Attachment) -> str:
        ...

    def check(self) -> None:
        """Raise if the storage backend is unreachable."""
        ...


class StorageService:
    """
    Service for Supabase Storage operations.

    Validates the attachment, shrinks it to the configured bounding box,
    stores it under a unique path and returns the public URL.

    Example:
        storage = StorageService(client, bucket="business-images")
        url = storage.upload(Attachment(content, "logo.png", "image/png"))
    """

    PATH_PREFIX = "businesses"

    def __init__(
        self,
        client: Client,
        bucket: str,
        allowed_content_types: list[str] | None = None,
        max_size_bytes: int = 10 * 1024 * 1024,
        max_dimensions: tuple[int, int] | None = (1200, 1200),
    ):
        self._client = client
        self.bucket = bucket
        self.allowed_content_types = allowed_content_types or list(CONTENT_TYPE_EXTENSIONS)
        self.max_size_bytes = max_size_bytes
        self.max_dimensions = max_dimensions

    def _validate(self, attachment: Attachment) -> None:
        if attachment.size == 0:
            raise AttachmentUploadError("File is empty", filename=attachment.filename)

        if attachment.content_type.lower() not in self.allowed_content_types:
            raise AttachmentUploadError(
                f"Unsupported content type '{attachment.content_type}' "
                f"(allowed: {', '.join(self.allowed_content_types)})",
                filename=attachment.filename,
            )

        if attachment.size > self.max_size_bytes:
            size_mb = attachment.size / (1024 * 1024)
            max_mb = self.max_size_bytes / (1024 * 1024)
            raise AttachmentUploadError(
                f"File too large: {size_mb:.1f}MB (max: {max_mb:.0f}MB)",
                filename=attachment.filename,
            )

    def build_path(self, attachment: Attachment) -> str:
        """Unique object path, keeping the attachment's extension."""
        extension = attachment.extension or CONTENT_TYPE_EXTENSIONS.get(
            attachment.content_type.lower(), ""
        )
        return f"{self.PATH_PREFIX}/{uuid4().hex}{extension}"

    def upload(self, attachment: Attachment) -> str:
        """
        Upload an image attachment and return its public URL.

        Args:
            attachment: File bytes plus filename and content type

        Returns:
            Public URL of the stored object

        Raises:
            AttachmentUploadError: If the file is rejected or storage fails
        """
        self._validate(attachment)

        content = attachment.content
        if self.max_dimensions:
            try:
                content = fit_within(content, self.max_dimensions)
            except UnsupportedImageError as e:
                raise AttachmentUploadError(str(e), filename=attachment.filename) from e

        path = self.build_path(attachment)
        bucket = self._client.storage.from_(self.bucket)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": attachment.content_type, "upsert": "false"},
            )
            public_url = bucket.get_public_url(path)
        except Exception as e:
            logger.error(f"Storage upload failed for {attachment.filename}: {e}")
            raise AttachmentUploadError(str(e), filename=attachment.filename) from e

        if not public_url:
            raise AttachmentUploadError("Storage returned no public URL", filename=attachment.filename)

        logger.info(f"Uploaded {attachment.filename} to {self.bucket}/{path}")
        return public_url

    def check(self) -> None:
        """
        Confirm the bucket exists and is reachable.

        Raises:
            Exception: Whatever the Storage client raised
        """
        self._client.storage.get_bucket(self.bucket)
