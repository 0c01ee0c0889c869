# =============================================================================
# core/services/attachment_resolver.py - Attachment Upload Orchestration
# =============================================================================
# Uploads the "image" attachment and every "productImages" attachment through
# the image storage, concurrently, and reassembles the product URLs in the
# order the files were submitted.
#
# Storage calls are blocking, so each one runs in a worker thread holding a
# concurrency slot until the storage call returns. Every call has a timeout.
# =============================================================================

import asyncio
import logging
import threading

from app.exceptions import AttachmentUploadError
from core.models.business import (
    PRODUCT_IMAGES_FIELD,
    Attachment,
    PendingAttachments,
    ResolvedAttachments,
)
from core.services.storage_service import ImageStorage

logger = logging.getLogger(__name__)


class AttachmentResolver:
    """
    Resolves pending attachments into public URLs.

    With abort_on_failure (the default) any failed upload fails the whole
    resolution, so no record is written with a partial attachment set.
    Without it, failed attachments are dropped and logged.

    Example:
        resolver = AttachmentResolver(storage, concurrency=4, timeout_seconds=30)
        resolved = await resolver.resolve(normalized.attachments)
    """

    def __init__(
        self,
        storage: ImageStorage,
        concurrency: int = 4,
        timeout_seconds: float = 30.0,
        abort_on_failure: bool = True,
    ):
        self.storage = storage
        self.concurrency = concurrency
        self.timeout_seconds = timeout_seconds
        self.abort_on_failure = abort_on_failure

    def _upload_in_slot(self, attachment: Attachment, slots: threading.BoundedSemaphore) -> str:
        # Held by the thread, so an upload past its timeout keeps its slot
        with slots:
            return self.storage.upload(attachment)

    async def _upload(
        self,
        attachment: Attachment,
        step: str,
        semaphore: asyncio.Semaphore,
        slots: threading.BoundedSemaphore,
    ) -> str:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    asyncio.to_thread(self._upload_in_slot, attachment, slots),
                    timeout=self.timeout_seconds,
                )
            except AttachmentUploadError as e:
                raise e.at_step(step) from e
            except asyncio.TimeoutError as e:
                raise AttachmentUploadError(
                    f"Timed out after {self.timeout_seconds:g}s",
                    filename=attachment.filename,
                    step=step,
                ) from e
            except Exception as e:
                raise AttachmentUploadError(
                    str(e) or type(e).__name__, filename=attachment.filename, step=step
                ) from e

    async def check_storage(self) -> None:
        """Raise if image storage does not answer within the upload timeout."""
        await asyncio.wait_for(
            asyncio.to_thread(self.storage.check), timeout=self.timeout_seconds
        )

    async def resolve(self, pending: PendingAttachments) -> ResolvedAttachments:
        """
        Upload every pending attachment.

        Returns:
            URLs for the image slot and, in submission order, the product images

        Raises:
            AttachmentUploadError: If an upload fails and abort_on_failure is set.
                The first failure in submission order is reported, image first.
        """
        if pending.is_empty:
            return ResolvedAttachments()

        # semaphore limits worker threads handed out, slots limits storage calls
        semaphore = asyncio.Semaphore(self.concurrency)
        slots = threading.BoundedSemaphore(self.concurrency)

        steps: list[str] = []
        uploads = []
        if pending.image is not None:
            steps.append("image")
            uploads.append(self._upload(pending.image, "image", semaphore, slots))
        for index, attachment in enumerate(pending.product_images):
            step = f"{PRODUCT_IMAGES_FIELD}[{index}]"
            steps.append(step)
            uploads.append(self._upload(attachment, step, semaphore, slots))

        # gather() keeps results in argument order regardless of completion order
        outcomes = await asyncio.gather(*uploads, return_exceptions=True)

        for outcome in outcomes:
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome

        failures = [outcome for outcome in outcomes if isinstance(outcome, Exception)]
        if failures:
            if self.abort_on_failure:
                logger.error(f"Attachment upload failed, aborting: {failures[0]}")
                raise failures[0]
            for failure in failures:
                logger.warning(f"Dropping attachment after failed upload: {failure}")

        results = dict(zip(steps, outcomes))
        resolved = ResolvedAttachments()

        if pending.image is not None:
            image_outcome = results.pop("image")
            if isinstance(image_outcome, str):
                resolved.image_url = image_outcome

        if pending.product_images:
            resolved.product_image_urls = [
                outcome for outcome in results.values() if isinstance(outcome, str)
            ]

        logger.info(
            f"Resolved {len(outcomes) - len(failures)}/{len(outcomes)} attachments"
        )
        return resolved
