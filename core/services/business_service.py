# =============================================================================
# core/services/business_service.py - Business Resource Operations
# =============================================================================
# Composes normalizer, attachment resolver and repository into the six
# resource operations. Repository outcomes are translated here:
# - NotFound -> BusinessNotFoundError (404)
# - Failure  -> OperationFailedError (500) with the cause as details
# - upload failures abort the operation before anything is written
# =============================================================================

import logging
from typing import Any, TypeVar

from app.exceptions import AttachmentUploadError, BusinessNotFoundError, OperationFailedError
from core.models.result import Failure, NotFound, Ok, Result
from core.services.attachment_resolver import AttachmentResolver
from core.services.business_repository import BusinessRepository, StoreTimeoutError
from core.services.payload_normalizer import InboundPayload, PayloadNormalizer

logger = logging.getLogger(__name__)

T = TypeVar("T")


def unwrap(result: Result[T], summary: str) -> T:
    """
    Return the value of an Ok result or raise the matching API error.

    Args:
        result: Repository outcome
        summary: Error summary used if the store failed

    Raises:
        BusinessNotFoundError: For NotFound
        OperationFailedError: For Failure
    """
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, NotFound):
        raise BusinessNotFoundError(result.id)
    if isinstance(result, Failure):
        code = "STORE_TIMEOUT" if isinstance(result.cause, StoreTimeoutError) else "STORE_FAILURE"
        raise OperationFailedError(summary, result.message, code=code)
    raise TypeError(f"Unexpected repository result: {result!r}")


class BusinessService:
    """
    Service for business resource operations.

    Provides a clean interface between API routes and the storage
    collaborators, which are injected at startup.
    """

    def __init__(
        self,
        repository: BusinessRepository,
        normalizer: PayloadNormalizer,
        resolver: AttachmentResolver,
    ):
        self.repository = repository
        self.normalizer = normalizer
        self.resolver = resolver

    async def create_business(self, payload: InboundPayload) -> dict[str, Any]:
        """
        Create a business from a JSON or form payload.

        Attachments are uploaded before the document is written, so a failed
        upload leaves no document behind.

        Returns:
            The stored business as {id, ...fields}

        Raises:
            InvalidPayloadError / TooManyAttachmentsError: Bad request body
            OperationFailedError: Upload or store failure
        """
        summary = "Failed to create business"
        normalized = self.normalizer.normalize(payload)

        try:
            resolved = await self.resolver.resolve(normalized.attachments)
        except AttachmentUploadError as e:
            raise OperationFailedError(summary, e.message, code=e.code) from e

        record = self.normalizer.build_record(normalized, resolved)
        return unwrap(await self.repository.create(record), summary)

    async def list_businesses(self) -> list[dict[str, Any]]:
        return unwrap(await self.repository.get_all(), "Failed to fetch businesses")

    async def get_business(self, business_id: str) -> dict[str, Any]:
        return unwrap(await self.repository.get_one(business_id), "Failed to fetch business")

    async def update_business(self, business_id: str, payload: InboundPayload) -> dict[str, Any]:
        """
        Update a business with the supplied fields.

        The existence check runs before any upload, so a missing id never
        stores attachments. URL fields not supplied stay as they are.

        Returns:
            The merged business as {id, ...fields}

        Raises:
            BusinessNotFoundError: If the business does not exist
            InvalidPayloadError / TooManyAttachmentsError: Bad request body
            OperationFailedError: Upload or store failure
        """
        summary = "Failed to update business"
        stored = unwrap(await self.repository.get_one(business_id), summary)

        normalized = self.normalizer.normalize(payload)

        try:
            resolved = await self.resolver.resolve(normalized.attachments)
        except AttachmentUploadError as e:
            raise OperationFailedError(summary, e.message, code=e.code) from e

        patch = self.normalizer.build_patch(normalized, resolved)
        patch = self.normalizer.complete_patch(patch, stored)
        return unwrap(await self.repository.update(business_id, patch), summary)

    async def delete_business(self, business_id: str) -> None:
        unwrap(await self.repository.delete(business_id), "Failed to delete business")

    async def list_events(self) -> list[dict[str, Any]]:
        return unwrap(await self.repository.list_events(), "Failed to fetch events")

    async def check_readiness(self) -> dict[str, str]:
        """
        Check the document store and image storage.

        Returns:
            {"database": ..., "storage": ...}, each "healthy" or
            "unhealthy: <reason>"
        """
        checks = {}

        result = await self.repository.check()
        if isinstance(result, Failure):
            checks["database"] = f"unhealthy: {result.message[:80]}"
        else:
            checks["database"] = "healthy"

        try:
            await self.resolver.check_storage()
            checks["storage"] = "healthy"
        except Exception as e:
            logger.warning(f"Image storage check failed: {e}")
            checks["storage"] = f"unhealthy: {(str(e) or type(e).__name__)[:80]}"

        return checks
