# =============================================================================
# core/services/business_repository.py - Business Persistence
# =============================================================================
# Create/read/update/delete of business documents, plus the read-only events
# listing. Every operation returns Ok | NotFound | Failure instead of raising;
# store errors and timeouts become Failure.
# =============================================================================

import asyncio
import logging
from typing import Any, Callable, TypeVar

from core.models.business import BusinessPatch, BusinessRecord
from core.models.result import Failure, NotFound, Ok, Result
from lib.document_store import DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreTimeoutError(Exception):
    """A document store call did not finish within its time bound."""


class BusinessRepository:
    """
    Repository for business and event documents.

    Store calls run in worker threads, each bounded by timeout_seconds.
    Documents are returned as flat dicts: {id, ...fields}.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str = "businesses",
        events_collection: str = "events",
        timeout_seconds: float = 10.0,
    ):
        self.store = store
        self.collection = collection
        self.events_collection = events_collection
        self.timeout_seconds = timeout_seconds

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise StoreTimeoutError(
                f"Document store did not respond within {self.timeout_seconds:g}s"
            ) from e

    # -------------------------------------------------------------------------
    # Businesses
    # -------------------------------------------------------------------------

    async def create(self, record: BusinessRecord) -> Result[dict[str, Any]]:
        """Insert a new business; the store assigns its id."""
        try:
            document = await self._call(
                self.store.add_document, self.collection, record.to_document()
            )
        except Exception as e:
            logger.error(f"Failed to create business: {e}")
            return Failure(e)

        logger.info(f"Created business: {document.id}")
        return Ok(document.flatten())

    async def get_all(self) -> Result[list[dict[str, Any]]]:
        """Every business, in store order."""
        try:
            documents = await self._call(self.store.list_documents, self.collection)
        except Exception as e:
            logger.error(f"Failed to list businesses: {e}")
            return Failure(e)

        return Ok([document.flatten() for document in documents])

    async def get_one(self, business_id: str) -> Result[dict[str, Any]]:
        try:
            document = await self._call(
                self.store.get_document, self.collection, business_id
            )
        except Exception as e:
            logger.error(f"Failed to fetch business {business_id}: {e}")
            return Failure(e)

        if document is None:
            return NotFound(business_id)
        return Ok(document.flatten())

    async def update(self, business_id: str, patch: BusinessPatch) -> Result[dict[str, Any]]:
        """
        Merge the supplied fields into an existing business.

        Checks existence first; a missing id yields NotFound and nothing
        is written. Fields not in the patch keep their stored values.

        Returns:
            Ok with the post-update document, NotFound, or Failure
        """
        current = await self.get_one(business_id)
        if not isinstance(current, Ok):
            return current

        fields = patch.to_document()
        fields.pop("id", None)

        try:
            document = await self._call(
                self.store.update_document, self.collection, business_id, fields
            )
        except Exception as e:
            logger.error(f"Failed to update business {business_id}: {e}")
            return Failure(e)

        if document is None:
            # Deleted between the existence check and the write
            return NotFound(business_id)

        logger.info(f"Updated business: {business_id}")
        return Ok(document.flatten())

    async def delete(self, business_id: str) -> Result[None]:
        """Remove a business after checking it exists."""
        current = await self.get_one(business_id)
        if not isinstance(current, Ok):
            return current

        try:
            await self._call(self.store.delete_document, self.collection, business_id)
        except Exception as e:
            logger.error(f"Failed to delete business {business_id}: {e}")
            return Failure(e)

        logger.info(f"Deleted business: {business_id}")
        return Ok(None)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def list_events(self) -> Result[list[dict[str, Any]]]:
        """Every event document, passed through without normalization."""
        try:
            documents = await self._call(self.store.list_documents, self.events_collection)
        except Exception as e:
            logger.error(f"Failed to list events: {e}")
            return Failure(e)

        return Ok([document.flatten() for document in documents])

    async def check(self) -> Result[None]:
        """Confirm both collections are reachable."""
        try:
            for collection in (self.collection, self.events_collection):
                await self._call(self.store.check, collection)
        except Exception as e:
            logger.warning(f"Document store check failed: {e}")
            return Failure(e)

        return Ok(None)
