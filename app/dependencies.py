# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# Builds the business service from settings at startup and hands it to route
# handlers through FastAPI's Depends(). The service lives on app.state, so
# tests can inject their own before the app starts.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.services.attachment_resolver import AttachmentResolver
from core.services.business_repository import BusinessRepository
from core.services.business_service import BusinessService
from core.services.payload_normalizer import PayloadNormalizer
from core.services.storage_service import StorageService
from lib.document_store import SupabaseDocumentStore
from lib.supabase_client import create_supabase_client


def build_business_service(settings: Settings) -> BusinessService:
    """
    Wire the Supabase-backed business service.

    One Supabase client is shared by the document store and image storage.
    """
    client = create_supabase_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_KEY,
        request_timeout=settings.STORE_TIMEOUT_SECONDS,
        storage_timeout=settings.UPLOAD_TIMEOUT_SECONDS,
    )

    repository = BusinessRepository(
        SupabaseDocumentStore(client),
        collection=settings.BUSINESSES_COLLECTION,
        events_collection=settings.EVENTS_COLLECTION,
        timeout_seconds=settings.STORE_TIMEOUT_SECONDS,
    )
    storage = StorageService(
        client,
        bucket=settings.STORAGE_BUCKET,
        allowed_content_types=settings.allowed_image_types_list,
        max_size_bytes=settings.max_upload_size_bytes,
        max_dimensions=settings.image_bounding_box,
    )
    resolver = AttachmentResolver(
        storage,
        concurrency=settings.UPLOAD_CONCURRENCY,
        timeout_seconds=settings.UPLOAD_TIMEOUT_SECONDS,
        abort_on_failure=settings.ABORT_ON_UPLOAD_FAILURE,
    )
    normalizer = PayloadNormalizer(
        placeholder_image_url=settings.PLACEHOLDER_IMAGE_URL,
        max_product_images=settings.MAX_PRODUCT_IMAGES,
    )

    return BusinessService(repository, normalizer, resolver)


def get_business_service(request: Request) -> BusinessService:
    """Get the business service built at startup."""
    return request.app.state.business_service


# Type alias for dependency injection
BusinessServiceDep = Annotated[BusinessService, Depends(get_business_service)]
