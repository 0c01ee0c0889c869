# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .attachment_resolver import AttachmentResolver
from .business_repository import BusinessRepository, StoreTimeoutError
from .business_service import BusinessService
from .payload_normalizer import InboundPayload, NormalizedPayload, PayloadNormalizer
from .storage_service import ImageStorage, StorageService

__all__ = [
    "AttachmentResolver",
    "BusinessRepository",
    "StoreTimeoutError",
    "BusinessService",
    "InboundPayload",
    "NormalizedPayload",
    "PayloadNormalizer",
    "ImageStorage",
    "StorageService",
]
