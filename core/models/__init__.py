# =============================================================================
# core/models/ - Data Models
# =============================================================================
# This package contains the canonical data shapes:
# - business.py: Business record schemas and attachment containers
# - result.py: Ok / NotFound / Failure outcomes returned by the repository
# =============================================================================

from .business import (
    IMAGE_URL_FIELD,
    PRODUCT_IMAGES_FIELD,
    Attachment,
    BusinessFields,
    BusinessPatch,
    BusinessRecord,
    PendingAttachments,
    ResolvedAttachments,
)
from .result import Failure, NotFound, Ok, Result

__all__ = [
    # Business
    "IMAGE_URL_FIELD",
    "PRODUCT_IMAGES_FIELD",
    "Attachment",
    "BusinessFields",
    "BusinessPatch",
    "BusinessRecord",
    "PendingAttachments",
    "ResolvedAttachments",
    # Results
    "Failure",
    "NotFound",
    "Ok",
    "Result",
]
