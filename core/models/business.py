# =============================================================================
# core/models/business.py - Business Record Schemas
# =============================================================================
# These models define the canonical shape of a business record:
# - BusinessFields: the free-form text attributes shared by every shape
# - BusinessRecord: a complete record ready to be inserted (create)
# - BusinessPatch: the subset of fields supplied by an update
# - Attachment: one binary file part destined for blob storage
#
# Request bodies of any shape (JSON or multipart) are normalized into these
# models at the boundary, so the repository only ever sees canonical data.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Wire names of the two URL fields, shared by normalizer and resolver
IMAGE_URL_FIELD = "imageUrl"
PRODUCT_IMAGES_FIELD = "productImages"


class BusinessFields(BaseModel):
    """
    Free-form text attributes of a business.

    Nothing is required: a record holds whatever the caller supplied.
    Fields outside this set are kept as extras and stored unchanged.
    Numeric JSON values (e.g. a phone number sent as a number) are stored
    as strings.

    Example:
        {
            "name": "Acme",
            "industry": "Retail",
            "contactNumber": "0821234567"
        }
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    name: str | None = None
    industry: str | None = None
    description: str | None = None
    location: str | None = None
    contact_person: str | None = Field(default=None, alias="contactPerson")
    contact_number: str | None = Field(default=None, alias="contactNumber")
    email: str | None = None
    facebook: str | None = None
    products: str | None = None

    def to_document(self) -> dict[str, Any]:
        """
        Dump only the fields that were actually supplied, under wire names.

        Unset attributes are left out so a stored document round-trips to
        exactly what the caller wrote.
        """
        return self.model_dump(by_alias=True, exclude_unset=True)


class BusinessRecord(BusinessFields):
    """
    A complete, store-ready business record.

    imageUrl is always present and productImages is always a list of
    strings; the normalizer guarantees both before a record is built.
    """

    image_url: str = Field(..., alias=IMAGE_URL_FIELD)
    product_images: list[str] = Field(default_factory=list, alias=PRODUCT_IMAGES_FIELD)

    def to_document(self) -> dict[str, Any]:
        """Dump supplied fields plus both URL fields, defaults included."""
        document = super().to_document()
        document.setdefault(IMAGE_URL_FIELD, self.image_url)
        document.setdefault(PRODUCT_IMAGES_FIELD, list(self.product_images))
        return document


class BusinessPatch(BusinessFields):
    """
    Fields supplied by an update request.

    The URL fields stay unset when the update neither uploads files nor
    supplies textual values, leaving the stored URLs untouched.
    """

    image_url: str | None = Field(default=None, alias=IMAGE_URL_FIELD)
    product_images: list[str] | None = Field(default=None, alias=PRODUCT_IMAGES_FIELD)


@dataclass(frozen=True)
class Attachment:
    """A binary file part submitted alongside a request."""

    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-cased extension including the dot, or "" if none."""
        if "." not in self.filename:
            return ""
        return "." + self.filename.rsplit(".", 1)[-1].lower()


@dataclass
class PendingAttachments:
    """File parts waiting to be uploaded, by slot."""

    image: Attachment | None = None
    product_images: list[Attachment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.image is None and not self.product_images


@dataclass
class ResolvedAttachments:
    """
    Public URLs produced for the pending attachments.

    product_image_urls is None when no productImages files were submitted,
    and a list (in submission order) when they were.
    """

    image_url: str | None = None
    product_image_urls: list[str] | None = None
