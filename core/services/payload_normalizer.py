# =============================================================================
# core/services/payload_normalizer.py - Payload Normalization
# =============================================================================
# Turns an inbound request body into canonical business fields plus the file
# parts that still need uploading.
#
# Bodies arrive in two shapes:
# - JSON: fields keep their JSON types
# - Form (multipart or urlencoded): every field is text, repeated keys
#   arrive as lists, and productImages may be a JSON-encoded array
#
# Malformed productImages input never fails a request: it decays to [].
# URL precedence (uploads over text) is applied after attachments resolve,
# in build_record() / build_patch().
# =============================================================================

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from app.exceptions import InvalidPayloadError, TooManyAttachmentsError
from core.models.business import (
    IMAGE_URL_FIELD,
    PRODUCT_IMAGES_FIELD,
    Attachment,
    BusinessPatch,
    BusinessRecord,
    PendingAttachments,
    ResolvedAttachments,
)

logger = logging.getLogger(__name__)

# File part names feeding each attachment slot
IMAGE_PART_NAMES = ("image",)
PRODUCT_IMAGE_PART_NAMES = ("productImages", "productImages[]")


@dataclass
class InboundPayload:
    """
    A request body as the HTTP layer received it.

    Attributes:
        fields: Field name -> value. Form fields repeated in the body are
            collected into a list in submission order.
        files: (part name, attachment) pairs in submission order
        is_form: True for multipart/urlencoded bodies, False for JSON
    """

    fields: dict[str, Any] = field(default_factory=dict)
    files: list[tuple[str, Attachment]] = field(default_factory=list)
    is_form: bool = False


@dataclass
class NormalizedPayload:
    """
    Canonical fields (wire names) plus pending uploads.

    imageUrl / productImages appear in `fields` only when the caller
    supplied them as text; defaults are applied when a record is built.
    """

    fields: dict[str, Any]
    attachments: PendingAttachments


def parse_url_list(value: Any) -> list[str]:
    """
    Read a productImages value as an ordered list of URL strings.

    Accepts a list of strings, or a string holding a JSON array of strings.
    Anything else (unparseable JSON, non-array JSON, non-string items)
    decays to an empty list.

    Example:
        parse_url_list('["https://a/1.png", "https://a/2.png"]')
        # -> ["https://a/1.png", "https://a/2.png"]
        parse_url_list("not json")  # -> []
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            logger.warning(f"productImages is not valid JSON, using []: {text[:80]!r}")
            return []

    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)

    logger.warning(f"productImages is not a list of strings, using []: {type(value).__name__}")
    return []


class PayloadNormalizer:
    """
    Converts inbound payloads into canonical business records.

    Example:
        normalizer = PayloadNormalizer(placeholder_image_url="https://.../none.png")
        normalized = normalizer.normalize(payload)
        resolved = await resolver.resolve(normalized.attachments)
        record = normalizer.build_record(normalized, resolved)
    """

    def __init__(self, placeholder_image_url: str, max_product_images: int = 10):
        self.placeholder_image_url = placeholder_image_url
        self.max_product_images = max_product_images

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    def normalize(self, payload: InboundPayload) -> NormalizedPayload:
        """
        Normalize text fields and sort file parts into attachment slots.

        Raises:
            InvalidPayloadError: If a text attribute has an unusable value
            TooManyAttachmentsError: If a slot receives too many files
        """
        fields = self._normalize_fields(payload.fields, payload.is_form)

        try:
            patch = BusinessPatch.model_validate(fields)
        except ValidationError as e:
            raise InvalidPayloadError(self._describe_validation_error(e)) from e

        attachments = self._collect_attachments(payload.files)
        return NormalizedPayload(fields=patch.to_document(), attachments=attachments)

    def _normalize_fields(self, raw: dict[str, Any], is_form: bool) -> dict[str, Any]:
        fields: dict[str, Any] = {}

        for name, value in raw.items():
            if name == "id":
                # Identifiers are assigned by the store, never by the caller
                continue

            if name in PRODUCT_IMAGE_PART_NAMES:
                if is_form and isinstance(value, list) and len(value) == 1:
                    value = value[0]
                fields[PRODUCT_IMAGES_FIELD] = parse_url_list(value)
                continue

            if is_form and isinstance(value, list):
                value = value[-1] if value else None

            if name == IMAGE_URL_FIELD:
                if isinstance(value, str):
                    value = value.strip()
                if value in (None, ""):
                    continue

            fields[name] = value

        return fields

    def _collect_attachments(self, files: list[tuple[str, Attachment]]) -> PendingAttachments:
        images: list[Attachment] = []
        product_images: list[Attachment] = []

        for part_name, attachment in files:
            if not attachment.filename and attachment.size == 0:
                # Browser file input submitted with no file chosen
                continue
            if part_name in IMAGE_PART_NAMES:
                images.append(attachment)
            elif part_name in PRODUCT_IMAGE_PART_NAMES:
                product_images.append(attachment)
            else:
                logger.debug(f"Ignoring file part '{part_name}' ({attachment.filename})")

        if len(images) > 1:
            raise TooManyAttachmentsError("image", len(images), 1)
        if len(product_images) > self.max_product_images:
            raise TooManyAttachmentsError(
                PRODUCT_IMAGES_FIELD, len(product_images), self.max_product_images
            )

        return PendingAttachments(
            image=images[0] if images else None,
            product_images=product_images,
        )

    @staticmethod
    def _describe_validation_error(error: ValidationError) -> str:
        problems = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"])
            problems.append(f"{location}: {item['msg']}")
        return "; ".join(problems)

    # -------------------------------------------------------------------------
    # Record building (after attachments resolve)
    # -------------------------------------------------------------------------

    def _apply_resolved(
        self, normalized: NormalizedPayload, resolved: ResolvedAttachments
    ) -> dict[str, Any]:
        fields = dict(normalized.fields)
        if resolved.image_url:
            fields[IMAGE_URL_FIELD] = resolved.image_url
        if resolved.product_image_urls is not None:
            fields[PRODUCT_IMAGES_FIELD] = list(resolved.product_image_urls)
        return fields

    def build_record(
        self, normalized: NormalizedPayload, resolved: ResolvedAttachments
    ) -> BusinessRecord:
        """
        Build a complete record for insertion.

        Uploaded URLs win over textual values; missing URL fields get the
        placeholder image and an empty product list.
        """
        fields = self._apply_resolved(normalized, resolved)
        fields.setdefault(IMAGE_URL_FIELD, self.placeholder_image_url)
        fields.setdefault(PRODUCT_IMAGES_FIELD, [])
        return BusinessRecord.model_validate(fields)

    def build_patch(
        self, normalized: NormalizedPayload, resolved: ResolvedAttachments
    ) -> BusinessPatch:
        """
        Build the field set for an update.

        URL fields that were neither uploaded nor supplied stay unset so the
        stored values survive an unrelated field update.
        """
        return BusinessPatch.model_validate(self._apply_resolved(normalized, resolved))

    def complete_patch(self, patch: BusinessPatch, stored: dict[str, Any]) -> BusinessPatch:
        """
        Add URL repairs for a stored record that predates normalization.

        If the patch leaves a URL field alone and the stored value is missing
        or malformed, the patch sets the placeholder image / a clean list.
        """
        fields = patch.to_document()

        stored_image = stored.get(IMAGE_URL_FIELD)
        if IMAGE_URL_FIELD not in fields and not (isinstance(stored_image, str) and stored_image):
            fields[IMAGE_URL_FIELD] = self.placeholder_image_url

        stored_products = stored.get(PRODUCT_IMAGES_FIELD)
        if PRODUCT_IMAGES_FIELD not in fields and not (
            isinstance(stored_products, list)
            and all(isinstance(url, str) for url in stored_products)
        ):
            fields[PRODUCT_IMAGES_FIELD] = parse_url_list(stored_products)

        return BusinessPatch.model_validate(fields)
