# =============================================================================
# app/routers/businesses.py - Business CRUD Endpoints
# =============================================================================
# Create and update accept either a JSON object or a form submission
# (multipart or urlencoded) with optional "image" and "productImages" files.
# =============================================================================

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Path, Request
from starlette.datastructures import UploadFile

from app.dependencies import BusinessServiceDep
from app.exceptions import InvalidPayloadError
from core.models.business import Attachment
from core.services.payload_normalizer import InboundPayload

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


# =============================================================================
# Helper Functions
# =============================================================================

async def _read_form(request: Request) -> InboundPayload:
    """Split a form body into text fields and file parts, keeping order."""
    form = await request.form()
    payload = InboundPayload(is_form=True)

    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            content = await value.read()
            payload.files.append((
                name,
                Attachment(
                    content=content,
                    filename=value.filename or "",
                    content_type=value.content_type or "application/octet-stream",
                ),
            ))
        elif name in payload.fields:
            existing = payload.fields[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                payload.fields[name] = [existing, value]
        else:
            payload.fields[name] = value

    return payload


async def _read_json(request: Request) -> InboundPayload:
    body = await request.body()
    if not body.strip():
        return InboundPayload()

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidPayloadError(f"Body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidPayloadError("JSON body must be an object")

    return InboundPayload(fields=data)


async def _read_payload(request: Request) -> InboundPayload:
    """Read the request body according to its content type."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        payload = await _read_form(request)
        logger.debug(f"Form payload: {len(payload.fields)} fields, {len(payload.files)} files")
        return payload
    return await _read_json(request)


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", status_code=201)
async def create_business(request: Request, service: BusinessServiceDep):
    """
    Create a business.

    Uploads any attached images, then stores the normalized record.
    """
    payload = await _read_payload(request)
    business = await service.create_business(payload)

    return {"message": "Business created successfully", **business}


@router.get("")
async def list_businesses(service: BusinessServiceDep):
    """List all businesses."""
    return await service.list_businesses()


@router.get("/{business_id}")
async def get_business(
    business_id: Annotated[str, Path(description="Business ID")],
    service: BusinessServiceDep,
):
    """Get a single business."""
    return await service.get_business(business_id)


@router.put("/{business_id}")
async def update_business(
    business_id: Annotated[str, Path(description="Business ID")],
    request: Request,
    service: BusinessServiceDep,
):
    """
    Update a business.

    Supplied fields overwrite stored ones; fields not supplied are kept.
    Image URLs change only when new files or URL values are sent.
    """
    payload = await _read_payload(request)
    business = await service.update_business(business_id, payload)

    return {"message": "Business updated successfully", **business}


@router.delete("/{business_id}")
async def delete_business(
    business_id: Annotated[str, Path(description="Business ID")],
    service: BusinessServiceDep,
):
    """Delete a business."""
    await service.delete_business(business_id)

    return {"message": "Business deleted successfully"}
