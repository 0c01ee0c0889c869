# =============================================================================
# app/routers/events.py - Events Listing
# =============================================================================
# Read-only listing of event documents, returned as stored.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import BusinessServiceDep

router = APIRouter()


@router.get("")
async def list_events(service: BusinessServiceDep):
    """List all events."""
    return await service.list_events()
