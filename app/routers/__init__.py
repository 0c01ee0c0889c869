# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by resource:
# - health.py: Health check endpoints
# - businesses.py: Business CRUD endpoints (JSON and multipart bodies)
# - events.py: Read-only events listing
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import businesses
from . import events
from . import health

__all__ = [
    "businesses",
    "events",
    "health",
]
