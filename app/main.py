# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Discover Business API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 4000
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.dependencies import build_business_service
from app.exceptions import (
    DiscoverBusinessException,
    discover_business_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.routers import businesses, events, health
from core.services.business_service import BusinessService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup builds the Supabase-backed service unless one was injected.
    """
    logger.info(f"Starting Discover Business API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if getattr(app.state, "business_service", None) is None:
        app.state.business_service = build_business_service(settings)

    yield

    logger.info("Shutting down Discover Business API")


def create_app(business_service: BusinessService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        business_service: Pre-built service (tests); built from settings
            at startup when omitted

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Discover Business API",
        description="""
## Business Directory API

Manage business listings with images, and read upcoming events.

### Request bodies

`POST` and `PUT` on `/api/businesses` accept either:

- **JSON**: `{"name": "Acme", "industry": "Retail", "productImages": ["https://..."]}`
- **multipart/form-data**: text fields plus an optional `image` file and up to
  10 `productImages` files. `productImages` may also be sent as a text field
  holding a JSON array of URLs.

Uploaded files are stored and replaced by their public URLs. Without an image,
`imageUrl` is set to a placeholder.

### Quick Start

```bash
curl -X POST http://localhost:4000/api/businesses \\
  -F "name=Acme" -F "industry=Retail" \\
  -F "image=@logo.png" -F "productImages=@p1.jpg" -F "productImages=@p2.jpg"
```
""",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Businesses", "description": "Create and manage business listings"},
            {"name": "Events", "description": "Read-only event listing"},
            {"name": "Health", "description": "API health checks"},
        ],
    )

    if business_service is not None:
        app.state.business_service = business_service

    # =========================================================================
    # Middleware
    # =========================================================================

    # Any origin in development; staging and production use CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.cors_origins_list,
        allow_credentials=not settings.is_development,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(DiscoverBusinessException)
    async def handle_discover_business_exception(request: Request, exc: DiscoverBusinessException):
        """Handle custom API exceptions."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
        return await discover_business_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        """Handle invalid path or query parameters."""
        return await validation_exception_handler(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Handle unknown routes, unsupported methods and unreadable bodies."""
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(
        businesses.router,
        prefix="/api/businesses",
        tags=["Businesses"]
    )

    app.include_router(
        events.router,
        prefix="/api/events",
        tags=["Events"]
    )

    app.include_router(
        health.router,
        prefix="/api",
        tags=["Health"]
    )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint - returns API info."""
        return {
            "name": "Discover Business API",
            "version": __version__,
            "docs": "/docs",
            "health": "/api/health",
        }

    return app


app = create_app()
