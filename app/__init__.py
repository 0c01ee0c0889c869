# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - dependencies.py: Service wiring and dependency injection
# - routers/: API endpoint definitions organized by resource
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
