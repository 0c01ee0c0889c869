# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains the backends the core depends on:
# - supabase_client.py: Supabase client factory with bounded timeouts
# - document_store.py: DocumentStore interface and Supabase implementation
# - images.py: Bounding-box image resizing with Pillow
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.document_store import Document, DocumentStore, SupabaseDocumentStore
from lib.images import UnsupportedImageError, fit_within
from lib.supabase_client import SupabaseClientError, create_supabase_client

__all__ = [
    # Supabase
    "SupabaseClientError",
    "create_supabase_client",
    # Document store
    "Document",
    "DocumentStore",
    "SupabaseDocumentStore",
    # Images
    "UnsupportedImageError",
    "fit_within",
]
