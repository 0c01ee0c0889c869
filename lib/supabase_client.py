# =============================================================================
# lib/supabase_client.py - Supabase Client Factory
# =============================================================================
# Builds the Supabase client shared by the document store and the image
# storage. The client is created once at application startup and passed to
# the components that need it; nothing in this module holds global state.
#
# Usage:
#   from lib.supabase_client import create_supabase_client
#   client = create_supabase_client(url, key, request_timeout=10, storage_timeout=30)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, ClientOptions, create_client

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a short code and an actionable suggestion alongside the message.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def create_supabase_client(
    url: str,
    service_key: str,
    request_timeout: float = 10.0,
    storage_timeout: float = 30.0,
) -> Client:
    """
    Create a Supabase client with bounded HTTP timeouts.

    Uses the service_role key which bypasses Row Level Security (RLS).
    This is appropriate for server-side operations.

    Args:
        url: Supabase project URL
        service_key: service_role API key
        request_timeout: Timeout in seconds for table (PostgREST) calls
        storage_timeout: Timeout in seconds for Storage calls

    Returns:
        Client: Supabase client instance

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(
            url,
            service_key,
            options=ClientOptions(
                postgrest_client_timeout=request_timeout,
                storage_client_timeout=int(storage_timeout),
            ),
        )
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
        ) from e

    logger.info("Supabase client initialized successfully")
    return client
