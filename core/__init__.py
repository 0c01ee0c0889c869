# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the ingestion pipeline:
# - models/: canonical business record and repository result types
# - services/: normalizer, attachment resolver, storage, repository and the
#   resource operations composing them
#
# Request parsing and routing stay in app/; services here only see canonical
# payloads and raise the API exceptions from app/exceptions.py.
# =============================================================================
