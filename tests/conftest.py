# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory document store and fake image storage so the pipeline runs
#   without Supabase
# - A TestClient wired to a service built from those fakes
# =============================================================================

import os
import threading
import time
import uuid

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from app.exceptions import AttachmentUploadError
from core.models.business import Attachment
from lib.document_store import Document

PLACEHOLDER_URL = "https://placehold.test/none.png"


# =============================================================================
# Fakes
# =============================================================================

class InMemoryDocumentStore:
    """Thread-safe dict-backed DocumentStore."""

    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = {}
        self.fail_with: Exception | None = None
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _check(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if self.fail_with is not None:
            raise self.fail_with

    def seed(self, collection: str, data: dict, document_id: str | None = None) -> str:
        document_id = document_id or uuid.uuid4().hex
        self.collections.setdefault(collection, {})[document_id] = dict(data)
        return document_id

    def list_documents(self, collection):
        with self._lock:
            self._check("list", collection)
            items = self.collections.get(collection, {}).items()
            return [Document(id=key, data=dict(value)) for key, value in items]

    def get_document(self, collection, document_id):
        with self._lock:
            self._check("get", collection)
            data = self.collections.get(collection, {}).get(document_id)
            return Document(id=document_id, data=dict(data)) if data is not None else None

    def add_document(self, collection, data):
        with self._lock:
            self._check("add", collection)
            document_id = uuid.uuid4().hex
            self.collections.setdefault(collection, {})[document_id] = dict(data)
            return Document(id=document_id, data=dict(data))

    def update_document(self, collection, document_id, data):
        with self._lock:
            self._check("update", collection)
            documents = self.collections.get(collection, {})
            if document_id not in documents:
                return None
            documents[document_id] = {**documents[document_id], **data}
            return Document(id=document_id, data=dict(documents[document_id]))

    def delete_document(self, collection, document_id):
        with self._lock:
            self._check("delete", collection)
            self.collections.get(collection, {}).pop(document_id, None)

    def check(self, collection):
        with self._lock:
            self._check("check", collection)


class FakeImageStorage:
    """
    ImageStorage returning https://cdn.test/<filename>.

    delays: filename -> seconds to sleep before answering
    failures: filenames whose upload raises AttachmentUploadError
    unavailable: raised by check() when set
    """

    def __init__(self, delays: dict[str, float] | None = None, failures: set[str] | None = None):
        self.delays = delays or {}
        self.failures = failures or set()
        self.unavailable: Exception | None = None
        self.uploaded: list[str] = []
        self._lock = threading.Lock()

    def check(self) -> None:
        if self.unavailable is not None:
            raise self.unavailable

    def upload(self, attachment: Attachment) -> str:
        time.sleep(self.delays.get(attachment.filename, 0))
        if attachment.filename in self.failures:
            raise AttachmentUploadError("Quota exceeded", filename=attachment.filename)
        with self._lock:
            self.uploaded.append(attachment.filename)
        return f"https://cdn.test/{attachment.filename}"


def make_attachment(filename: str, content: bytes = b"\x89PNG fake", content_type: str = "image/png") -> Attachment:
    return Attachment(content=content, filename=filename, content_type=content_type)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def storage():
    return FakeImageStorage()


@pytest.fixture
def normalizer():
    from core.services.payload_normalizer import PayloadNormalizer

    return PayloadNormalizer(placeholder_image_url=PLACEHOLDER_URL, max_product_images=10)


@pytest.fixture
def repository(store):
    from core.services.business_repository import BusinessRepository

    return BusinessRepository(store, collection="businesses", events_collection="events", timeout_seconds=2)


@pytest.fixture
def service(repository, normalizer, storage):
    from core.services.attachment_resolver import AttachmentResolver
    from core.services.business_service import BusinessService

    resolver = AttachmentResolver(storage, concurrency=4, timeout_seconds=2)
    return BusinessService(repository, normalizer, resolver)


@pytest.fixture
def client(service):
    """TestClient for an app using the in-memory service."""
    from fastapi.testclient import TestClient

    from app.main import create_app

    return TestClient(create_app(business_service=service))


@pytest.fixture
def sample_business():
    """Sample business fields as a client would send them."""
    return {
        "name": "Acme Hardware",
        "industry": "Retail",
        "description": "Tools and building supplies",
        "location": "12 Main Road, Durban",
        "contactPerson": "Thandi Nkosi",
        "contactNumber": "0312345678",
        "email": "info@acme.test",
        "facebook": "https://facebook.com/acme",
        "products": "Tools, paint, timber",
    }
