# =============================================================================
# tests/test_business_repository.py - Business Repository Tests
# =============================================================================
# Tests for repository outcomes against the in-memory document store:
# - Ok / NotFound / Failure results instead of exceptions
# - read-before-write on update and delete
# - field-level merge on update
# =============================================================================

import asyncio
import time

from core.models.business import BusinessPatch, BusinessRecord
from core.models.result import Failure, NotFound, Ok
from core.services.business_repository import BusinessRepository, StoreTimeoutError


def run(coro):
    return asyncio.run(coro)


def make_record(**fields) -> BusinessRecord:
    fields.setdefault("imageUrl", "https://placehold.test/none.png")
    return BusinessRecord.model_validate(fields)


# =============================================================================
# Create / Read Tests
# =============================================================================

class TestCreateAndRead:
    """Test inserting and fetching businesses."""

    def test_create_returns_id_and_fields(self, repository, store):
        result = run(repository.create(make_record(name="Acme")))

        assert isinstance(result, Ok)
        business = result.value
        assert list(business)[0] == "id"
        assert business["name"] == "Acme"
        assert business["productImages"] == []
        assert store.collections["businesses"][business["id"]]["name"] == "Acme"

    def test_default_product_images_persisted(self, repository, store):
        """A record built without productImages is still stored with a list."""
        record = BusinessRecord.model_validate({"name": "Acme", "imageUrl": "https://cdn.test/a.png"})

        assert record.to_document() == {
            "name": "Acme",
            "imageUrl": "https://cdn.test/a.png",
            "productImages": [],
        }

        business_id = run(repository.create(record)).value["id"]
        assert store.collections["businesses"][business_id]["productImages"] == []

    def test_get_one_round_trip(self, repository):
        created = run(repository.create(make_record(name="Acme", industry="Retail"))).value

        fetched = run(repository.get_one(created["id"]))

        assert fetched == Ok(created)

    def test_get_one_missing(self, repository):
        assert run(repository.get_one("missing")) == NotFound("missing")

    def test_get_all(self, repository):
        run(repository.create(make_record(name="A")))
        run(repository.create(make_record(name="B")))

        result = run(repository.get_all())

        assert isinstance(result, Ok)
        assert sorted(b["name"] for b in result.value) == ["A", "B"]

    def test_store_error_is_failure(self, repository, store):
        store.fail_with = RuntimeError("permission denied")

        result = run(repository.get_all())

        assert isinstance(result, Failure)
        assert result.message == "permission denied"


# =============================================================================
# Update / Delete Tests
# =============================================================================

class TestUpdateAndDelete:
    """Test existence checks and merges."""

    def test_update_merges_fields(self, repository, store):
        business_id = store.seed("businesses", {
            "name": "Acme",
            "industry": "Retail",
            "imageUrl": "https://cdn.test/logo.png",
            "productImages": ["https://cdn.test/1.png"],
        })

        patch = BusinessPatch.model_validate({"industry": "Hardware"})
        result = run(repository.update(business_id, patch))

        assert result == Ok({
            "id": business_id,
            "name": "Acme",
            "industry": "Hardware",
            "imageUrl": "https://cdn.test/logo.png",
            "productImages": ["https://cdn.test/1.png"],
        })

    def test_update_missing_writes_nothing(self, repository, store):
        result = run(repository.update("missing", BusinessPatch(name="Ghost")))

        assert result == NotFound("missing")
        assert ("update", "businesses") not in store.calls
        assert store.collections.get("businesses", {}) == {}

    def test_delete_then_missing(self, repository, store):
        business_id = store.seed("businesses", {"name": "Acme"})

        assert run(repository.delete(business_id)) == Ok(None)
        assert run(repository.delete(business_id)) == NotFound(business_id)
        assert run(repository.get_one(business_id)) == NotFound(business_id)

    def test_delete_missing_skips_write(self, repository, store):
        run(repository.delete("missing"))

        assert ("delete", "businesses") not in store.calls


# =============================================================================
# Events and Timeouts
# =============================================================================

def test_list_events_passes_documents_through(repository, store):
    event_id = store.seed("events", {"title": "Market Day", "productImages": "not normalized"})

    result = run(repository.list_events())

    assert result == Ok([{"id": event_id, "title": "Market Day", "productImages": "not normalized"}])


def test_slow_store_is_failure(store):
    class SlowStore:
        def list_documents(self, collection):
            time.sleep(0.3)
            return []

    repository = BusinessRepository(SlowStore(), timeout_seconds=0.05)

    result = run(repository.get_all())

    assert isinstance(result, Failure)
    assert isinstance(result.cause, StoreTimeoutError)
