# =============================================================================
# tests/test_document_store.py - Supabase Document Store Tests
# =============================================================================
# Tests the Supabase-backed DocumentStore with a mocked client.
# The query builder is a chain of calls ending in execute(), so one
# MagicMock stands in for the whole chain.
# =============================================================================

from unittest.mock import MagicMock

import pytest

from lib.document_store import Document, SupabaseDocumentStore
from lib.supabase_client import SupabaseClientError


def mock_client(*responses):
    """Client whose table queries return the given response data in turn."""
    client = MagicMock()
    query = client.table.return_value
    for method in ("select", "eq", "limit", "order", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    query.execute.side_effect = [MagicMock(data=data) for data in responses]
    return client, query


# =============================================================================
# Document Tests
# =============================================================================

class TestDocument:
    """Test the API representation of documents."""

    def test_flatten_puts_id_first(self):
        doc = Document(id="abc", data={"name": "Acme"})

        assert list(doc.flatten().items()) == [("id", "abc"), ("name", "Acme")]

    def test_stored_id_field_ignored(self):
        doc = Document(id="abc", data={"id": "forged", "name": "Acme"})

        assert doc.flatten() == {"id": "abc", "name": "Acme"}


# =============================================================================
# SupabaseDocumentStore Tests
# =============================================================================

class TestSupabaseDocumentStore:
    """Test table operations."""

    def test_list_documents(self):
        client, query = mock_client([
            {"id": "1", "data": {"name": "A"}},
            {"id": "2", "data": None},
        ])

        documents = SupabaseDocumentStore(client).list_documents("businesses")

        client.table.assert_called_with("businesses")
        query.order.assert_called_with("created_at")
        assert documents == [Document("1", {"name": "A"}), Document("2", {})]

    def test_get_document_missing(self):
        client, query = mock_client([])

        assert SupabaseDocumentStore(client).get_document("businesses", "nope") is None
        query.eq.assert_called_with("id", "nope")

    def test_add_document(self):
        client, query = mock_client([{"id": "new-id", "data": {"name": "Acme"}}])

        document = SupabaseDocumentStore(client).add_document("businesses", {"name": "Acme"})

        query.insert.assert_called_with({"data": {"name": "Acme"}})
        assert document == Document("new-id", {"name": "Acme"})

    def test_add_document_without_data_raises(self):
        client, _ = mock_client([])

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseDocumentStore(client).add_document("businesses", {"name": "Acme"})

        assert exc_info.value.code == "INSERT_NO_DATA"

    def test_update_merges_stored_fields(self):
        client, query = mock_client(
            [{"id": "1", "data": {"name": "Acme", "industry": "Retail"}}],
            [{"id": "1", "data": {"name": "Acme", "industry": "Hardware"}}],
        )

        document = SupabaseDocumentStore(client).update_document("businesses", "1", {"industry": "Hardware"})

        query.update.assert_called_with({"data": {"name": "Acme", "industry": "Hardware"}})
        assert document.data["industry"] == "Hardware"

    def test_update_missing_returns_none(self):
        client, query = mock_client([])

        assert SupabaseDocumentStore(client).update_document("businesses", "nope", {"a": 1}) is None
        query.update.assert_not_called()

    def test_delete_document(self):
        client, query = mock_client([])

        SupabaseDocumentStore(client).delete_document("businesses", "1")

        query.delete.assert_called_once()
        query.eq.assert_called_with("id", "1")

    def test_query_error_wrapped(self):
        client = MagicMock()
        client.table.side_effect = RuntimeError("relation \"businesses\" does not exist")

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseDocumentStore(client).list_documents("businesses")

        assert exc_info.value.code == "LIST_FAILED"
        assert "does not exist" in exc_info.value.message

    def test_check_queries_table(self):
        client, query = mock_client([])

        SupabaseDocumentStore(client).check("events")

        client.table.assert_called_with("events")
        query.limit.assert_called_with(1)

    def test_check_failure_wrapped(self):
        client = MagicMock()
        client.table.side_effect = RuntimeError("permission denied")

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseDocumentStore(client).check("events")

        assert exc_info.value.code == "CHECK_FAILED"
