# =============================================================================
# lib/document_store.py - Document Store Backend
# =============================================================================
# A document store keeps schema-less records keyed by an opaque identifier,
# grouped into named collections. This module defines the interface the
# repository depends on and a Supabase implementation of it.
#
# Supabase layout: one table per collection with columns
#   id text primary key, data jsonb, created_at timestamptz
# (see scripts/schema.sql)
#
# All methods are synchronous; callers run them in worker threads and apply
# their own timeouts.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from supabase import Client

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """A stored document: its identifier plus its fields."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def flatten(self) -> dict[str, Any]:
        """
        Return the API representation {id, ...fields}.

        A stray "id" key inside the stored fields never shadows the
        document identifier.
        """
        fields = {key: value for key, value in self.data.items() if key != "id"}
        return {"id": self.id, **fields}


class DocumentStore(Protocol):
    """Operations the repository needs from a document store."""

    def list_documents(self, collection: str) -> list[Document]:
        ...

    def get_document(self, collection: str, document_id: str) -> Document | None:
        ...

    def add_document(self, collection: str, data: dict[str, Any]) -> Document:
        ...

    def update_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> Document | None:
        ...

    def delete_document(self, collection: str, document_id: str) -> None:
        ...

    def check(self, collection: str) -> None:
        ...


class SupabaseDocumentStore:
    """
    Document store backed by Supabase (Postgres) tables.

    Each collection is a table; document fields live in a single jsonb
    column so records stay schema-less.

    Example:
        store = SupabaseDocumentStore(client)
        doc = store.add_document("businesses", {"name": "Acme"})
        store.get_document("businesses", doc.id)
    """

    COLUMNS = "id, data"

    def __init__(self, client: Client):
        self._client = client

    @staticmethod
    def _to_document(row: dict[str, Any]) -> Document:
        return Document(id=str(row["id"]), data=dict(row.get("data") or {}))

    def list_documents(self, collection: str) -> list[Document]:
        """
        Fetch every document in a collection, oldest first.

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            response = (
                self._client.table(collection)
                .select(self.COLUMNS)
                .order("created_at")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list {collection}: {e}",
                code="LIST_FAILED",
                suggestion=f"Check that the '{collection}' table exists",
                details={"collection": collection},
            ) from e

        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} documents from {collection}")
        return [self._to_document(row) for row in rows]

    def get_document(self, collection: str, document_id: str) -> Document | None:
        """
        Fetch a single document.

        Returns:
            The document, or None if no document has this id

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            response = (
                self._client.table(collection)
                .select(self.COLUMNS)
                .eq("id", document_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {collection}/{document_id}: {e}",
                code="FETCH_FAILED",
                details={"collection": collection, "id": document_id},
            ) from e

        if not response.data:
            return None
        return self._to_document(response.data[0])

    def add_document(self, collection: str, data: dict[str, Any]) -> Document:
        """
        Insert a new document; the database assigns its id.

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        try:
            response = (
                self._client.table(collection)
                .insert({"data": data})
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {collection}: {e}",
                code="INSERT_FAILED",
                details={"collection": collection},
            ) from e

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"collection": collection},
            )

        document = self._to_document(response.data[0])
        logger.info(f"Inserted document {collection}/{document.id}")
        return document

    def update_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> Document | None:
        """
        Merge fields into an existing document (field-level overwrite).

        Returns:
            The merged document, or None if the document does not exist

        Raises:
            SupabaseClientError: If the read or write fails
        """
        current = self.get_document(collection, document_id)
        if current is None:
            return None

        merged = {**current.data, **data}

        try:
            response = (
                self._client.table(collection)
                .update({"data": merged})
                .eq("id", document_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {collection}/{document_id}: {e}",
                code="UPDATE_FAILED",
                details={"collection": collection, "id": document_id},
            ) from e

        if not response.data:
            # Deleted between the read and the write
            return None

        logger.info(f"Updated document {collection}/{document_id}")
        return self._to_document(response.data[0])

    def delete_document(self, collection: str, document_id: str) -> None:
        """
        Remove a document. Deleting a missing id is a no-op.

        Raises:
            SupabaseClientError: If the delete fails
        """
        try:
            self._client.table(collection).delete().eq("id", document_id).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {collection}/{document_id}: {e}",
                code="DELETE_FAILED",
                details={"collection": collection, "id": document_id},
            ) from e

        logger.info(f"Deleted document {collection}/{document_id}")

    def check(self, collection: str) -> None:
        """
        Confirm the collection's table is reachable.

        Raises:
            SupabaseClientError: If the table cannot be queried
        """
        try:
            self._client.table(collection).select("id").limit(1).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Cannot reach {collection}: {e}",
                code="CHECK_FAILED",
                suggestion="Run scripts/schema.sql in the Supabase SQL editor",
                details={"collection": collection},
            ) from e
