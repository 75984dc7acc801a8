"""Document store protocol definition.

Defines the ``DocumentStore`` Protocol that every store backend must
implement.  All methods are synchronous: lifecycle hooks run inline with
the save or update that triggered them.

Usage:
    from doc_denorm.adapters.base import DocumentStore

    def rename(store: DocumentStore, parent_id: str) -> int:
        return store.update_many(
            "children",
            {"parent_id": parent_id},
            {"parent_name": "new_name"},
        )
"""

from typing import Any, Protocol


class DocumentStore(Protocol):
    """Document store interface that all backends must implement.

    Documents are plain dicts keyed by field name; every stored document
    carries its identifier under ``"id"``.  Filters are dicts of
    field=value pairs that must all match (AND).
    """

    def insert(self, collection: str, data: dict) -> dict:
        """Insert a document and return it as stored.

        Args:
            collection: Collection name.
            data: Field values.  An ``"id"`` is generated when absent.

        Returns:
            Dict representing the stored document, including ``"id"``.

        Example:
            doc = store.insert("parents", {"name": "parent"})
        """
        ...

    def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Return documents matching *filters*, in insertion order.

        Args:
            collection: Collection name.
            filters: Optional dict of field=value filters.
            limit: Optional maximum number of documents.

        Returns:
            List of dicts.  Empty list if nothing matches.
        """
        ...

    def find_one(self, collection: str, doc_id: str) -> dict | None:
        """Return the document with id *doc_id*, or None."""
        ...

    def update_one(
        self, collection: str, filters: dict[str, Any], patch: dict[str, Any]
    ) -> int:
        """Apply a partial update to the first document matching *filters*.

        Only the fields named in *patch* are written; every other field
        is left untouched (``$set`` semantics, never a replace).

        Returns:
            Number of documents updated (0 or 1).
        """
        ...

    def update_many(
        self, collection: str, filters: dict[str, Any], patch: dict[str, Any]
    ) -> int:
        """Apply a partial update to every document matching *filters*.

        Returns:
            Number of documents updated.

        Example:
            store.update_many(
                "children",
                {"parent_id": "abc-123"},
                {"parent_name": "new_name"},
            )
        """
        ...

    def close(self) -> None:
        """Release connections and other resources."""
        ...
