"""In-process document store.

Provides ``InMemoryDocumentStore``, a dict-backed implementation of the
``DocumentStore`` protocol.  Documents are deep-copied on the way in and
out, so callers never share state with the store.

Usage:
    from doc_denorm.adapters.memory import InMemoryDocumentStore

    store = InMemoryDocumentStore()
    parent = store.insert("parents", {"name": "parent"})
    store.update_one("parents", {"id": parent["id"]}, {"name": "renamed"})
"""

import copy
import uuid
from typing import Any


class InMemoryDocumentStore:
    """Dict-backed implementation of the ``DocumentStore`` protocol."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict]] = {}

    def insert(self, collection: str, data: dict) -> dict:
        document = copy.deepcopy(data)
        document["id"] = document.get("id") or uuid.uuid4().hex
        docs = self._collections.setdefault(collection, {})
        if document["id"] in docs:
            raise ValueError(
                f"Duplicate id '{document['id']}' in collection '{collection}'"
            )
        docs[document["id"]] = document
        return copy.deepcopy(document)

    def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        matches = [
            copy.deepcopy(doc)
            for doc in self._matching(collection, filters or {})
        ]
        return matches if limit is None else matches[:limit]

    def find_one(self, collection: str, doc_id: str) -> dict | None:
        document = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    def update_one(
        self, collection: str, filters: dict[str, Any], patch: dict[str, Any]
    ) -> int:
        for document in self._matching(collection, filters):
            document.update(copy.deepcopy(patch))
            return 1
        return 0

    def update_many(
        self, collection: str, filters: dict[str, Any], patch: dict[str, Any]
    ) -> int:
        count = 0
        for document in self._matching(collection, filters):
            document.update(copy.deepcopy(patch))
            count += 1
        return count

    def close(self) -> None:
        self._collections.clear()

    def count(self, collection: str) -> int:
        """Number of documents in *collection*."""
        return len(self._collections.get(collection, {}))

    def _matching(self, collection: str, filters: dict[str, Any]) -> list[dict]:
        return [
            doc
            for doc in self._collections.get(collection, {}).values()
            if all(doc.get(k) == v for k, v in filters.items())
        ]
