"""Document persistence with lifecycle notifications.

``DocumentRepository`` loads and saves ``Document`` instances through a
``DocumentStore`` and announces each save to a ``HookRegistry``:

1. ``before_validate``, ``before_save``, then ``before_create`` or
   ``before_update``.
2. The write: an insert for new documents, a partial update of the
   changed fields otherwise.
3. ``after_create`` or ``after_update``, then ``after_save``.  Changes
   are still visible to these hooks.
4. The document is marked persisted.

Usage:
    from doc_denorm.documents.repository import DocumentRepository

    repo = DocumentRepository(catalog, store, engine.hooks)
    parent = repo.create("Parent", name="parent")
    child = repo.create("Child", parent=parent)
    repo.update(parent, name="new_name")
    repo.reload(child)["parent_name"]    # 'new_name'
"""

from typing import Any

from doc_denorm.adapters.base import DocumentStore
from doc_denorm.documents.document import Document
from doc_denorm.documents.lifecycle import HookRegistry, LifecycleEvent
from doc_denorm.schema.builder import SchemaCatalog
from doc_denorm.schema.models import RelationDescriptor


def fetch_reference(
    catalog: SchemaCatalog,
    store: DocumentStore,
    document: Document,
    relation: RelationDescriptor,
) -> Document | None:
    """Return the document *relation* currently points at, or None.

    Uses the handle cached on *document* when it still matches the stored
    id and type; otherwise loads the source from *store*.
    """
    ref_id = document.get(relation.foreign_key)
    if ref_id is None:
        return None

    schema_name = document.get(relation.type_key) if relation.polymorphic else relation.target
    if schema_name is None:
        return None

    cached = document.cached_reference(relation.name)
    if cached is not None and cached.id == ref_id and cached.schema.name == schema_name:
        return cached

    schema = catalog.get(schema_name)
    data = store.find_one(schema.collection, ref_id)
    return Document.from_stored(schema, data) if data is not None else None


class DocumentRepository:
    """Create, save, and load documents, firing lifecycle hooks.

    Args:
        catalog: Schemas of the documents handled.
        store: Backend holding the documents.
        hooks: Registry notified at each lifecycle step.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        store: DocumentStore,
        hooks: HookRegistry,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.hooks = hooks

    def new(self, schema_name: str, **attributes: Any) -> Document:
        return Document(self.catalog.get(schema_name), attributes)

    def create(self, schema_name: str, **attributes: Any) -> Document:
        return self.save(self.new(schema_name, **attributes))

    def save(self, document: Document) -> Document:
        """Persist *document*, notifying hooks before and after the write."""
        creating = document.new_record
        collection = document.schema.collection

        self.hooks.notify(LifecycleEvent.BEFORE_VALIDATE, document)
        self.hooks.notify(LifecycleEvent.BEFORE_SAVE, document)
        self.hooks.notify(
            LifecycleEvent.BEFORE_CREATE if creating else LifecycleEvent.BEFORE_UPDATE,
            document,
        )

        if creating:
            stored = self.store.insert(collection, document.to_dict())
            document.id = stored["id"]
        else:
            patch = {name: new for name, (_, new) in document.changes.items()}
            if patch:
                self.store.update_one(collection, {"id": document.id}, patch)

        self.hooks.notify(
            LifecycleEvent.AFTER_CREATE if creating else LifecycleEvent.AFTER_UPDATE,
            document,
        )
        self.hooks.notify(LifecycleEvent.AFTER_SAVE, document)

        document.mark_persisted()
        return document

    def update(self, document: Document, **attributes: Any) -> Document:
        document.assign(**attributes)
        return self.save(document)

    def get(self, schema_name: str, doc_id: str) -> Document | None:
        schema = self.catalog.get(schema_name)
        data = self.store.find_one(schema.collection, doc_id)
        return Document.from_stored(schema, data) if data is not None else None

    def reload(self, document: Document) -> Document:
        """Refresh *document* in place from the store.

        Raises:
            LookupError: If the document is no longer stored.
        """
        data = self.store.find_one(document.schema.collection, document.id)
        if data is None:
            raise LookupError(
                f"{document.schema.name} '{document.id}' not found in "
                f"'{document.schema.collection}'"
            )
        document.refresh(data)
        return document

    def resolve(self, document: Document, relation: str) -> Document | None:
        """Return the document referenced through *relation*."""
        descriptor = document.schema.get_relation(relation)
        if descriptor is None:
            raise KeyError(f"{document.schema.name} has no relation '{relation}'")
        return fetch_reference(self.catalog, self.store, document, descriptor)
