"""Runtime document instances with change tracking.

A ``Document`` holds the field values of one document of a schema and
remembers the values it had when it was last loaded or saved, so hooks
can ask which fields changed in the current save.

Usage:
    from doc_denorm.documents.document import Document

    child = Document(child_schema, {"name": "child"})
    child["parent"] = parent          # sets parent_id (and parent_type)
    child.changed("parent_id")        # True until the document is saved
"""

import copy
from typing import Any

from doc_denorm.schema.models import RelationKind, SchemaDescriptor


class Document:
    """A document of *schema*.

    Assigning a document to the name of a ``belongs_to`` relation stores
    its id in the relation's foreign key (and its schema name in the type
    key for polymorphic relations) and caches it as a resolved handle.

    Args:
        schema: The document's schema.
        attributes: Initial field values.
        id: Document identifier, for documents already in the store.
        new_record: False for documents loaded from the store.
    """

    def __init__(
        self,
        schema: SchemaDescriptor,
        attributes: dict[str, Any] | None = None,
        id: str | None = None,
        new_record: bool = True,
    ) -> None:
        self.schema = schema
        self.id = id
        self.new_record = new_record
        self._attributes: dict[str, Any] = {}
        self._persisted: dict[str, Any] = {}
        self._references: dict[str, "Document"] = {}
        for name, value in (attributes or {}).items():
            self[name] = value

    @classmethod
    def from_stored(cls, schema: SchemaDescriptor, data: dict) -> "Document":
        """Build a persisted document from a store row."""
        document = cls(schema, id=data.get("id"), new_record=False)
        document.refresh(data)
        return document

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self._attributes.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        relation = self.schema.get_relation(name)
        if relation is not None and relation.kind is RelationKind.BELONGS_TO:
            self._assign_reference(name, value)
        else:
            self._attributes[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def assign(self, **values: Any) -> None:
        for name, value in values.items():
            self[name] = value

    def has_field(self, name: str) -> bool:
        """True if the schema declares *name*."""
        return self.schema.has_field(name)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self._attributes)
        if self.id is not None:
            data["id"] = self.id
        return data

    # ------------------------------------------------------------------
    # Change tracking
    # ------------------------------------------------------------------

    def changed(self, name: str) -> bool:
        """True if *name* differs from its last persisted value."""
        if (name in self._attributes) != (name in self._persisted):
            return True
        return self._attributes.get(name) != self._persisted.get(name)

    @property
    def changes(self) -> dict[str, tuple[Any, Any]]:
        """Changed fields mapped to ``(old, new)`` pairs."""
        names = set(self._attributes) | set(self._persisted)
        return {
            name: (self._persisted.get(name), self._attributes.get(name))
            for name in sorted(names)
            if self.changed(name)
        }

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def mark_persisted(self) -> None:
        """Record the current values as the persisted snapshot."""
        # Deep copy so in-place edits of lists and dicts show up as changes
        self._persisted = copy.deepcopy(self._attributes)
        self.new_record = False

    def refresh(self, data: dict) -> None:
        """Replace all values with *data* as loaded from the store."""
        self._attributes = {k: v for k, v in data.items() if k != "id"}
        self._references.clear()
        self.mark_persisted()

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def cached_reference(self, relation: str) -> "Document | None":
        """The handle assigned through *relation*, if any."""
        return self._references.get(relation)

    def _assign_reference(self, name: str, value: "Document | None") -> None:
        relation = self.schema.get_relation(name)
        if value is None:
            self._attributes[relation.foreign_key] = None
            if relation.type_key:
                self._attributes[relation.type_key] = None
            self._references.pop(name, None)
            return

        if value.id is None:
            raise ValueError(
                f"Cannot reference an unsaved {value.schema.name} through '{name}'"
            )
        if not relation.polymorphic and value.schema.name != relation.target:
            raise TypeError(
                f"'{self.schema.name}.{name}' expects {relation.target}, "
                f"got {value.schema.name}"
            )

        self._attributes[relation.foreign_key] = value.id
        if relation.type_key:
            self._attributes[relation.type_key] = value.schema.name
        self._references[name] = value

    def __repr__(self) -> str:
        return f"<{self.schema.name} id={self.id!r} {self._attributes!r}>"
