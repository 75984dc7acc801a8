"""Read-only schema introspection interface.

Defines the ``SchemaIntrospector`` Protocol consumed by the relation and
field-mapping resolvers.  Both ``SchemaDescriptor`` (a built schema) and
``SchemaBuilder`` (a schema still being declared) implement it, so a
directive can be validated before its dependent schema is frozen.

Usage:
    from doc_denorm.schema.introspector import SchemaIntrospector

    def describe(schema: SchemaIntrospector) -> list[str]:
        return [rel.name for rel in schema.relations()]
"""

from typing import Protocol

from doc_denorm.schema.models import FieldDescriptor, RelationDescriptor


class SchemaIntrospector(Protocol):
    """Schema metadata interface that resolvers depend on.

    Implementations are never mutated through this interface.
    """

    name: str
    singular: str
    plural: str

    def fields(self) -> list[FieldDescriptor]:
        """Return the declared fields, in declaration order."""
        ...

    def relations(self) -> list[RelationDescriptor]:
        """Return the declared relations, in declaration order."""
        ...

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Return the field named *name*, or None."""
        ...

    def get_relation(self, name: str) -> RelationDescriptor | None:
        """Return the relation named *name*, or None."""
        ...

    def has_field(self, name: str) -> bool:
        """Return True if a field named *name* is declared."""
        ...
