"""Pydantic models describing document schemas.

This module contains schema-domain models:
- Relation metadata: RelationKind, Cardinality, RelationDescriptor
- Field metadata: FieldDescriptor
- Immutable schema descriptor: SchemaDescriptor

Descriptors are produced by ``SchemaBuilder.build()`` and are read-only
afterwards.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Relation Models
# ============================================================================


class RelationKind(str, Enum):
    """How a schema refers to another schema."""

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"


class Cardinality(str, Enum):
    """Number of documents on the far side of a relation."""

    ONE = "one"
    MANY = "many"
    MANY_TO_MANY = "many_to_many"


_CARDINALITIES = {
    RelationKind.BELONGS_TO: Cardinality.ONE,
    RelationKind.HAS_ONE: Cardinality.ONE,
    RelationKind.HAS_MANY: Cardinality.MANY,
    RelationKind.HAS_AND_BELONGS_TO_MANY: Cardinality.MANY_TO_MANY,
}


class RelationDescriptor(BaseModel):
    """A declared relation between two schemas.

    ``target`` is None for polymorphic ``belongs_to`` relations, whose
    concrete type is stored per document in ``type_key``.

    Example:
        >>> rel = RelationDescriptor(name="parent", kind="belongs_to", target="Parent")
        >>> rel.foreign_key
        'parent_id'
        >>> rel.cardinality
        <Cardinality.ONE: 'one'>
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: RelationKind
    target: str | None = None
    polymorphic: bool = False
    inverse_name: str | None = None

    @property
    def cardinality(self) -> Cardinality:
        return _CARDINALITIES[self.kind]

    @property
    def foreign_key(self) -> str | None:
        """Field holding the referenced id (``belongs_to`` only)."""
        if self.kind is RelationKind.BELONGS_TO:
            return f"{self.name}_id"
        return None

    @property
    def type_key(self) -> str | None:
        """Field holding the referenced schema name (polymorphic only)."""
        if self.kind is RelationKind.BELONGS_TO and self.polymorphic:
            return f"{self.name}_type"
        return None


# ============================================================================
# Field Models
# ============================================================================


class FieldDescriptor(BaseModel):
    """A declared document field."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "object"
    mirrored_from: str | None = None  # reference relation feeding this field


# ============================================================================
# Schema Descriptor
# ============================================================================


class SchemaDescriptor(BaseModel):
    """Immutable description of a document type.

    Example:
        >>> schema = SchemaDescriptor(name="Child", singular="child", plural="children")
        >>> schema.collection
        'children'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    singular: str
    plural: str
    collection: str = ""
    field_map: dict[str, FieldDescriptor] = Field(default_factory=dict)
    relation_map: dict[str, RelationDescriptor] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_collection(cls, data):
        if isinstance(data, dict) and not data.get("collection"):
            data = {**data, "collection": data.get("plural", "")}
        return data

    def fields(self) -> list[FieldDescriptor]:
        return list(self.field_map.values())

    def relations(self) -> list[RelationDescriptor]:
        return list(self.relation_map.values())

    def get_field(self, name: str) -> FieldDescriptor | None:
        return self.field_map.get(name)

    def get_relation(self, name: str) -> RelationDescriptor | None:
        return self.relation_map.get(name)

    def has_field(self, name: str) -> bool:
        return name in self.field_map

    @property
    def field_names(self) -> set[str]:
        return set(self.field_map)
