"""Schema descriptors, introspection protocol, and two-phase declaration.

Usage:
    from doc_denorm.schema import SchemaBuilder, SchemaCatalog
    from doc_denorm.schema import SchemaDescriptor, RelationDescriptor
"""

from doc_denorm.schema.builder import SchemaBuilder, SchemaCatalog, camelize, underscore
from doc_denorm.schema.introspector import SchemaIntrospector
from doc_denorm.schema.models import (
    Cardinality,
    FieldDescriptor,
    RelationDescriptor,
    RelationKind,
    SchemaDescriptor,
)

__all__ = [
    "SchemaBuilder",
    "SchemaCatalog",
    "SchemaIntrospector",
    "SchemaDescriptor",
    "FieldDescriptor",
    "RelationDescriptor",
    "RelationKind",
    "Cardinality",
    "camelize",
    "underscore",
]
