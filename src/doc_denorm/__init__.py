"""doc-denorm: field denormalization between referencing documents.

Mirrors selected fields of a source document into the documents that
reference it, pulling on save and pushing on source updates, over an
in-memory or PostgreSQL JSONB document store.

Usage:
    from doc_denorm import SchemaBuilder, SchemaCatalog, SyncEngine
    from doc_denorm import DocumentRepository, InMemoryDocumentStore
    from doc_denorm import get_store, build_engine, load_denorm_config
"""

__version__ = "0.1.0"

# Adapters
from doc_denorm.adapters.base import DocumentStore
from doc_denorm.adapters.memory import InMemoryDocumentStore
from doc_denorm.adapters.postgres import PostgresDocumentStore

# Config
from doc_denorm.config.loader import load_denorm_config
from doc_denorm.config.models import DenormConfig, StoreProfile

# Schema
from doc_denorm.schema.builder import SchemaBuilder, SchemaCatalog
from doc_denorm.schema.models import RelationKind, SchemaDescriptor

# Documents
from doc_denorm.documents.document import Document
from doc_denorm.documents.lifecycle import HookRegistry, LifecycleEvent
from doc_denorm.documents.repository import DocumentRepository

# Denormalization
from doc_denorm.denormalize.directive import (
    DirectiveOptions,
    DirectiveValidationResult,
    SyncDirective,
)
from doc_denorm.denormalize.engine import SyncEngine
from doc_denorm.denormalize.mapping import FieldMapping, resolve_field_mappings

# Errors
from doc_denorm.errors import CascadeError, DenormalizeError, DirectiveError

# Factory
from doc_denorm.factory import (
    ProfileNotFoundError,
    build_engine,
    get_store,
    resolve_url,
)

__all__ = [
    # Adapters
    "DocumentStore",
    "InMemoryDocumentStore",
    "PostgresDocumentStore",
    # Config
    "load_denorm_config",
    "DenormConfig",
    "StoreProfile",
    # Schema
    "SchemaBuilder",
    "SchemaCatalog",
    "SchemaDescriptor",
    "RelationKind",
    # Documents
    "Document",
    "DocumentRepository",
    "HookRegistry",
    "LifecycleEvent",
    # Denormalization
    "SyncEngine",
    "DirectiveOptions",
    "SyncDirective",
    "DirectiveValidationResult",
    "FieldMapping",
    "resolve_field_mappings",
    # Errors
    "DenormalizeError",
    "DirectiveError",
    "CascadeError",
    # Factory
    "get_store",
    "build_engine",
    "ProfileNotFoundError",
    "resolve_url",
]
