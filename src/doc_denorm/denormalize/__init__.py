"""Field denormalization between referencing documents.

Provides the field mapping resolver (``resolve_field_mappings``), the
relation resolver (``RelationResolver``), the directive models, the pull
and push hooks, and the ``SyncEngine`` facade.

Usage:
    from doc_denorm.denormalize import SyncEngine, DirectiveOptions
"""

from doc_denorm.denormalize.directive import (
    DirectiveOptions,
    DirectiveValidationResult,
    SyncDirective,
    UnresolvedInverse,
)
from doc_denorm.denormalize.engine import SyncEngine
from doc_denorm.denormalize.hooks import ChildSyncHook, ParentCascadeHook
from doc_denorm.denormalize.mapping import FieldMapping, resolve_field_mappings
from doc_denorm.denormalize.relations import RelationResolver

__all__ = [
    "SyncEngine",
    "DirectiveOptions",
    "SyncDirective",
    "DirectiveValidationResult",
    "UnresolvedInverse",
    "ChildSyncHook",
    "ParentCascadeHook",
    "FieldMapping",
    "resolve_field_mappings",
    "RelationResolver",
]
