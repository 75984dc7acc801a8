"""Pull and push hooks.

``ChildSyncHook`` runs on the dependent schema before it is persisted and
pulls the mirrored fields from the referenced source.

``ParentCascadeHook`` runs on a source schema after an update and pushes
the changed fields into every dependent with a partial update applied
directly to the store, so the dependents' own hooks do not fire.

Both are plain callables taking the ``Document`` being saved, registered
by ``SyncEngine``.
"""

import copy
import logging

from doc_denorm.adapters.base import DocumentStore
from doc_denorm.denormalize.directive import SyncDirective
from doc_denorm.denormalize.mapping import FieldMapping
from doc_denorm.denormalize.relations import RelationResolver
from doc_denorm.documents.document import Document
from doc_denorm.documents.repository import fetch_reference
from doc_denorm.errors import CollaboratorWriteFailure, UnsupportedRelationCardinality
from doc_denorm.schema.builder import SchemaCatalog
from doc_denorm.schema.models import Cardinality, RelationDescriptor

logger = logging.getLogger(__name__)


class ChildSyncHook:
    """Copy mirrored fields from the referenced source into a dependent.

    Acts only when the dependent is new or its reference changed.  A
    missing source leaves the mirrored fields untouched, and mappings
    whose source field the source's schema does not declare are skipped.
    """

    def __init__(
        self,
        directive: SyncDirective,
        catalog: SchemaCatalog,
        store: DocumentStore,
    ) -> None:
        self.directive = directive
        self.catalog = catalog
        self.store = store

    def __call__(self, document: Document) -> None:
        if not self._reference_changed(document):
            return

        relation = document.schema.get_relation(self.directive.source_relation)
        source = fetch_reference(self.catalog, self.store, document, relation)
        if source is None:
            return
        if source.schema.name not in self.directive.source_schemas:
            logger.debug(
                "Skipping %s.%s pull: %s is not a declared source",
                self.directive.dependent_schema,
                self.directive.source_relation,
                source.schema.name,
            )
            return

        for mapping in self.directive.field_mappings:
            if not source.has_field(mapping.source_field):
                continue
            document[mapping.dependent_field] = copy.deepcopy(source[mapping.source_field])

        logger.debug(
            "Pulled %s from %s '%s' into %s",
            self.directive.source_fields,
            source.schema.name,
            source.id,
            self.directive.dependent_schema,
        )

    def _reference_changed(self, document: Document) -> bool:
        if document.new_record:
            return True
        if document.changed(self.directive.foreign_key):
            return True
        return bool(self.directive.type_key) and document.changed(self.directive.type_key)

    def __repr__(self) -> str:
        return (
            f"ChildSyncHook({self.directive.dependent_schema}."
            f"{self.directive.source_relation})"
        )


class ParentCascadeHook:
    """Push changed source fields into every dependent of one source schema.

    The inverse relation is resolved on first use and cached.  Store
    errors, in the dependent lookup or the patch, are re-raised as
    ``CollaboratorWriteFailure``; a partial ``many`` update is not rolled
    back or retried.

    Args:
        directive: The directive being enforced.
        source_schema: Name of the source schema this hook is registered on.
        mappings: The directive's mappings declared on that source.
        resolver: Resolver used to find the inverse relation.
        store: Store receiving the partial updates.
    """

    def __init__(
        self,
        directive: SyncDirective,
        source_schema: str,
        mappings: tuple[FieldMapping, ...],
        resolver: RelationResolver,
        store: DocumentStore,
    ) -> None:
        self.directive = directive
        self.source_schema = source_schema
        self.mappings = mappings
        self.resolver = resolver
        self.store = store
        self._inverse: RelationDescriptor | None = None

    def __call__(self, document: Document) -> None:
        patch = {
            m.dependent_field: document[m.source_field]
            for m in self.mappings
            if document.changed(m.source_field)
        }
        if not patch:
            return

        inverse = self.inverse_relation()
        dependent = self.resolver.catalog.get(self.directive.dependent_schema)
        filters = {self.directive.foreign_key: document.id}
        if self.directive.type_key:
            filters[self.directive.type_key] = self.source_schema

        if inverse.cardinality is Cardinality.ONE:
            found = self._call(self.store.find, dependent.collection, filters, limit=1)
            if not found:
                return
            count = self._call(
                self.store.update_one, dependent.collection, {"id": found[0]["id"]}, patch
            )
        elif inverse.cardinality is Cardinality.MANY:
            count = self._call(self.store.update_many, dependent.collection, filters, patch)
        else:
            raise UnsupportedRelationCardinality(inverse.name, inverse.cardinality.value)

        logger.debug(
            "Cascaded %s from %s '%s' to %d %s document(s)",
            sorted(patch),
            self.source_schema,
            document.id,
            count,
            self.directive.dependent_schema,
        )

    def inverse_relation(self) -> RelationDescriptor:
        """Resolve (once) the relation on the source leading to dependents.

        Raises:
            UnresolvedInverseRelation: If no relation matches.
        """
        if self._inverse is None:
            dependent = self.resolver.catalog.get(self.directive.dependent_schema)
            reference = self.resolver.reference(dependent, self.directive.source_relation)
            source = self.resolver.catalog.get(self.source_schema)
            self._inverse = self.resolver.inverse_relation(dependent, reference, source)
        return self._inverse

    @staticmethod
    def _call(operation, collection: str, filters: dict, *args, **kwargs):
        try:
            return operation(collection, filters, *args, **kwargs)
        except Exception as e:
            raise CollaboratorWriteFailure(collection, filters, str(e)) from e

    def __repr__(self) -> str:
        return (
            f"ParentCascadeHook({self.source_schema} -> "
            f"{self.directive.dependent_schema}.{self.directive.source_relation})"
        )
