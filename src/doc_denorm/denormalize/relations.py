"""Relation resolution between dependent and source schemas.

Given a dependent schema and the name of its reference relation,
``RelationResolver`` finds the candidate source schemas and, for each of
them, the *inverse* relation used to reach dependents from a source.

Inverse lookup order on the source schema:

1. the reference's declared ``inverse_of``;
2. a relation named after the dependent's plural name;
3. a relation named after the dependent's singular name.

Usage:
    from doc_denorm.denormalize.relations import RelationResolver

    resolver = RelationResolver(catalog)
    reference = resolver.reference(child, "parent")
    for source in resolver.source_schemas(child, "parent"):
        inverse = resolver.inverse_relation(child, reference, source)
"""

import logging
from collections.abc import Sequence

from doc_denorm.errors import (
    InvalidDirective,
    MissingPolymorphicSources,
    UnknownRelation,
    UnresolvedInverseRelation,
)
from doc_denorm.schema.builder import SchemaCatalog
from doc_denorm.schema.introspector import SchemaIntrospector
from doc_denorm.schema.models import RelationDescriptor, RelationKind, SchemaDescriptor

logger = logging.getLogger(__name__)


class RelationResolver:
    """Resolve references, source schemas and inverse relations.

    Args:
        catalog: Catalog holding every source schema.
    """

    def __init__(self, catalog: SchemaCatalog) -> None:
        self.catalog = catalog

    def reference(self, dependent: SchemaIntrospector, name: str) -> RelationDescriptor:
        """Return the dependent's ``belongs_to`` relation named *name*.

        Raises:
            UnknownRelation: If *dependent* declares no such relation.
            InvalidDirective: If the relation is not a ``belongs_to``.
        """
        relation = dependent.get_relation(name)
        if relation is None:
            raise UnknownRelation(name, dependent.name)
        if relation.kind is not RelationKind.BELONGS_TO:
            raise InvalidDirective(
                f"'{dependent.name}.{name}' is a {relation.kind.value} relation; "
                f"fields can only be denormalized through belongs_to."
            )
        return relation

    def source_schemas(
        self,
        dependent: SchemaIntrospector,
        name: str,
        inverses_of: Sequence[str] | None = None,
    ) -> list[SchemaDescriptor]:
        """Return every schema the reference *name* can point at.

        Raises:
            MissingPolymorphicSources: If the reference is polymorphic and
                *inverses_of* is empty.
            UnknownSchema: If a target or candidate is not in the catalog.
        """
        relation = self.reference(dependent, name)

        if not relation.polymorphic:
            if inverses_of:
                logger.debug(
                    "Ignoring inverses_of for non-polymorphic %s.%s",
                    dependent.name,
                    name,
                )
            return [self.catalog.get(relation.target)]

        if not inverses_of:
            raise MissingPolymorphicSources(name, dependent.name)

        sources: list[SchemaDescriptor] = []
        for candidate in inverses_of:
            schema = self.catalog.lookup(candidate)
            if schema not in sources:
                sources.append(schema)
        return sources

    def inverse_relation(
        self,
        dependent: SchemaIntrospector,
        reference: RelationDescriptor,
        source: SchemaDescriptor,
    ) -> RelationDescriptor:
        """Return the relation on *source* that leads back to *dependent*.

        Raises:
            UnresolvedInverseRelation: If no candidate name matches.
        """
        candidates = [reference.inverse_name, dependent.plural, dependent.singular]
        for candidate in candidates:
            if not candidate:
                continue
            relation = source.get_relation(candidate)
            if relation is not None:
                logger.debug(
                    "Resolved inverse of %s.%s on %s: %s (%s)",
                    dependent.name,
                    reference.name,
                    source.name,
                    relation.name,
                    relation.cardinality.value,
                )
                return relation

        raise UnresolvedInverseRelation(reference.name, dependent.name, source.name)
