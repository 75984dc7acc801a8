"""Denormalization engine: the entry point for declaring directives.

``SyncEngine`` validates a directive against the dependent schema (still
being built) and the catalogued source schemas, declares the mirrored
fields on the dependent, and registers:

- a ``ChildSyncHook`` on the dependent at the directive's trigger event
  (``before_save`` by default);
- a ``ParentCascadeHook`` on ``after_update`` of every source schema that
  declares at least one of the directive's fields.

Nothing is declared or registered unless every check passes.

Inverse relations are resolved lazily, on the first cascade.  Pass
``strict=True`` to resolve them at declaration time instead, or call
``validate()`` once every schema is defined to get a report.

Usage:
    from doc_denorm.denormalize.engine import SyncEngine

    engine = SyncEngine(catalog, store)
    child = SchemaBuilder("Child", plural="children").belongs_to("parent")
    engine.denormalize(child, "name", from_="parent")
    catalog.define(child)

    repo = DocumentRepository(catalog, store, engine.hooks)
"""

import logging
from collections.abc import Mapping, Sequence

from doc_denorm.adapters.base import DocumentStore
from doc_denorm.denormalize.directive import (
    DirectiveOptions,
    DirectiveValidationResult,
    SyncDirective,
    UnresolvedInverse,
)
from doc_denorm.denormalize.hooks import ChildSyncHook, ParentCascadeHook
from doc_denorm.denormalize.mapping import resolve_field_mappings
from doc_denorm.denormalize.relations import RelationResolver
from doc_denorm.documents.lifecycle import HookRegistry, LifecycleEvent
from doc_denorm.errors import (
    DuplicateDirective,
    FieldNameConflict,
    InvalidDirective,
    MissingPolymorphicSources,
    MissingSourceOption,
    UnknownSourceField,
    UnresolvedInverseRelation,
)
from doc_denorm.schema.builder import SchemaBuilder, SchemaCatalog

logger = logging.getLogger(__name__)


class SyncEngine:
    """Register denormalization directives and own their hooks.

    Args:
        catalog: Catalog of source (and, once built, dependent) schemas.
        store: Store the hooks read sources from and patch dependents in.
        hooks: Hook registry to register into (a new one by default).
        strict: Resolve inverse relations at declaration time.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        store: DocumentStore,
        hooks: HookRegistry | None = None,
        strict: bool = False,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.hooks = hooks if hooks is not None else HookRegistry()
        self.strict = strict
        self.resolver = RelationResolver(catalog)
        self._directives: dict[tuple[str, str], list[SyncDirective]] = {}
        self._cascades: list[ParentCascadeHook] = []

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def denormalize(
        self,
        dependent: SchemaBuilder,
        *fields: str,
        from_: str | None = None,
        as_: str | Sequence[str] | None = None,
        prefix: str | None = None,
        inverses_of: Sequence[str] | None = None,
        child_callback: str = "BeforeSave",
    ) -> SyncDirective:
        """Declare that *fields* of the source behind *from_* are mirrored.

        Example:
            engine.denormalize(child, "name", from_="parent")
            engine.denormalize(child, "name", from_="parent", as_="supername")
            engine.denormalize(
                child, "name1", "name2", from_="top", inverses_of=["parent1", "parent2"]
            )
        """
        options = DirectiveOptions(
            fields=list(fields),
            from_=from_,
            as_=as_ if as_ is None or isinstance(as_, str) else list(as_),
            prefix=prefix,
            inverses_of=list(inverses_of) if inverses_of is not None else None,
            child_callback=child_callback,
        )
        return self.register(dependent, options)

    def register(self, dependent: SchemaBuilder, options: DirectiveOptions) -> SyncDirective:
        """Validate *options* and register the resulting directive.

        Raises:
            MissingSourceOption: If ``from`` is missing.
            InvalidDirective: If fields are missing or the callback is invalid.
            UnknownRelation: If the dependent has no such relation.
            MissingPolymorphicSources: If a polymorphic ``from`` has no
                ``inverses_of``.
            ArityMismatch: If ``as`` does not have one name per field.
            UnknownSchema: If a source schema is not in the catalog.
            UnknownSourceField: If a field is declared on no source.
            FieldNameConflict: If a mirrored name collides with another field,
                or another directive already feeds it from the same source.
            DuplicateDirective: If the same directive is already registered.
            UnresolvedInverseRelation: In strict mode, if a source has no
                inverse relation.
        """
        if not options.from_:
            raise MissingSourceOption()

        trigger = self._parse_trigger(options.child_callback)
        reference = self.resolver.reference(dependent, options.from_)
        if reference.polymorphic and not options.inverses_of:
            raise MissingPolymorphicSources(options.from_, dependent.name)

        mappings = resolve_field_mappings(
            options.fields, options.from_, as_=options.as_, prefix=options.prefix
        )
        sources = self.resolver.source_schemas(dependent, options.from_, options.inverses_of)

        for mapping in mappings:
            if not any(source.has_field(mapping.source_field) for source in sources):
                raise UnknownSourceField(mapping.source_field, [s.name for s in sources])

        directive = SyncDirective(
            dependent_schema=dependent.name,
            source_relation=reference.name,
            field_mappings=tuple(mappings),
            source_schemas=tuple(source.name for source in sources),
            trigger_event=trigger,
            polymorphic=reference.polymorphic,
            foreign_key=reference.foreign_key,
            type_key=reference.type_key,
            inverse_name=reference.inverse_name,
        )
        if directive in self._directives.get(directive.key, []):
            raise DuplicateDirective(
                f"{dependent.name} already denormalizes {directive.source_fields} "
                f"from '{reference.name}'."
            )
        self._check_shared_fields(directive)

        if self.strict:
            for source in sources:
                self.resolver.inverse_relation(dependent, reference, source)

        # All checks passed: declare fields and register hooks
        dependent.declare_mirrored_fields(reference.name, directive.dependent_fields)
        self.hooks.register(
            dependent.name, trigger, ChildSyncHook(directive, self.catalog, self.store)
        )
        for source in sources:
            source_mappings = directive.mappings_for(source)
            if not source_mappings:
                continue
            cascade = ParentCascadeHook(
                directive, source.name, source_mappings, self.resolver, self.store
            )
            self.hooks.register(source.name, LifecycleEvent.AFTER_UPDATE, cascade)
            self._cascades.append(cascade)

        self._directives.setdefault(directive.key, []).append(directive)
        logger.info(
            "Registered directive %s.%s: %s from %s",
            dependent.name,
            reference.name,
            {m.source_field: m.dependent_field for m in mappings},
            ", ".join(directive.source_schemas),
        )
        return directive

    def register_all(
        self,
        builders: Mapping[str, SchemaBuilder],
        directives: Mapping[str, Sequence[DirectiveOptions]],
    ) -> list[SyncDirective]:
        """Register configured directives, keyed by dependent schema name.

        Raises:
            InvalidDirective: If a directive names a schema with no builder.
        """
        registered: list[SyncDirective] = []
        for schema_name, options_list in directives.items():
            builder = builders.get(schema_name)
            if builder is None:
                raise InvalidDirective(
                    f"Directives declared for '{schema_name}' but no schema builder "
                    f"was given. Available: {', '.join(sorted(builders))}"
                )
            for options in options_list:
                registered.append(self.register(builder, options))
        return registered

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def directives(self, dependent: str | None = None) -> list[SyncDirective]:
        """Registered directives, optionally for one dependent schema."""
        return [
            directive
            for (schema, _), directives in self._directives.items()
            if dependent is None or schema == dependent
            for directive in directives
        ]

    def validate(self) -> DirectiveValidationResult:
        """Resolve every cascade's inverse relation and report failures.

        Dependent schemas must already be defined in the catalog.
        """
        unresolved: list[UnresolvedInverse] = []
        for cascade in self._cascades:
            try:
                cascade.inverse_relation()
            except UnresolvedInverseRelation as e:
                unresolved.append(
                    UnresolvedInverse(
                        dependent=e.dependent,
                        relation=e.relation,
                        source=e.source,
                        message=str(e),
                    )
                )
        return DirectiveValidationResult(
            valid=not unresolved,
            checked=len(self._cascades),
            unresolved=unresolved,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_shared_fields(self, directive: SyncDirective) -> None:
        """Reject a dependent field fed twice from the same source schema.

        Directives on one relation may share a dependent field only when
        their source schemas are disjoint (one polymorphic source each).
        """
        fields = set(directive.dependent_fields)
        sources = set(directive.source_schemas)
        for existing in self._directives.get(directive.key, []):
            shared = fields & set(existing.dependent_fields)
            overlap = sources & set(existing.source_schemas)
            if shared and overlap:
                raise FieldNameConflict(
                    f"{directive.dependent_schema}.{', '.join(sorted(shared))} is already "
                    f"mirrored from '{directive.source_relation}' for "
                    f"{', '.join(sorted(overlap))}."
                )

    @staticmethod
    def _parse_trigger(child_callback: str) -> LifecycleEvent:
        try:
            event = LifecycleEvent.parse(child_callback)
        except ValueError as e:
            raise InvalidDirective(str(e)) from None
        if not event.is_before:
            raise InvalidDirective(
                f"child_callback must run before the dependent is written, got '{child_callback}'."
            )
        return event
