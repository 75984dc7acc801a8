"""Exception taxonomy for doc-denorm.

Declaration-time errors derive from ``DirectiveError`` (a ``ValueError``)
and are raised while schemas and directives are being declared, so an
invalid directive stops the process from starting.

Runtime errors derive from ``CascadeError`` (a ``RuntimeError``) and
surface through the call that saved or updated a document.

Usage:
    from doc_denorm.errors import DirectiveError, CascadeError

    try:
        engine.denormalize(child, "name", from_="parent")
    except DirectiveError as e:
        print(f"Bad directive: {e}")
"""


class DenormalizeError(Exception):
    """Base class for every error raised by doc-denorm."""

    pass


# ============================================================================
# Declaration-time errors
# ============================================================================


class DirectiveError(DenormalizeError, ValueError):
    """A directive could not be declared."""

    pass


class MissingSourceOption(DirectiveError):
    """The directive does not name the relation its fields come from."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "Option 'from' is needed (e.g. denormalize('name', from_='user'))."
        )


class ArityMismatch(DirectiveError):
    """The ``as`` list does not have one name per field."""

    def __init__(self, fields: list[str], names: list[str]) -> None:
        self.fields = fields
        self.names = names
        super().__init__(
            f"Option 'as' needs one name per field: got {len(names)} name(s) "
            f"{names} for {len(fields)} field(s) {fields}."
        )


class MissingPolymorphicSources(DirectiveError):
    """A polymorphic reference was declared without ``inverses_of``."""

    def __init__(self, relation: str, dependent: str) -> None:
        self.relation = relation
        self.dependent = dependent
        super().__init__(
            f"Option 'inverses_of' is needed with a list of schemas when "
            f"'{dependent}.{relation}' is polymorphic."
        )


class InvalidDirective(DirectiveError):
    """The directive options are malformed."""

    pass


class UnknownRelation(DirectiveError):
    """The dependent schema declares no relation with the given name."""

    def __init__(self, relation: str, schema: str) -> None:
        self.relation = relation
        self.schema = schema
        super().__init__(f"Schema '{schema}' has no relation named '{relation}'.")


class UnknownSchema(DirectiveError, KeyError):
    """A schema name could not be found in the catalog."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        message = f"Schema '{name}' is not defined."
        if available:
            message += f" Available: {', '.join(available)}"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownSourceField(DirectiveError):
    """A mirrored field is declared on none of the source schemas."""

    def __init__(self, field: str, sources: list[str]) -> None:
        self.field = field
        self.sources = sources
        super().__init__(
            f"Field '{field}' is not declared on any source schema: {', '.join(sources)}."
        )


class FieldNameConflict(DirectiveError):
    """A mirrored field name collides with a field it does not own."""

    pass


class DuplicateDirective(DirectiveError):
    """The same directive was declared twice."""

    pass


class SchemaDefinitionError(DenormalizeError, ValueError):
    """A schema builder was misused (duplicate names, declaration after build)."""

    pass


# ============================================================================
# Runtime errors
# ============================================================================


class CascadeError(DenormalizeError, RuntimeError):
    """A pull or push could not be carried out."""

    pass


class UnresolvedInverseRelation(CascadeError):
    """No relation on the source schema leads back to the dependents."""

    def __init__(self, relation: str, dependent: str, source: str) -> None:
        self.relation = relation
        self.dependent = dependent
        self.source = source
        super().__init__(
            f"Option 'inverse_of' is needed for belongs_to '{relation}' into "
            f"{dependent}: no relation on {source} leads back to it."
        )


class UnsupportedRelationCardinality(CascadeError):
    """The inverse relation is neither one- nor many-valued."""

    def __init__(self, relation: str, cardinality: str) -> None:
        self.relation = relation
        self.cardinality = cardinality
        super().__init__(
            f"Relation type unsupported: '{relation}' has cardinality '{cardinality}'."
        )


class CollaboratorWriteFailure(CascadeError):
    """The document store failed while a push looked up or patched dependents."""

    def __init__(self, collection: str, filters: dict, reason: str) -> None:
        self.collection = collection
        self.filters = filters
        super().__init__(
            f"Failed to update '{collection}' matching {filters}: {reason}"
        )
