"""Directive models.

This module contains the directive-domain models:
- DirectiveOptions: the raw declaration (``fields``, ``from``, ``as``,
  ``prefix``, ``inverses_of``, ``child_callback``), as written in code or
  in ``denorm.toml``
- SyncDirective: the validated, immutable configuration registered by
  the engine
- UnresolvedInverse, DirectiveValidationResult: the report returned by
  ``SyncEngine.validate()``
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from doc_denorm.denormalize.mapping import FieldMapping
from doc_denorm.documents.lifecycle import LifecycleEvent
from doc_denorm.schema.introspector import SchemaIntrospector


# ============================================================================
# Declaration
# ============================================================================


class DirectiveOptions(BaseModel):
    """A directive as declared, before validation.

    ``from`` and ``as`` are Python keywords, so the attributes are
    ``from_`` and ``as_``; both spellings are accepted on input.

    Example:
        >>> opts = DirectiveOptions.model_validate({"fields": ["name"], "from": "parent"})
        >>> opts.from_
        'parent'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    fields: list[str]
    from_: str | None = Field(default=None, alias="from")
    as_: list[str] | str | None = Field(default=None, alias="as")
    prefix: str | None = None
    inverses_of: list[str] | None = None
    child_callback: str = "BeforeSave"

    @field_validator("inverses_of", mode="before")
    @classmethod
    def _single_inverse(cls, value):
        if isinstance(value, str):
            return [value]
        return value


# ============================================================================
# Validated directive
# ============================================================================


class SyncDirective(BaseModel):
    """Validated denormalization of one reference relation.

    Immutable once built.  ``field_mappings`` covers every source schema;
    ``mappings_for()`` narrows it to the fields one source declares.
    """

    model_config = ConfigDict(frozen=True)

    dependent_schema: str
    source_relation: str
    field_mappings: tuple[FieldMapping, ...]
    source_schemas: tuple[str, ...]
    trigger_event: LifecycleEvent = LifecycleEvent.BEFORE_SAVE
    polymorphic: bool = False
    foreign_key: str
    type_key: str | None = None
    inverse_name: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.dependent_schema, self.source_relation)

    @property
    def source_fields(self) -> list[str]:
        return [m.source_field for m in self.field_mappings]

    @property
    def dependent_fields(self) -> list[str]:
        return [m.dependent_field for m in self.field_mappings]

    def mappings_for(self, source: SchemaIntrospector) -> tuple[FieldMapping, ...]:
        """Mappings whose source field is declared on *source*."""
        return tuple(m for m in self.field_mappings if source.has_field(m.source_field))


# ============================================================================
# Validation Result Models
# ============================================================================


class UnresolvedInverse(BaseModel):
    """A source schema with no relation leading back to the dependents."""

    dependent: str
    relation: str
    source: str
    message: str = ""


class DirectiveValidationResult(BaseModel):
    """Result of checking every registered directive's inverse relations.

    Example:
        >>> result = DirectiveValidationResult(valid=True)
        >>> result.format_report()
        'All directives resolved'
    """

    valid: bool
    checked: int = 0
    unresolved: list[UnresolvedInverse] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.unresolved)

    def format_report(self) -> str:
        """Format validation result as human-readable report."""
        if self.valid:
            return "All directives resolved"

        lines = [f"Unresolved inverse relations ({self.error_count}):"]
        for item in self.unresolved:
            lines.append(f"    - {item.dependent}.{item.relation} on {item.source}")
        return "\n".join(lines)
