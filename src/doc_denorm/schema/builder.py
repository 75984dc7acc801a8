"""Two-phase schema declaration.

A ``SchemaBuilder`` accepts field and relation declarations and produces
an immutable ``SchemaDescriptor``.  A ``SchemaCatalog`` holds the built
descriptors by name.

Usage:
    from doc_denorm.schema.builder import SchemaBuilder, SchemaCatalog

    catalog = SchemaCatalog()
    catalog.define(SchemaBuilder("Parent").field("name").has_many("children"))

    child = SchemaBuilder("Child", plural="children").belongs_to("parent")
    engine.denormalize(child, "name", from_="parent")
    catalog.define(child)
"""

import re
from collections.abc import Iterator

from doc_denorm.errors import FieldNameConflict, SchemaDefinitionError, UnknownSchema
from doc_denorm.schema.models import (
    FieldDescriptor,
    RelationDescriptor,
    RelationKind,
    SchemaDescriptor,
)


def underscore(name: str) -> str:
    """Convert a CamelCase schema name to snake_case.

    Example:
        >>> underscore("BlogPost")
        'blog_post'
    """
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


def camelize(name: str) -> str:
    """Convert a snake_case relation name to a CamelCase schema name.

    Example:
        >>> camelize("blog_post")
        'BlogPost'
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


class SchemaBuilder:
    """Collect declarations for one schema, then freeze them.

    Irregular plurals are not guessed: pass *plural* explicitly
    (``SchemaBuilder("Child", plural="children")``), and pass
    *class_name* to ``has_many`` when the relation name is not the
    target's plural with an ``s`` suffix.

    Args:
        name: Schema name (CamelCase by convention).
        singular: Singular route name (default: snake_case of *name*).
        plural: Plural route name (default: *singular* + ``"s"``).
        collection: Store collection (default: *plural*).
    """

    def __init__(
        self,
        name: str,
        singular: str | None = None,
        plural: str | None = None,
        collection: str | None = None,
    ) -> None:
        self.name = name
        self.singular = singular or underscore(name)
        self.plural = plural or f"{self.singular}s"
        self.collection = collection or self.plural
        self._fields: dict[str, FieldDescriptor] = {}
        self._relations: dict[str, RelationDescriptor] = {}
        self._built: SchemaDescriptor | None = None

    # ------------------------------------------------------------------
    # Introspection (SchemaIntrospector)
    # ------------------------------------------------------------------

    def fields(self) -> list[FieldDescriptor]:
        return list(self._fields.values())

    def relations(self) -> list[RelationDescriptor]:
        return list(self._relations.values())

    def get_field(self, name: str) -> FieldDescriptor | None:
        return self._fields.get(name)

    def get_relation(self, name: str) -> RelationDescriptor | None:
        return self._relations.get(name)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    @property
    def built(self) -> bool:
        return self._built is not None

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def field(self, name: str, type_: str = "object") -> "SchemaBuilder":
        """Declare an ordinary field."""
        self._check_open()
        if name in self._fields:
            raise SchemaDefinitionError(f"Field '{name}' already declared on {self.name}.")
        self._fields[name] = FieldDescriptor(name=name, type=type_)
        return self

    def belongs_to(
        self,
        name: str,
        class_name: str | None = None,
        inverse_of: str | None = None,
        polymorphic: bool = False,
    ) -> "SchemaBuilder":
        """Declare a reference to another document.

        Adds the ``<name>_id`` field, plus ``<name>_type`` when the
        reference is polymorphic.
        """
        relation = RelationDescriptor(
            name=name,
            kind=RelationKind.BELONGS_TO,
            target=None if polymorphic else (class_name or camelize(name)),
            polymorphic=polymorphic,
            inverse_name=inverse_of,
        )
        self._add_relation(relation)
        self.field(relation.foreign_key, "id")
        if relation.type_key:
            self.field(relation.type_key, "str")
        return self

    def has_one(
        self, name: str, class_name: str | None = None, inverse_of: str | None = None
    ) -> "SchemaBuilder":
        self._add_relation(
            RelationDescriptor(
                name=name,
                kind=RelationKind.HAS_ONE,
                target=class_name or camelize(name),
                inverse_name=inverse_of,
            )
        )
        return self

    def has_many(
        self, name: str, class_name: str | None = None, inverse_of: str | None = None
    ) -> "SchemaBuilder":
        self._add_relation(
            RelationDescriptor(
                name=name,
                kind=RelationKind.HAS_MANY,
                target=class_name or camelize(name.removesuffix("s")),
                inverse_name=inverse_of,
            )
        )
        return self

    def has_and_belongs_to_many(
        self, name: str, class_name: str | None = None, inverse_of: str | None = None
    ) -> "SchemaBuilder":
        self._add_relation(
            RelationDescriptor(
                name=name,
                kind=RelationKind.HAS_AND_BELONGS_TO_MANY,
                target=class_name or camelize(name.removesuffix("s")),
                inverse_name=inverse_of,
            )
        )
        return self

    def declare_mirrored_fields(self, relation: str, names: list[str]) -> None:
        """Declare fields that mirror values pulled through *relation*.

        All names are checked before any is added, so a conflict leaves
        the builder unchanged.  Re-declaring a field already mirrored
        from the same relation is allowed.

        Raises:
            FieldNameConflict: If a name is an ordinary field or is
                mirrored from another relation.
        """
        self._check_open()
        for name in names:
            existing = self._fields.get(name)
            if existing is None:
                continue
            if existing.mirrored_from is None:
                raise FieldNameConflict(
                    f"Field '{name}' is already declared on {self.name} and "
                    f"cannot receive values mirrored from '{relation}'."
                )
            if existing.mirrored_from != relation:
                raise FieldNameConflict(
                    f"Field '{name}' on {self.name} already mirrors "
                    f"'{existing.mirrored_from}', not '{relation}'."
                )

        for name in names:
            if name not in self._fields:
                self._fields[name] = FieldDescriptor(name=name, mirrored_from=relation)

    def build(self) -> SchemaDescriptor:
        """Freeze the declarations into a ``SchemaDescriptor``.

        Calling ``build()`` again returns the same descriptor.
        """
        if self._built is None:
            self._built = SchemaDescriptor(
                name=self.name,
                singular=self.singular,
                plural=self.plural,
                collection=self.collection,
                field_map=dict(self._fields),
                relation_map=dict(self._relations),
            )
        return self._built

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _add_relation(self, relation: RelationDescriptor) -> None:
        self._check_open()
        if relation.name in self._relations:
            raise SchemaDefinitionError(
                f"Relation '{relation.name}' already declared on {self.name}."
            )
        self._relations[relation.name] = relation

    def _check_open(self) -> None:
        if self._built is not None:
            raise SchemaDefinitionError(
                f"Schema {self.name} is already built; declarations are closed."
            )


class SchemaCatalog:
    """Registry of built schema descriptors, keyed by schema name."""

    def __init__(self) -> None:
        self._schemas: dict[str, SchemaDescriptor] = {}

    def define(self, builder: SchemaBuilder) -> SchemaDescriptor:
        """Build *builder* and register the result."""
        if builder.name in self._schemas:
            raise SchemaDefinitionError(f"Schema {builder.name} is already defined.")
        schema = builder.build()
        self._schemas[schema.name] = schema
        return schema

    def get(self, name: str) -> SchemaDescriptor:
        """Return the schema named *name*.

        Raises:
            UnknownSchema: If no such schema is defined.
        """
        try:
            return self._schemas[name]
        except KeyError:
            raise UnknownSchema(name, sorted(self._schemas)) from None

    def lookup(self, name: str) -> SchemaDescriptor:
        """Return a schema by name or by singular route name.

        ``lookup("parent1")`` and ``lookup("Parent1")`` find the same
        schema.
        """
        if name in self._schemas:
            return self._schemas[name]
        for schema in self._schemas.values():
            if schema.singular == name:
                return schema
        raise UnknownSchema(name, sorted(self._schemas))

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[SchemaDescriptor]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)
