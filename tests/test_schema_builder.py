"""Tests for schema declaration (schema/builder.py, schema/models.py).

Verifies naming helpers, builder declarations, mirrored field
declarations, freezing, and catalog lookup.
"""

import pytest

from doc_denorm.errors import FieldNameConflict, SchemaDefinitionError, UnknownSchema
from doc_denorm.schema import (
    Cardinality,
    RelationKind,
    SchemaBuilder,
    SchemaCatalog,
    SchemaDescriptor,
    SchemaIntrospector,
    camelize,
    underscore,
)


# ============================================================================
# Test: Naming helpers
# ============================================================================


class TestNamingHelpers:
    """Verify underscore() and camelize()."""

    def test_underscore(self) -> None:
        """CamelCase names become snake_case."""
        assert underscore("Parent") == "parent"
        assert underscore("BlogPost") == "blog_post"
        assert underscore("Parent1") == "parent1"
        assert underscore("HTTPRequest") == "http_request"

    def test_camelize(self) -> None:
        """snake_case names become CamelCase."""
        assert camelize("parent") == "Parent"
        assert camelize("blog_post") == "BlogPost"


# ============================================================================
# Test: SchemaBuilder
# ============================================================================


class TestSchemaBuilder:
    """Verify declarations and the built descriptor."""

    def test_default_names(self) -> None:
        """singular, plural and collection derive from the schema name."""
        schema = SchemaBuilder("BlogPost").build()
        assert schema.singular == "blog_post"
        assert schema.plural == "blog_posts"
        assert schema.collection == "blog_posts"

    def test_explicit_plural(self) -> None:
        """An explicit plural also sets the default collection."""
        schema = SchemaBuilder("Child", plural="children").build()
        assert schema.plural == "children"
        assert schema.collection == "children"

    def test_belongs_to_adds_foreign_key(self) -> None:
        """belongs_to declares the '<name>_id' field."""
        schema = SchemaBuilder("Child").belongs_to("parent").build()
        relation = schema.get_relation("parent")
        assert relation.kind is RelationKind.BELONGS_TO
        assert relation.target == "Parent"
        assert relation.foreign_key == "parent_id"
        assert schema.has_field("parent_id")
        assert not schema.has_field("parent_type")

    def test_polymorphic_belongs_to_adds_type_key(self) -> None:
        """Polymorphic belongs_to declares '<name>_type' and has no target."""
        schema = SchemaBuilder("Child").belongs_to("top", polymorphic=True).build()
        relation = schema.get_relation("top")
        assert relation.target is None
        assert relation.type_key == "top_type"
        assert schema.field_names == {"top_id", "top_type"}

    def test_class_name_overrides_target(self) -> None:
        """class_name sets the target schema."""
        schema = SchemaBuilder("Child").belongs_to("mother", class_name="Parent").build()
        assert schema.get_relation("mother").target == "Parent"

    def test_relation_cardinalities(self) -> None:
        """Each relation kind maps to its cardinality."""
        schema = (
            SchemaBuilder("Parent")
            .has_one("child")
            .has_many("children", class_name="Child")
            .has_and_belongs_to_many("tags")
            .build()
        )
        assert schema.get_relation("child").cardinality is Cardinality.ONE
        assert schema.get_relation("children").cardinality is Cardinality.MANY
        assert schema.get_relation("tags").cardinality is Cardinality.MANY_TO_MANY
        assert schema.get_relation("tags").target == "Tag"

    def test_has_many_default_target(self) -> None:
        """has_many strips a trailing 's' to find the target."""
        schema = SchemaBuilder("Parent").has_many("comments").build()
        assert schema.get_relation("comments").target == "Comment"

    def test_duplicate_field(self) -> None:
        """Declaring a field twice raises SchemaDefinitionError."""
        builder = SchemaBuilder("Parent").field("name")
        with pytest.raises(SchemaDefinitionError):
            builder.field("name")

    def test_duplicate_relation(self) -> None:
        """Declaring a relation twice raises SchemaDefinitionError."""
        builder = SchemaBuilder("Parent").has_many("children")
        with pytest.raises(SchemaDefinitionError):
            builder.has_one("children")

    def test_build_is_cached_and_closes_builder(self) -> None:
        """build() returns one descriptor and rejects later declarations."""
        builder = SchemaBuilder("Parent").field("name")
        first = builder.build()
        assert builder.build() is first
        assert builder.built
        with pytest.raises(SchemaDefinitionError, match="already built"):
            builder.field("age")

    def test_descriptor_is_frozen(self) -> None:
        """SchemaDescriptor cannot be modified."""
        schema = SchemaBuilder("Parent").build()
        with pytest.raises(Exception):
            schema.name = "Other"

    def test_builder_and_descriptor_are_introspectors(self) -> None:
        """Both satisfy the SchemaIntrospector protocol."""
        builder = SchemaBuilder("Parent").field("name")

        def field_names(schema: SchemaIntrospector) -> list[str]:
            return [f.name for f in schema.fields()]

        assert field_names(builder) == ["name"]
        assert field_names(builder.build()) == ["name"]


# ============================================================================
# Test: Mirrored fields
# ============================================================================


class TestMirroredFields:
    """Verify declare_mirrored_fields() conflict rules."""

    def test_declares_fields(self) -> None:
        """Mirrored fields record the relation feeding them."""
        builder = SchemaBuilder("Child").belongs_to("parent")
        builder.declare_mirrored_fields("parent", ["parent_name"])
        assert builder.get_field("parent_name").mirrored_from == "parent"

    def test_redeclare_same_relation(self) -> None:
        """Declaring the same mirrored field for the same relation is allowed."""
        builder = SchemaBuilder("Child").belongs_to("top", polymorphic=True)
        builder.declare_mirrored_fields("top", ["top_name"])
        builder.declare_mirrored_fields("top", ["top_name"])
        assert [f.name for f in builder.fields()].count("top_name") == 1

    def test_conflict_with_ordinary_field(self) -> None:
        """A mirrored name cannot reuse an ordinary field."""
        builder = SchemaBuilder("Child").field("parent_name").belongs_to("parent")
        with pytest.raises(FieldNameConflict):
            builder.declare_mirrored_fields("parent", ["parent_name"])

    def test_conflict_with_other_relation(self) -> None:
        """A mirrored name cannot be fed by two relations."""
        builder = SchemaBuilder("Child").belongs_to("parent").belongs_to("mother", class_name="Parent")
        builder.declare_mirrored_fields("parent", ["label"])
        with pytest.raises(FieldNameConflict, match="already mirrors"):
            builder.declare_mirrored_fields("mother", ["label"])

    def test_conflict_leaves_builder_unchanged(self) -> None:
        """No name is added when any name conflicts."""
        builder = SchemaBuilder("Child").field("taken").belongs_to("parent")
        with pytest.raises(FieldNameConflict):
            builder.declare_mirrored_fields("parent", ["fresh", "taken"])
        assert not builder.has_field("fresh")


# ============================================================================
# Test: SchemaCatalog
# ============================================================================


class TestSchemaCatalog:
    """Verify catalog registration and lookup."""

    def test_define_and_get(self) -> None:
        """define() builds and registers the schema."""
        catalog = SchemaCatalog()
        schema = catalog.define(SchemaBuilder("Parent"))
        assert isinstance(schema, SchemaDescriptor)
        assert catalog.get("Parent") is schema
        assert "Parent" in catalog
        assert len(catalog) == 1
        assert list(catalog) == [schema]

    def test_define_twice(self) -> None:
        """A schema name can only be defined once."""
        catalog = SchemaCatalog()
        catalog.define(SchemaBuilder("Parent"))
        with pytest.raises(SchemaDefinitionError):
            catalog.define(SchemaBuilder("Parent"))

    def test_unknown_schema(self) -> None:
        """get() raises UnknownSchema listing the known names."""
        catalog = SchemaCatalog()
        catalog.define(SchemaBuilder("Parent"))
        with pytest.raises(UnknownSchema, match="Parent"):
            catalog.get("Missing")

    def test_unknown_schema_is_key_error(self) -> None:
        """UnknownSchema can be caught as KeyError."""
        with pytest.raises(KeyError):
            SchemaCatalog().get("Missing")

    def test_lookup_by_singular(self) -> None:
        """lookup() accepts the schema name or its singular name."""
        catalog = SchemaCatalog()
        schema = catalog.define(SchemaBuilder("Parent1"))
        assert catalog.lookup("Parent1") is schema
        assert catalog.lookup("parent1") is schema
        with pytest.raises(UnknownSchema):
            catalog.lookup("parent2")
