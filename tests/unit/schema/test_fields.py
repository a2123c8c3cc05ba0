"""
Tests for field descriptors and the declaration DSL.
"""

import dataclasses

import pytest

from strapi_schema import component, dynamic, enumeration, media, number, relation, rich_text, text
from strapi_schema.exceptions import ErrorKind, StrapiError
from strapi_schema.schema.fields import (
    ComponentRepeatableField,
    ComponentSingleField,
    DynamicField,
    EnumerationField,
    MediaSingleField,
    NumberField,
    RelationHasManyField,
    RelationHasOneField,
    RichTextBlocksField,
    TextField,
    descend,
)


class TestDefaults:
    """Option defaults when omitted."""

    def test_text(self):
        """text() is not required by default."""
        assert text() == TextField(required=False)
        assert text(required=True).required is True

    def test_number(self):
        """number() is neither nullable nor optional by default."""
        field = number()
        assert isinstance(field, NumberField)
        assert field.nullable is False
        assert field.optional is False

    def test_media_and_rich_text(self):
        """media.single() and rich_text.blocks() take a required flag."""
        assert media.single() == MediaSingleField(required=False)
        assert rich_text.blocks(required=True) == RichTextBlocksField(required=True)

    def test_relations(self):
        """Relations carry their nested schema and accept null and absence by default."""
        nested = {"name": text()}
        one = relation.has_one(nested)
        many = relation.has_many(nested, nullable=False, optional=False)

        assert isinstance(one, RelationHasOneField)
        assert one.schema is nested
        assert (one.nullable, one.optional) == (True, True)
        assert isinstance(many, RelationHasManyField)
        assert (many.nullable, many.optional) == (False, False)

    def test_components(self):
        """Components carry their nested schema and a required flag."""
        nested = {"url": text()}
        assert component.single(nested) == ComponentSingleField(schema=nested, required=False)
        assert component.repeatable(nested, required=True) == ComponentRepeatableField(
            schema=nested, required=True
        )

    def test_dynamic(self):
        """dynamic() keeps the block map as given."""
        blocks = {"shared.quote": {"quote": text()}}
        field = dynamic(blocks, optional=True)

        assert isinstance(field, DynamicField)
        assert field.blocks is blocks
        assert field.nullable is False
        assert field.optional is True


class TestEnumeration:
    def test_values_become_tuple(self):
        """Values are stored as an ordered tuple."""
        field = enumeration(["a", "b"])
        assert isinstance(field, EnumerationField)
        assert field.values == ("a", "b")

    def test_empty_values_rejected(self):
        """An enumeration needs at least one value."""
        with pytest.raises(ValueError):
            enumeration([])


def test_descriptors_are_frozen():
    """Descriptors cannot be mutated after construction."""
    field = text()
    with pytest.raises(dataclasses.FrozenInstanceError):
        field.required = True


def test_descriptor_kinds():
    """Each descriptor exposes its kind tag."""
    assert text().kind == "text"
    assert number().kind == "number"
    assert enumeration(["x"]).kind == "enumeration"
    assert media.single().kind == "media.single"
    assert rich_text.blocks().kind == "richText.blocks"
    assert relation.has_one({}).kind == "relation.hasOne"
    assert relation.has_many({}).kind == "relation.hasMany"
    assert component.single({}).kind == "component.single"
    assert component.repeatable({}).kind == "component.repeatable"
    assert dynamic({}).kind == "dynamic"


class TestDescend:
    def test_adds_schema_to_ancestors(self):
        """descend() returns the ancestor set extended with the schema."""
        schema = {"title": text()}
        seen = descend(schema, frozenset(), "root")
        assert id(schema) in seen

    def test_cycle_raises_schema_error(self):
        """Walking into an ancestor raises a SCHEMA StrapiError."""
        schema = {"title": text()}
        seen = descend(schema, frozenset(), "root")

        with pytest.raises(StrapiError) as exc_info:
            descend(schema, seen, "root.self")

        assert exc_info.value.kind == ErrorKind.SCHEMA
        assert "root.self" in exc_info.value.message


class TestPackageNamespaces:
    def test_media_and_rich_text_exported_from_package(self):
        """The package-level media and rich_text names are the DSL namespaces."""
        import strapi_schema
        import strapi_schema.schema as schema_package

        assert strapi_schema.media.single() == MediaSingleField()
        assert strapi_schema.rich_text.blocks() == RichTextBlocksField()
        assert schema_package.media.single(required=True) == MediaSingleField(required=True)
        assert schema_package.rich_text.blocks(required=True) == RichTextBlocksField(required=True)

    def test_model_modules_do_not_shadow_namespaces(self):
        """Importing the media and rich text models keeps the DSL names intact."""
        import strapi_schema
        from strapi_schema.schema.blocks import RichTextBlocks  # noqa: F401
        from strapi_schema.schema.media_file import MediaFile  # noqa: F401

        assert callable(strapi_schema.media.single)
        assert callable(strapi_schema.rich_text.blocks)
