"""
Field descriptors and the schema declaration DSL.

A Schema is a plain ordered mapping of field name to field descriptor:

    from strapi_schema import component, dynamic, media, number, relation, text

    ARTICLE = {
        "title": text(required=True),
        "views": number(nullable=True, optional=True),
        "cover": media.single(),
        "author": relation.has_one({"name": text()}),
        "seo": component.single({"metaTitle": text()}),
        "body": dynamic({
            "shared.quote": {"quote": text(required=True)},
            "shared.media": {"file": media.single()},
        }),
    }

Descriptors are frozen. Nested schemas are held by reference, so a schema
that ends up containing itself is a cycle; the planner and the validator
builder reject cycles instead of recursing forever.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar, Literal, TypeAlias, Union

from ..exceptions import ErrorKind, StrapiError


@dataclass(frozen=True)
class TextField:
    required: bool = False

    kind: ClassVar[Literal["text"]] = "text"


@dataclass(frozen=True)
class NumberField:
    nullable: bool = False
    optional: bool = False

    kind: ClassVar[Literal["number"]] = "number"


@dataclass(frozen=True)
class EnumerationField:
    values: tuple[str, ...]
    required: bool = False

    kind: ClassVar[Literal["enumeration"]] = "enumeration"

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("enumeration() needs at least one value")
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class MediaSingleField:
    required: bool = False

    kind: ClassVar[Literal["media.single"]] = "media.single"


@dataclass(frozen=True)
class RichTextBlocksField:
    required: bool = False

    kind: ClassVar[Literal["richText.blocks"]] = "richText.blocks"


@dataclass(frozen=True)
class RelationHasOneField:
    schema: "Schema"
    nullable: bool = True
    optional: bool = True

    kind: ClassVar[Literal["relation.hasOne"]] = "relation.hasOne"


@dataclass(frozen=True)
class RelationHasManyField:
    schema: "Schema"
    nullable: bool = True
    optional: bool = True

    kind: ClassVar[Literal["relation.hasMany"]] = "relation.hasMany"


@dataclass(frozen=True)
class ComponentSingleField:
    schema: "Schema"
    required: bool = False

    kind: ClassVar[Literal["component.single"]] = "component.single"


@dataclass(frozen=True)
class ComponentRepeatableField:
    schema: "Schema"
    required: bool = False

    kind: ClassVar[Literal["component.repeatable"]] = "component.repeatable"


@dataclass(frozen=True)
class DynamicField:
    """Dynamic zone: blocks maps each `__component` tag to its schema."""

    blocks: Mapping[str, "Schema"]
    nullable: bool = False
    optional: bool = False

    kind: ClassVar[Literal["dynamic"]] = "dynamic"


SchemaField: TypeAlias = Union[
    TextField,
    NumberField,
    EnumerationField,
    MediaSingleField,
    RichTextBlocksField,
    RelationHasOneField,
    RelationHasManyField,
    ComponentSingleField,
    ComponentRepeatableField,
    DynamicField,
]

Schema: TypeAlias = Mapping[str, SchemaField]

NESTED_FIELDS = (
    RelationHasOneField,
    RelationHasManyField,
    ComponentSingleField,
    ComponentRepeatableField,
)


# =============================================================================
# DSL
# =============================================================================


def text(*, required: bool = False) -> TextField:
    return TextField(required=required)


def number(*, nullable: bool = False, optional: bool = False) -> NumberField:
    return NumberField(nullable=nullable, optional=optional)


def enumeration(values: tuple[str, ...] | list[str], *, required: bool = False) -> EnumerationField:
    return EnumerationField(values=tuple(values), required=required)


def dynamic(
    blocks: Mapping[str, Schema], *, nullable: bool = False, optional: bool = False
) -> DynamicField:
    return DynamicField(blocks=blocks, nullable=nullable, optional=optional)


class _Relation:
    """
    Namespace for relation.has_one / relation.has_many.

    Strapi returns unset relations as null (or omits them when not
    populated), so both are accepted unless turned off.
    """

    @staticmethod
    def has_one(
        schema: Schema, *, nullable: bool = True, optional: bool = True
    ) -> RelationHasOneField:
        return RelationHasOneField(schema=schema, nullable=nullable, optional=optional)

    @staticmethod
    def has_many(
        schema: Schema, *, nullable: bool = True, optional: bool = True
    ) -> RelationHasManyField:
        return RelationHasManyField(schema=schema, nullable=nullable, optional=optional)


class _Component:
    """Namespace for component.single / component.repeatable."""

    @staticmethod
    def single(schema: Schema, *, required: bool = False) -> ComponentSingleField:
        return ComponentSingleField(schema=schema, required=required)

    @staticmethod
    def repeatable(schema: Schema, *, required: bool = False) -> ComponentRepeatableField:
        return ComponentRepeatableField(schema=schema, required=required)


class _Media:
    @staticmethod
    def single(*, required: bool = False) -> MediaSingleField:
        return MediaSingleField(required=required)


class _RichText:
    @staticmethod
    def blocks(*, required: bool = False) -> RichTextBlocksField:
        return RichTextBlocksField(required=required)


relation = _Relation()
component = _Component()
media = _Media()
rich_text = _RichText()


def descend(schema: Schema, seen: frozenset[int], path: str) -> frozenset[int]:
    """
    Mark `schema` as being walked and return the new ancestor set.

    Raises:
        StrapiError: (kind SCHEMA) when `schema` is already one of its own ancestors
    """
    if id(schema) in seen:
        raise StrapiError(
            code=500,
            message=f"Schema cycle detected at '{path}'",
            kind=ErrorKind.SCHEMA,
            source=__name__,
        )
    return seen | {id(schema)}
