"""
Validator builder.

Turns a schema into a pydantic model that checks one entity from the API:

    validator = EntityValidator({"title": text(required=True), "views": number()})
    result = validator.safe_parse({"id": 1, "title": "A", "views": 5, "publishedAt": None})
    result.ok    # True
    result.data  # {"id": 1, "title": "A", "views": 5, "publishedAt": None}

Conventions:
- Every entity (top level and relations) also carries the standard fields
  id, documentId, createdAt, updatedAt and publishedAt. Standard fields win
  over declared fields with the same name.
- The top-level model keeps unknown keys untouched. Nested objects
  (relations, components, dynamic blocks, media) drop them.
- Declared keys are mapped through aliases, so any key the API uses works,
  including ones that are not Python identifiers.
- Models for relation, component and dynamic descriptors are built once per
  descriptor and reused; the dynamic-zone union in particular is never
  rebuilt per call.
"""

import re
from typing import Annotated, Any, Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, create_model

from .blocks import RichTextBlocks
from .fields import (
    ComponentRepeatableField,
    ComponentSingleField,
    DynamicField,
    EnumerationField,
    MediaSingleField,
    NumberField,
    RelationHasManyField,
    RelationHasOneField,
    RichTextBlocksField,
    Schema,
    SchemaField,
    TextField,
    descend,
)
from .media_file import MediaFile
from .types import IsoDateTime, Number

DISCRIMINATOR = "__component"


class StrapiEntity(BaseModel):
    """Base for top-level entity models: standard fields plus pass-through extras."""

    model_config = ConfigDict(extra="allow")

    id: Number
    documentId: StrictStr = None
    createdAt: IsoDateTime = None
    updatedAt: IsoDateTime = None
    publishedAt: Optional[IsoDateTime] = None


class RelatedEntity(StrapiEntity):
    """Base for related entities (relation.hasOne / relation.hasMany)."""

    model_config = ConfigDict(extra="ignore")


class ComponentBase(BaseModel):
    """Base for components and dynamic-zone blocks."""

    model_config = ConfigDict(extra="ignore")


STANDARD_FIELDS = frozenset(StrapiEntity.model_fields)

class ParseResult(BaseModel):
    """Outcome of EntityValidator.safe_parse()."""

    data: Optional[dict[str, Any]] = None
    errors: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.data is not None and not self.errors


def _model_name(path: str) -> str:
    parts = re.split(r"[^0-9A-Za-z]+", path)
    return "".join(part[:1].upper() + part[1:] for part in parts if part) or "Entity"


def _wrap(annotation: Any, *, nullable: bool, optional: bool) -> tuple[Any, bool]:
    """Return (annotation, required) for nullable/optional options."""
    if nullable:
        annotation = Optional[annotation]
    return annotation, not optional


def _wrap_required(annotation: Any, required: bool) -> tuple[Any, bool]:
    """Fields with a `required` flag are nullable and optional unless required."""
    if required:
        return annotation, True
    return Optional[annotation], False


def _definitions(
    schema: Schema,
    seen: frozenset[int],
    path: str,
    reserved: frozenset[str] = frozenset(),
) -> dict[str, Any]:
    seen = descend(schema, seen, path)
    definitions: dict[str, Any] = {}

    for index, (key, field) in enumerate(schema.items()):
        if key in reserved:
            logger.debug(f"Declared field '{path}.{key}' is a standard field, ignoring declaration")
            continue
        annotation, required = _field_annotation(field, seen, f"{path}.{key}")
        default = ... if required else None
        definitions[f"field_{index}"] = (annotation, Field(default, alias=key))

    return definitions


COMPILED_ATTR = "_compiled_model"


def _compile(field: SchemaField, build) -> Any:
    """Build the model for a nested descriptor once and keep it on the descriptor."""
    compiled = field.__dict__.get(COMPILED_ATTR)
    if compiled is None:
        compiled = build()
        # Descriptors are frozen dataclasses
        object.__setattr__(field, COMPILED_ATTR, compiled)
    return compiled


def _component_model(schema: Schema, seen: frozenset[int], path: str) -> type[BaseModel]:
    return create_model(
        _model_name(path), __base__=ComponentBase, **_definitions(schema, seen, path)
    )


def _related_model(schema: Schema, seen: frozenset[int], path: str) -> type[BaseModel]:
    return create_model(
        _model_name(path),
        __base__=RelatedEntity,
        **_definitions(schema, seen, path, reserved=STANDARD_FIELDS),
    )


def _block_union(field: DynamicField, seen: frozenset[int], path: str) -> Any:
    variants = []
    for tag, block_schema in field.blocks.items():
        block_path = f"{path}[{tag}]"
        definitions = _definitions(block_schema, seen, block_path)
        definitions["component_tag"] = (Literal[tag], Field(alias=DISCRIMINATOR))
        variants.append(
            create_model(_model_name(block_path), __base__=ComponentBase, **definitions)
        )

    if len(variants) == 1:
        return variants[0]
    return Annotated[Union[tuple(variants)], Field(discriminator="component_tag")]


def _field_annotation(field: SchemaField, seen: frozenset[int], path: str) -> tuple[Any, bool]:
    if isinstance(field, TextField):
        return _wrap_required(StrictStr, field.required)

    if isinstance(field, NumberField):
        return _wrap(Number, nullable=field.nullable, optional=field.optional)

    if isinstance(field, EnumerationField):
        return _wrap_required(Literal[field.values], field.required)

    if isinstance(field, MediaSingleField):
        return _wrap_required(MediaFile, field.required)

    if isinstance(field, RichTextBlocksField):
        return _wrap_required(RichTextBlocks, field.required)

    if isinstance(field, ComponentSingleField):
        model = _compile(field, lambda: _component_model(field.schema, seen, path))
        return _wrap_required(model, field.required)

    if isinstance(field, ComponentRepeatableField):
        model = _compile(field, lambda: _component_model(field.schema, seen, path))
        return _wrap_required(list[model], field.required)

    if isinstance(field, RelationHasOneField):
        model = _compile(field, lambda: _related_model(field.schema, seen, path))
        return _wrap(model, nullable=field.nullable, optional=field.optional)

    if isinstance(field, RelationHasManyField):
        model = _compile(field, lambda: _related_model(field.schema, seen, path))
        return _wrap(list[model], nullable=field.nullable, optional=field.optional)

    if isinstance(field, DynamicField):
        if not field.blocks:
            # No declared blocks: nothing to discriminate on, accept anything
            logger.debug(f"Dynamic zone '{path}' declares no blocks, accepting any value")
            return Any, False
        union = _compile(field, lambda: _block_union(field, seen, path))
        return _wrap(list[union], nullable=field.nullable, optional=field.optional)

    logger.warning(f"Unknown field descriptor at '{path}': {field!r}, accepting any value")
    return Any, False


def build_entity_model(schema: Schema, name: str = "Entity") -> type[StrapiEntity]:
    """
    Build the pydantic model validating one entity of `schema`.

    Args:
        schema: Mapping of field name to field descriptor
        name: Model class name (also the root of nested model names)

    Returns:
        StrapiEntity subclass with one aliased field per declared key

    Raises:
        StrapiError: (kind SCHEMA) when the schema contains itself
    """
    definitions = _definitions(schema, frozenset(), name, reserved=STANDARD_FIELDS)
    model = create_model(_model_name(name), __base__=StrapiEntity, **definitions)
    logger.debug(f"Built entity model '{model.__name__}' with fields {list(schema)}")
    return model


def dump_entity(instance: BaseModel) -> dict[str, Any]:
    """Convert a validated entity back to API-shaped data (aliases, unset keys omitted, extras kept)."""
    data = instance.model_dump(by_alias=True, exclude_unset=True)
    data.update(instance.model_extra or {})
    return data


class EntityValidator:
    """
    Structural validator for one schema.

    Attributes:
        schema: The declared schema
        model: Generated pydantic model (use it directly for typed access)
    """

    def __init__(self, schema: Schema, name: str = "Entity"):
        self.schema = schema
        self.model = build_entity_model(schema, name)

    def safe_parse(self, raw: Any) -> ParseResult:
        """Validate `raw` without raising; failures are reported in ParseResult.errors."""
        try:
            instance = self.model.model_validate(raw)
        except ValidationError as e:
            return ParseResult(errors=e.errors(include_url=False))
        return ParseResult(data=dump_entity(instance))

    def parse(self, raw: Any) -> dict[str, Any]:
        """Validate `raw`, raising pydantic.ValidationError on mismatch."""
        return dump_entity(self.model.model_validate(raw))
