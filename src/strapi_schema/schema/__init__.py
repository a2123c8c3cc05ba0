"""
Schema engine

- fields: field descriptors and the declaration DSL
- populate: populate directive planner
- validation: pydantic validator builder
- media, rich_text: fixed models for media records and rich text blocks
"""

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
    component,
    dynamic,
    enumeration,
    media,
    number,
    relation,
    rich_text,
    text,
)
from .blocks import RichTextBlocks
from .media_file import MediaFile, MediaFormat
from .populate import populate_from_schema
from .validation import (
    STANDARD_FIELDS,
    EntityValidator,
    ParseResult,
    StrapiEntity,
    build_entity_model,
)

__all__ = [
    # Descriptors
    "Schema",
    "SchemaField",
    "TextField",
    "NumberField",
    "EnumerationField",
    "MediaSingleField",
    "RichTextBlocksField",
    "RelationHasOneField",
    "RelationHasManyField",
    "ComponentSingleField",
    "ComponentRepeatableField",
    "DynamicField",
    # DSL
    "text",
    "number",
    "enumeration",
    "media",
    "rich_text",
    "relation",
    "component",
    "dynamic",
    # Planner / validator
    "populate_from_schema",
    "build_entity_model",
    "EntityValidator",
    "ParseResult",
    "StrapiEntity",
    "STANDARD_FIELDS",
    # Fixed models
    "MediaFile",
    "MediaFormat",
    "RichTextBlocks",
]
