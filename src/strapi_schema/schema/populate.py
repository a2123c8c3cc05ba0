"""
Populate planner.

Derives the `populate` query parameter that makes Strapi return every
relation, component, media and dynamic-zone block a schema declares:

    populate_from_schema({
        "title": text(),
        "cover": media.single(),
        "author": relation.has_one({"name": text()}),
        "seo": component.single({"image": media.single()}),
        "body": dynamic({"shared.quote": {"quote": text()}}),
    })
    == {
        "cover": {"populate": True},
        "author": True,
        "seo": {"populate": {"image": {"populate": True}}},
        "body": {"on": {"shared.quote": True}},
    }

A nested schema with nothing to populate collapses to `True` rather than an
empty `{"populate": {}}`.
"""

from typing import Any

from loguru import logger

from .fields import NESTED_FIELDS, DynamicField, MediaSingleField, Schema, descend


def _nested(schema: Schema, seen: frozenset[int], path: str) -> bool | dict[str, Any]:
    populate = _populate(schema, seen, path)
    if not populate:
        return True
    return {"populate": populate}


def _populate(schema: Schema, seen: frozenset[int], path: str) -> dict[str, Any]:
    seen = descend(schema, seen, path)
    populate: dict[str, Any] = {}

    for key, field in schema.items():
        field_path = f"{path}.{key}" if path else key

        if isinstance(field, NESTED_FIELDS):
            populate[key] = _nested(field.schema, seen, field_path)
        elif isinstance(field, DynamicField):
            populate[key] = {
                "on": {
                    block: _nested(block_schema, seen, f"{field_path}[{block}]")
                    for block, block_schema in field.blocks.items()
                }
            }
        elif isinstance(field, MediaSingleField):
            populate[key] = {"populate": True}

    return populate


def populate_from_schema(schema: Schema) -> dict[str, Any]:
    """
    Build the populate directive for a schema.

    Args:
        schema: Mapping of field name to field descriptor

    Returns:
        Nested populate directive (empty when the schema only has scalar fields)

    Raises:
        StrapiError: (kind SCHEMA) when the schema contains itself
    """
    populate = _populate(schema, frozenset(), "")
    logger.debug(f"Populate directive: {populate}")
    return populate
