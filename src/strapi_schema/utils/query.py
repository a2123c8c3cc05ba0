"""
Query string serialization in Strapi's bracket notation.

    stringify_query({"populate": {"author": True}, "pagination": {"page": 2}, "fields": ["title"]})
    == "populate[author]=true&pagination[page]=2&fields[0]=title"

Keys are left as-is, values are percent-encoded, booleans are written
`true`/`false` and None values are skipped.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote(str(value), safe="")


def _pairs(prefix: str, value: Any) -> list[tuple[str, str]]:
    if value is None:
        return []

    if isinstance(value, Mapping):
        pairs = []
        for key, item in value.items():
            pairs.extend(_pairs(f"{prefix}[{key}]" if prefix else str(key), item))
        return pairs

    if isinstance(value, (list, tuple)):
        pairs = []
        for index, item in enumerate(value):
            pairs.extend(_pairs(f"{prefix}[{index}]", item))
        return pairs

    return [(prefix, _encode(value))]


def query_pairs(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten nested params into (key, encoded value) pairs."""
    if not params:
        return []
    return _pairs("", params)


def stringify_query(params: Mapping[str, Any] | None) -> str:
    """Serialize nested params into a query string (without the leading `?`)."""
    return "&".join(f"{key}={value}" for key, value in query_pairs(params))
