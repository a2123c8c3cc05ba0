"""
strapi-schema: typed client for the Strapi REST API.

Declare the fields you need, and the client derives the `populate` query
and validates every response against the declaration:

    from strapi_schema import StrapiClient, component, dynamic, media, relation, text

    ARTICLE = {
        "title": text(required=True),
        "cover": media.single(),
        "author": relation.has_one({"name": text()}, nullable=True),
        "blocks": dynamic({"shared.rich-text": {"body": text()}}),
    }

    client = await StrapiClient.create("http://localhost:1337/api", auth="token")
    articles = await client.get_collection("articles", schema=ARTICLE, pagination=False)
"""

__version__ = "0.1.0"

from .client import DEFAULT_HEADERS, StrapiClient
from .exceptions import ErrorKind, StrapiError, ensure_strapi_error
from .models import (
    CollectionResponse,
    Credentials,
    InvalidEntry,
    Pagination,
    SingleResponse,
)
from .schema import (
    EntityValidator,
    ParseResult,
    Schema,
    SchemaField,
    build_entity_model,
    component,
    dynamic,
    enumeration,
    media,
    number,
    populate_from_schema,
    relation,
    rich_text,
    text,
)
from .settings import Settings, settings

__all__ = [
    "__version__",
    # Client
    "StrapiClient",
    "DEFAULT_HEADERS",
    "Credentials",
    "Pagination",
    "SingleResponse",
    "CollectionResponse",
    "InvalidEntry",
    # Errors
    "StrapiError",
    "ErrorKind",
    "ensure_strapi_error",
    # Schema DSL
    "Schema",
    "SchemaField",
    "text",
    "number",
    "enumeration",
    "media",
    "rich_text",
    "relation",
    "component",
    "dynamic",
    "populate_from_schema",
    "build_entity_model",
    "EntityValidator",
    "ParseResult",
    # Settings
    "Settings",
    "settings",
]
