"""
Request and response models for the Strapi client.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Login for POST /auth/local. `email` is accepted as an alias of `identifier`."""

    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(alias="email")
    password: str


class Pagination(BaseModel):
    """Explicit page request; unset values fall back to page 1 and the client page size."""

    model_config = ConfigDict(populate_by_name=True)

    page: Optional[int] = Field(default=None, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1, alias="pageSize")

    def to_params(self) -> dict[str, int]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PageInfo(BaseModel):
    """`meta.pagination` block of a collection response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    page: int = 1
    page_size: Optional[int] = Field(default=None, alias="pageSize")
    page_count: int = Field(default=1, alias="pageCount")
    total: Optional[int] = None


class Envelope(BaseModel):
    """Raw `{data, meta}` response body."""

    data: Any = None
    meta: Any = None


class SingleResponse(BaseModel):
    """Result of StrapiClient.get_single(). `data` is None when validation failed."""

    data: Any = None
    meta: Any = None


class CollectionResponse(BaseModel):
    """Result of StrapiClient.get_collection(). `meta` is the last fetched page's meta."""

    data: list[Any] = Field(default_factory=list)
    meta: Any = None


class InvalidEntry(BaseModel):
    """
    Diagnostic for an entity that did not match its schema.

    Attributes:
        plural_id: Collection the entity came from
        index: Position in the collection response (None for single fetches)
        entry: The raw entity as returned by the API
        errors: Structured validation errors
    """

    plural_id: str
    index: Optional[int] = None
    entry: Any = None
    errors: list[dict[str, Any]] = Field(default_factory=list)
