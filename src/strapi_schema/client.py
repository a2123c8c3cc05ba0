"""
Async Strapi REST client.

Example:
    from strapi_schema import StrapiClient, text, number

    ARTICLE = {"title": text(required=True), "views": number()}

    client = await StrapiClient.create(
        "http://localhost:1337/api",
        auth={"identifier": "editor@example.com", "password": "..."},
    )
    article = await client.get_single("homepage", schema=ARTICLE)
    articles = await client.get_collection("articles", schema=ARTICLE, pagination=False)

Fetch policy:
- Each operation awaits one HTTP request at a time. Collection pages are
  requested strictly in sequence.
- HTTP failures always raise StrapiError; a missing `data` on a single
  fetch raises a NOT_FOUND StrapiError.
- Schema validation is best-effort: an entity that does not match is
  reported (loguru warning + on_invalid_entry callback) and replaced by
  None (single fetch) or dropped (collection fetch). The call succeeds.
- The client holds only its construction-time configuration. Without an
  injected httpx.AsyncClient a short-lived one is opened per request.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import httpx
from loguru import logger
from pydantic import BaseModel

from .exceptions import ErrorKind, StrapiError, ensure_strapi_error, http_error, not_found_error
from .models import (
    CollectionResponse,
    Credentials,
    Envelope,
    InvalidEntry,
    PageInfo,
    Pagination,
    SingleResponse,
)
from .schema.fields import Schema
from .schema.populate import populate_from_schema
from .schema.validation import EntityValidator
from .settings import Settings, settings as default_settings
from .utils.query import stringify_query

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "accept": "application/json",
        "Content-Type": "application/json",
    }
)

DEFAULT_PAGE_SIZE = 100

InvalidEntryCallback = Callable[[InvalidEntry], None]
PaginationArg = Union[bool, Pagination, Mapping[str, Any], None]


class _TokenBody(BaseModel):
    token: str


def join_path(*parts: str) -> str:
    """Join URL path segments with single slashes and a leading slash."""
    segments = [segment for part in parts for segment in part.split("/") if segment]
    return "/" + "/".join(segments)


def build_url(origin: str, pathname: str, params: Mapping[str, Any] | None = None) -> str:
    """Build `{origin}{pathname}?{query}` using bracket notation for params."""
    url = f"{origin.rstrip('/')}{pathname}"
    query = stringify_query(params)
    if query:
        url = f"{url}?{query}"
    return url


async def _send(
    method: str,
    url: str,
    *,
    headers: Mapping[str, str],
    json: Any = None,
    http_client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> httpx.Response:
    if http_client is not None:
        return await http_client.request(method, url, headers=dict(headers), json=json)

    async with httpx.AsyncClient(timeout=timeout) as client:
        return await client.request(method, url, headers=dict(headers), json=json)


def _read_envelope(response: httpx.Response) -> Envelope:
    """Parse a `{data, meta}` body, raising StrapiError for non-success statuses."""
    if not response.is_success:
        raise http_error(response, __name__)
    return Envelope.model_validate(response.json())


def _resolve_pagination(pagination: PaginationArg) -> Optional[Pagination]:
    """None/True mean the default single first page, False means every page."""
    if pagination is False:
        return None
    if pagination is None or pagination is True:
        return Pagination(page=1)
    if isinstance(pagination, Pagination):
        return pagination
    return Pagination.model_validate(dict(pagination))


class StrapiClient:
    """
    Strapi REST client bound to one API endpoint and credential.

    Attributes:
        origin: Scheme and host (e.g. http://localhost:1337)
        pathname: API base path (e.g. /api)
        params: Default query params merged under every call's params
        headers: Default headers (DEFAULT_HEADERS plus constructor headers)
        token: Bearer token or None
        page_size: Page size for collection fetches
    """

    def __init__(
        self,
        origin: str,
        pathname: str = "/api",
        *,
        token: str | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        on_invalid_entry: InvalidEntryCallback | None = None,
    ):
        self.origin = origin.rstrip("/")
        self.pathname = join_path(pathname)
        self.token = token or None
        self.params: Mapping[str, Any] = MappingProxyType(dict(params or {}))
        self.headers: Mapping[str, str] = MappingProxyType({**DEFAULT_HEADERS, **(headers or {})})
        self.page_size = page_size
        self.timeout = timeout
        self._http_client = http_client
        self._on_invalid_entry = on_invalid_entry

    def __repr__(self) -> str:
        return f"StrapiClient(origin={self.origin!r}, pathname={self.pathname!r}, token={'***' if self.token else None})"

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    async def create(
        cls,
        endpoint: str,
        *,
        auth: Credentials | Mapping[str, str] | str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        **options: Any,
    ) -> "StrapiClient":
        """
        Create a client from an endpoint URL, logging in when credentials are given.

        Args:
            endpoint: API URL including the base path (http://localhost:1337/api)
            auth: Bearer token string, or credentials to exchange for a token
            http_client: Optional shared httpx.AsyncClient
            timeout: Transport timeout in seconds
            **options: Forwarded to the constructor (params, headers, page_size, on_invalid_entry)

        Returns:
            Configured StrapiClient
        """
        parts = urlsplit(str(endpoint))
        if not parts.scheme or not parts.netloc:
            raise StrapiError(
                code=400,
                message=f"Invalid endpoint URL: {endpoint}",
                kind=ErrorKind.UNEXPECTED,
                source=__name__,
            )
        origin = f"{parts.scheme}://{parts.netloc}"
        pathname = parts.path or "/"

        token: str | None = None
        if isinstance(auth, str):
            token = auth
        elif auth is not None:
            token = await cls.get_token(
                auth, origin=origin, pathname=pathname, http_client=http_client, timeout=timeout
            )

        return cls(
            origin,
            pathname,
            token=token,
            http_client=http_client,
            timeout=timeout,
            **options,
        )

    @classmethod
    async def from_settings(
        cls,
        config: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        **options: Any,
    ) -> "StrapiClient":
        """Create a client from Settings (STRAPI__* environment variables)."""
        strapi = (config or default_settings).strapi

        auth: Credentials | str | None = strapi.api_token
        if auth is None and strapi.identifier and strapi.password:
            auth = Credentials(identifier=strapi.identifier, password=strapi.password)

        options.setdefault("page_size", strapi.page_size)
        return await cls.create(
            strapi.url,
            auth=auth,
            http_client=http_client,
            timeout=strapi.timeout,
            **options,
        )

    # =========================================================================
    # AUTH
    # =========================================================================

    @staticmethod
    async def get_token(
        credentials: Credentials | Mapping[str, str],
        *,
        origin: str,
        pathname: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> str:
        """
        Exchange credentials for a JWT via POST {pathname}/auth/local.

        Raises:
            StrapiError: HTTP on non-success status, VALIDATION when the body has no string token
        """
        try:
            if not isinstance(credentials, Credentials):
                credentials = Credentials.model_validate(dict(credentials))

            url = build_url(origin, join_path(pathname, "auth/local"))
            logger.info(f"Requesting token for '{credentials.identifier}' from {url}")

            response = await _send(
                "POST",
                url,
                headers=DEFAULT_HEADERS,
                json={"identifier": credentials.identifier, "password": credentials.password},
                http_client=http_client,
                timeout=timeout,
            )
            if not response.is_success:
                raise http_error(response, __name__)

            return _TokenBody.model_validate(response.json()).token
        except Exception as e:
            raise ensure_strapi_error(e, __name__) from e

    # =========================================================================
    # REQUEST HELPERS
    # =========================================================================

    def _request_headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        merged = dict(self.headers)
        if self.token:
            merged["Authorization"] = f"Bearer {self.token}"
        merged.update(headers or {})
        return merged

    def _request_params(
        self,
        params: Mapping[str, Any] | None,
        schema: Schema | None,
        populate: Any,
    ) -> dict[str, Any]:
        merged = {**self.params, **(params or {})}
        if schema is not None:
            if populate:
                logger.warning(
                    "Both 'schema' and 'populate' were provided, the 'populate' parameter will be ignored"
                )
            merged["populate"] = populate_from_schema(schema)
        elif populate is not None:
            merged["populate"] = populate
        return merged

    async def _get(
        self, plural_id: str, params: Mapping[str, Any], headers: Mapping[str, str] | None
    ) -> Envelope:
        url = build_url(self.origin, join_path(self.pathname, plural_id), params)
        logger.info(f"GET {url}")
        response = await _send(
            "GET",
            url,
            headers=self._request_headers(headers),
            http_client=self._http_client,
            timeout=self.timeout,
        )
        return _read_envelope(response)

    def _report_invalid(self, diagnostic: InvalidEntry) -> None:
        if self._on_invalid_entry is not None:
            self._on_invalid_entry(diagnostic)

    # =========================================================================
    # ENTITIES
    # =========================================================================

    async def get_single(
        self,
        plural_id: str,
        *,
        schema: Schema | None = None,
        populate: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> SingleResponse:
        """
        Fetch one entity (single type or `plural_id/documentId`).

        Args:
            plural_id: API path under the base path (e.g. "homepage", "articles/abc123")
            schema: Declared fields; drives populate and validation
            populate: Explicit populate directive (ignored when schema is given)
            params: Extra query params
            headers: Extra headers

        Returns:
            SingleResponse; data is None when it failed schema validation

        Raises:
            StrapiError: HTTP on non-success status, NOT_FOUND when data is missing
        """
        try:
            request_params = self._request_params(params, schema, populate)
            envelope = await self._get(plural_id, request_params, headers)

            if envelope.data is None:
                raise not_found_error(__name__)

            if schema is None:
                return SingleResponse(data=envelope.data, meta=envelope.meta)

            result = EntityValidator(schema).safe_parse(envelope.data)
            if not result.ok:
                logger.warning(
                    f"Single entity parsing error for '{plural_id}': {len(result.errors)} error(s)"
                )
                for error in result.errors:
                    logger.warning(f"  {'.'.join(map(str, error['loc']))}: {error['msg']}")
                self._report_invalid(
                    InvalidEntry(plural_id=plural_id, entry=envelope.data, errors=result.errors)
                )
                return SingleResponse(data=None, meta=envelope.meta)

            return SingleResponse(data=result.data, meta=envelope.meta)
        except Exception as e:
            raise ensure_strapi_error(e, __name__) from e

    async def get_collection(
        self,
        plural_id: str,
        *,
        schema: Schema | None = None,
        populate: Any = None,
        pagination: PaginationArg = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> CollectionResponse:
        """
        Fetch a collection, one page or every page.

        Args:
            plural_id: Collection API id (e.g. "articles")
            schema: Declared fields; drives populate and per-entry validation
            populate: Explicit populate directive (ignored when schema is given)
            pagination: None for page 1, a Pagination/{"page", "pageSize"} for exactly
                that page, False to walk every page in sequence
            params: Extra query params
            headers: Extra headers

        Returns:
            CollectionResponse with entries in server order (invalid entries dropped)

        Raises:
            StrapiError: HTTP on any non-success page
        """
        try:
            request_params = self._request_params(params, schema, populate)
            explicit = _resolve_pagination(pagination)

            entries: list[Any] = []
            page = 1
            while True:
                page_params = {"page": page, "pageSize": self.page_size}
                if explicit is not None:
                    page_params.update(explicit.to_params())
                request_params["pagination"] = page_params

                envelope = await self._get(plural_id, request_params, headers)
                data = envelope.data if isinstance(envelope.data, list) else []
                entries.extend(data)
                meta = envelope.meta

                if explicit is not None:
                    break

                pagination_meta = meta.get("pagination") if isinstance(meta, dict) else None
                info = PageInfo.model_validate(pagination_meta or {})
                if info.page >= info.page_count:
                    break
                page = info.page + 1

            logger.info(f"Fetched {len(entries)} '{plural_id}' entries")

            if schema is None:
                return CollectionResponse(data=entries, meta=meta)

            validator = EntityValidator(schema)
            parsed: list[Any] = []
            for index, entry in enumerate(entries):
                result = validator.safe_parse(entry)
                if result.ok:
                    parsed.append(result.data)
                    continue
                entry_id = entry.get("id") if isinstance(entry, dict) else None
                logger.warning(
                    f"Collection parsing error on '{plural_id}' entry #{index} (id={entry_id}): "
                    f"{len(result.errors)} error(s), entry dropped"
                )
                self._report_invalid(
                    InvalidEntry(plural_id=plural_id, index=index, entry=entry, errors=result.errors)
                )

            return CollectionResponse(data=parsed, meta=meta)
        except Exception as e:
            raise ensure_strapi_error(e, __name__) from e
