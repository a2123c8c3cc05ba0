"""
Error model.

Every failure that leaves the client is a StrapiError carrying a numeric
code, a message, an ErrorKind and the module that raised it. Foreign
exceptions (httpx, pydantic, anything unexpected) are normalized with
ensure_strapi_error() so callers only ever catch one type.
"""

from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError


class ErrorKind(str, Enum):
    """Category of a StrapiError."""

    HTTP = "http"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SCHEMA = "schema"
    UNEXPECTED = "unexpected"


class StrapiError(Exception):
    """
    Normalized client error.

    Attributes:
        code: HTTP status or HTTP-like code (404 not found, 422 validation, 500 unexpected)
        message: Human readable message (status text for HTTP failures)
        kind: ErrorKind category
        source: Module that raised the error
        details: Optional structured details (validation errors, response body)
    """

    def __init__(
        self,
        code: int,
        message: str,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        source: str = __name__,
        details: Any = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.kind = kind
        self.source = source
        self.details = details

    def __repr__(self) -> str:
        return (
            f"StrapiError(code={self.code}, kind={self.kind.value}, "
            f"message={self.message!r}, source={self.source!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "kind": self.kind.value,
            "source": self.source,
        }


def http_error(response: httpx.Response, source: str) -> StrapiError:
    """Build the HTTP error for a non-success response."""
    return StrapiError(
        code=response.status_code,
        message=response.reason_phrase or f"HTTP {response.status_code}",
        kind=ErrorKind.HTTP,
        source=source,
    )


def not_found_error(source: str) -> StrapiError:
    return StrapiError(code=404, message="Not found", kind=ErrorKind.NOT_FOUND, source=source)


def ensure_strapi_error(exception: BaseException, source: str = __name__) -> StrapiError:
    """
    Normalize any exception into a StrapiError.

    StrapiErrors pass through untouched. pydantic ValidationErrors become
    VALIDATION (422), httpx errors become HTTP (the response status when one
    exists, 503 otherwise) and everything else becomes UNEXPECTED (500).
    """
    if isinstance(exception, StrapiError):
        return exception

    if isinstance(exception, ValidationError):
        error = StrapiError(
            code=422,
            message=f"Invalid response body: {exception.error_count()} validation error(s)",
            kind=ErrorKind.VALIDATION,
            source=source,
            details=exception.errors(include_url=False),
        )
    elif isinstance(exception, httpx.HTTPStatusError):
        error = http_error(exception.response, source)
    elif isinstance(exception, httpx.HTTPError):
        error = StrapiError(
            code=503,
            message=str(exception) or type(exception).__name__,
            kind=ErrorKind.HTTP,
            source=source,
        )
    else:
        error = StrapiError(
            code=500,
            message=str(exception) or type(exception).__name__,
            kind=ErrorKind.UNEXPECTED,
            source=source,
        )

    error.__cause__ = exception
    return error
