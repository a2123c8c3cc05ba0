"""
Shared fixtures: sample schemas, API payloads, a mocked Strapi server and a
recording process runner.
"""

import json
import subprocess
import sys
from collections.abc import Callable, Sequence
from typing import Any

import httpx
import pytest
from loguru import logger

from strapi_schema import component, dynamic, enumeration, media, number, relation, rich_text, text
from strapi_schema.release import ProcessRunner


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore a plain stderr sink after tests that reconfigure loguru (the CLI does)."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")


@pytest.fixture
def article_schema():
    """Schema covering every field kind."""
    return {
        "title": text(required=True),
        "views": number(nullable=True, optional=True),
        "status": enumeration(["draft", "review", "done"]),
        "cover": media.single(),
        "body": rich_text.blocks(),
        "author": relation.has_one({"name": text()}, nullable=True),
        "tags": relation.has_many({"label": text(required=True)}, optional=True),
        "seo": component.single({"metaTitle": text(), "image": media.single()}),
        "links": component.repeatable({"url": text(required=True)}),
        "sections": dynamic(
            {
                "shared.quote": {"quote": text(required=True)},
                "shared.gallery": {"files": component.repeatable({"file": media.single()})},
            },
            optional=True,
        ),
    }


@pytest.fixture
def media_file():
    """Media record as Strapi returns it."""
    return {
        "id": 7,
        "documentId": "m7",
        "name": "cover.png",
        "alternativeText": None,
        "caption": None,
        "width": 800,
        "height": 600,
        "formats": {
            "thumbnail": {
                "name": "thumbnail_cover.png",
                "hash": "thumbnail_cover_abc",
                "ext": ".png",
                "mime": "image/png",
                "path": None,
                "size": 12.5,
                "url": "/uploads/thumbnail_cover_abc.png",
                "width": 208,
                "height": 156,
            }
        },
        "hash": "cover_abc",
        "ext": ".png",
        "mime": "image/png",
        "size": 120.4,
        "url": "/uploads/cover_abc.png",
        "previewUrl": None,
        "provider": "local",
        "provider_metadata": None,
        "createdAt": "2024-05-01T10:00:00.000Z",
        "updatedAt": "2024-05-01T10:00:00.000Z",
    }


@pytest.fixture
def article(media_file):
    """A valid article entity for article_schema."""
    return {
        "id": 1,
        "documentId": "a1",
        "createdAt": "2024-05-01T10:00:00.000Z",
        "updatedAt": "2024-05-02T10:00:00.000Z",
        "publishedAt": None,
        "locale": "en",
        "title": "Hello",
        "views": None,
        "status": "draft",
        "cover": media_file,
        "body": [
            {
                "type": "paragraph",
                "children": [
                    {"type": "text", "text": "Hi ", "bold": True},
                    {"type": "link", "url": "https://strapi.io", "children": [{"type": "text", "text": "there"}]},
                ],
            }
        ],
        "author": {"id": 3, "documentId": "u3", "name": "Ada"},
        "tags": [{"id": 4, "label": "news"}],
        "seo": {"id": 9, "metaTitle": "Hello", "image": None},
        "links": [{"id": 10, "url": "https://example.com"}],
        "sections": [
            {"__component": "shared.quote", "id": 11, "quote": "Be brief"},
            {"__component": "shared.gallery", "id": 12, "files": [{"id": 13, "file": media_file}]},
        ],
    }




class FakeStrapi:
    """
    In-memory Strapi API served through httpx.MockTransport.

    Routes map a path (e.g. "/api/articles") to a handler returning
    (status, body). Every received request is recorded.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], tuple[int, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, status: int = 200, body: Any = None, handler=None):
        self.routes[(method, path)] = handler or (lambda request: (status, body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"data": None, "error": {"status": 404, "name": "NotFoundError"}})
        status, body = handler(request)
        return httpx.Response(status, content=json.dumps(body).encode(), headers={"content-type": "application/json"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    @staticmethod
    def paged(entries: list[dict], page_size: int):
        """Handler serving `entries` in pages according to pagination[page] / pagination[pageSize]."""

        def handler(request: httpx.Request):
            page = int(request.url.params.get("pagination[page]", 1))
            size = int(request.url.params.get("pagination[pageSize]", page_size))
            page_count = max(1, -(-len(entries) // size))
            start = (page - 1) * size
            return 200, {
                "data": entries[start:start + size],
                "meta": {
                    "pagination": {"page": page, "pageSize": size, "pageCount": page_count, "total": len(entries)}
                },
            }

        return handler


@pytest.fixture
def strapi():
    """Fake Strapi server; use strapi.client() as the injected http client."""
    return FakeStrapi()


class FakeRunner(ProcessRunner):
    """
    Records every command and answers from scripted results.

    Results are matched by the longest registered command prefix; unmatched
    commands succeed with empty output.
    """

    def __init__(self):
        super().__init__()
        self.calls: list[list[str]] = []
        self.results: dict[tuple[str, ...], tuple[int, str]] = {}
        self.effects: dict[tuple[str, ...], Callable[[list[str]], None]] = {}

    def script(self, *args: str, returncode: int = 0, stdout: str = "", effect=None):
        self.results[tuple(args)] = (returncode, stdout)
        if effect is not None:
            self.effects[tuple(args)] = effect

    def run(self, args: Sequence[str], *, capture: bool = False) -> subprocess.CompletedProcess:
        args = list(args)
        self.calls.append(args)
        returncode, stdout = 0, ""
        for length in range(len(args), 0, -1):
            if tuple(args[:length]) in self.results:
                returncode, stdout = self.results[tuple(args[:length])]
                effect = self.effects.get(tuple(args[:length]))
                if effect is not None:
                    effect(args)
                break
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="")

    def git_calls(self) -> list[list[str]]:
        return [call[1:] for call in self.calls if call[0] == "git"]


@pytest.fixture
def runner():
    """Recording process runner for the release workflows."""
    return FakeRunner()
