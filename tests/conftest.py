"""Pytest configuration and fixtures."""

import asyncio
import itertools
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

import config
from plugins.registry import reset_registry
from transport import Transport

TEST_TOKEN = "test-token"

# Fields the fake API never returns
WRITE_ONLY = {"secret": ("value",)}


class FakeChatBotKitAPI:
    """
    In-process stand-in for the ChatBotKit REST API.

    Serves the create/fetch/update/delete/list routes for every kind under
    /v1, keeps entities in memory, and records every request it receives.
    """

    def __init__(self, token: str = TEST_TOKEN, page_size: int = 2):
        self.token = token
        self.page_size = page_size
        self.base_url = ""
        self.entities: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.requests: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self.delay = 0.0
        self._forced: Optional[Tuple[int, bytes]] = None
        self._ids = itertools.count(1)
        self._clock = itertools.count(1700000000)

    def seed(self, kind: str, **fields) -> str:
        """Insert an entity directly and return its id."""
        identifier = f"{kind}_{next(self._ids)}"
        now = next(self._clock)
        self.entities.setdefault(kind, {})[identifier] = dict(
            fields, id=identifier, createdAt=now, updatedAt=now
        )
        return identifier

    def force_response(self, status: int, body: bytes = b"") -> None:
        """Answer the next request with a fixed status and body."""
        self._forced = (status, body)

    def make_app(self) -> web.Application:
        app = web.Application(middlewares=[self._middleware])
        app.router.add_post("/v1/{kind}/create", self._create)
        app.router.add_get("/v1/{kind}/list", self._list)
        app.router.add_get("/v1/{kind}/{id}/fetch", self._fetch)
        app.router.add_post("/v1/{kind}/{id}/update", self._update)
        app.router.add_post("/v1/{kind}/{id}/delete", self._delete)
        return app

    @web.middleware
    async def _middleware(self, request: web.Request, handler):
        body = await request.json() if request.can_read_body else None
        self.requests.append((request.method, request.path_qs, body))

        if self.delay:
            await asyncio.sleep(self.delay)

        if self._forced is not None:
            status, payload = self._forced
            self._forced = None
            return web.Response(status=status, body=payload)

        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return web.json_response({"error": "Unauthorized"}, status=401)

        return await handler(request)

    def _public(self, kind: str, entity: Dict[str, Any]) -> Dict[str, Any]:
        hidden = WRITE_ONLY.get(kind, ())
        return {k: v for k, v in entity.items() if k not in hidden}

    def _lookup(self, request: web.Request) -> Tuple[str, str, Dict[str, Any]]:
        kind = request.match_info["kind"]
        identifier = request.match_info["id"]
        entity = self.entities.get(kind, {}).get(identifier)
        if entity is None:
            raise web.HTTPNotFound(
                text='{"error": "Not found"}', content_type="application/json"
            )
        return kind, identifier, entity

    async def _create(self, request: web.Request) -> web.Response:
        kind = request.match_info["kind"]
        fields = await request.json()
        identifier = self.seed(kind, **fields)
        return web.json_response(self._public(kind, self.entities[kind][identifier]))

    async def _fetch(self, request: web.Request) -> web.Response:
        kind, _, entity = self._lookup(request)
        return web.json_response(self._public(kind, entity))

    async def _update(self, request: web.Request) -> web.Response:
        kind, identifier, entity = self._lookup(request)
        fields = await request.json()
        updated = dict(
            fields,
            id=identifier,
            createdAt=entity["createdAt"],
            updatedAt=next(self._clock),
        )
        self.entities[kind][identifier] = updated
        return web.json_response(self._public(kind, updated))

    async def _delete(self, request: web.Request) -> web.Response:
        kind, identifier, _ = self._lookup(request)
        del self.entities[kind][identifier]
        return web.json_response({"id": identifier})

    async def _list(self, request: web.Request) -> web.Response:
        kind = request.match_info["kind"]
        entities = list(self.entities.get(kind, {}).values())
        start = int(request.query.get("cursor", "0"))
        end = start + self.page_size

        page = {"items": [self._public(kind, e) for e in entities[start:end]]}
        if end < len(entities):
            page["cursor"] = str(end)
        return web.json_response(page)


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset the global config and plugin registry around each test."""
    config.reset_config()
    reset_registry()
    yield
    config.reset_config()
    reset_registry()


@pytest_asyncio.fixture
async def fake_api():
    """A running fake ChatBotKit API."""
    api = FakeChatBotKitAPI()
    server = TestServer(api.make_app())
    await server.start_server()
    api.base_url = str(server.make_url("/v1"))
    yield api
    await server.close()


@pytest.fixture
def transport(fake_api):
    """A Transport pointed at the fake API."""
    return Transport(token=fake_api.token, base_url=fake_api.base_url, timeout=5.0)


@pytest.fixture
def sample_bot():
    """Sample declared bot record."""
    return {
        "name": "support",
        "description": "Customer support bot",
        "model": "gpt-4o",
        "backstory": "You help customers.",
        "temperature": 0.7,
        "moderation": True,
    }


@pytest.fixture
def sample_secret():
    """Sample declared secret record."""
    return {"name": "openai", "value": "sk-live-do-not-leak"}
