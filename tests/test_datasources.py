"""Unit tests for data source plugins - fetch_one and fetch_all."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from entities import Bot, ListPage, Secret
from errors import DecodeError, NotFoundError
from plugins.datasources import BlueprintDataSource, BotDataSource, SecretDataSource


@pytest.fixture
def bot_source(transport):
    source = BotDataSource()
    source.configure(transport)
    return source


@pytest.mark.asyncio
class TestFetch:
    """Lookups against the fake API."""

    async def test_fetch_one(self, fake_api, bot_source):
        identifier = fake_api.seed("bot", name="support", temperature=0.5)
        record = await bot_source.fetch_one(identifier)
        assert record["id"] == identifier
        assert record["name"] == "support"
        assert record["temperature"] == 0.5

    async def test_fetch_one_missing(self, bot_source):
        with pytest.raises(NotFoundError) as exc_info:
            await bot_source.fetch_one("bot_missing")
        assert exc_info.value.operation == "fetch_one"

    async def test_fetch_all_follows_cursor(self, fake_api, bot_source):
        ids = [fake_api.seed("bot", name=f"bot-{i}") for i in range(5)]

        records = await bot_source.fetch_all()

        assert [r["id"] for r in records] == ids
        list_paths = [path for _, path, _ in fake_api.requests]
        assert list_paths == [
            "/v1/bot/list",
            "/v1/bot/list?cursor=2",
            "/v1/bot/list?cursor=4",
        ]

    async def test_fetch_all_empty(self, fake_api, bot_source):
        assert await bot_source.fetch_all() == []
        assert len(fake_api.requests) == 1

    async def test_secret_value_never_returned(self, fake_api, transport):
        fake_api.seed("secret", name="key", value="hunter2")
        source = SecretDataSource()
        source.configure(transport)

        records = await source.fetch_all()
        assert "value" not in records[0]
        assert "value" not in await source.fetch_one(records[0]["id"])


@pytest.mark.asyncio
class TestPagination:
    """Pagination edge cases with a mocked client."""

    async def test_repeated_cursor_raises(self):
        source = BotDataSource()
        source._client = MagicMock()
        source._client.list = AsyncMock(
            return_value=ListPage(items=[Bot(id="b1")], cursor="same")
        )

        with pytest.raises(DecodeError, match="did not advance"):
            await source.fetch_all()
        assert source._client.list.await_count == 2

    async def test_page_failure_propagates(self):
        source = BotDataSource()
        source._client = MagicMock()
        source._client.list = AsyncMock(
            side_effect=[
                ListPage(items=[Bot(id="b1")], cursor="c1"),
                DecodeError("bad page"),
            ]
        )

        with pytest.raises(DecodeError) as exc_info:
            await source.fetch_all()
        assert exc_info.value.operation == "fetch_all"

    async def test_secret_value_stripped_when_upstream_returns_it(self):
        source = SecretDataSource()
        source._client = MagicMock()
        source._client.list = AsyncMock(
            return_value=ListPage(items=[Secret(id="s1", name="key", value="hunter2")])
        )
        source._client.get = AsyncMock(
            return_value=Secret(id="s1", name="key", value="hunter2")
        )

        records = await source.fetch_all()
        assert records == [
            {"id": "s1", "created_at": 0, "updated_at": 0, "name": "key", "meta": {}}
        ]
        assert "value" not in await source.fetch_one("s1")


@pytest.mark.asyncio
class TestBlueprintLookup:
    """Blueprint lookups against the fake API."""

    async def test_fetch_all_blueprints(self, fake_api, transport):
        identifier = fake_api.seed("blueprint", name="shop", visibility="private")
        source = BlueprintDataSource()
        source.configure(transport)

        records = await source.fetch_all()
        assert [r["id"] for r in records] == [identifier]
        assert records[0]["visibility"] == "private"
        assert (await source.fetch_one(identifier))["name"] == "shop"
