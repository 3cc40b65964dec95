"""Tests for the pagination loop."""
import json

import httpx
import pytest

from wordboard.clients.notion_client import NotionClient
from wordboard.errors import UpstreamError
from wordboard.services.pagination import fetch_all_pages


@pytest.mark.asyncio
async def test_three_pages_in_order(settings, fake_notion):
    for index in range(237):
        fake_notion.add_page(word=f"word-{index}", page_id=f"id-{index:03d}")

    async with fake_notion.client_factory(settings)() as client:
        pages = await fetch_all_pages(client, "db-test", page_size=100)

    assert len(pages) == 237
    assert [page["id"] for page in pages] == [f"id-{index:03d}" for index in range(237)]

    queries = fake_notion.requests_to("POST", "/query")
    assert len(queries) == 3
    bodies = [json.loads(request.content) for request in queries]
    assert [body.get("start_cursor") for body in bodies] == [None, "100", "200"]
    for body in bodies:
        assert body["page_size"] == 100
        assert body["sorts"] == [{"timestamp": "last_edited_time", "direction": "descending"}]


@pytest.mark.asyncio
async def test_empty_database(settings, fake_notion):
    async with fake_notion.client_factory(settings)() as client:
        assert await fetch_all_pages(client, "db-test") == []


@pytest.mark.asyncio
async def test_failure_mid_pagination_returns_nothing(settings, fake_notion):
    for _ in range(150):
        fake_notion.add_page()
    fake_notion.fail_when = lambda request: b'"start_cursor"' in request.content

    async with fake_notion.client_factory(settings)() as client:
        with pytest.raises(UpstreamError):
            await fetch_all_pages(client, "db-test")

    assert len(fake_notion.requests_to("POST", "/query")) == 2


@pytest.mark.asyncio
async def test_stops_when_cursor_missing(settings):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"results": [{"id": "a"}], "has_more": True, "next_cursor": None})

    async with NotionClient(settings.notion, transport=httpx.MockTransport(handler)) as client:
        pages = await fetch_all_pages(client, "db-test")

    assert pages == [{"id": "a"}]
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_stops_when_cursor_repeats(settings):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(json.loads(request.content))
        return httpx.Response(200, json={"results": [{"id": str(len(calls))}], "has_more": True, "next_cursor": "same"})

    async with NotionClient(settings.notion, transport=httpx.MockTransport(handler)) as client:
        pages = await fetch_all_pages(client, "db-test")

    assert pages == [{"id": "1"}, {"id": "2"}]
    assert [body.get("start_cursor") for body in calls] == [None, "same"]
