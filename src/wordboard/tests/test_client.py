"""Tests for the dashboard API client."""
import httpx
import pytest

from wordboard.app import create_app
from wordboard.client import DashboardClient
from wordboard.errors import NotFoundError, UpstreamError, ValidationError
from wordboard.services.view_model import ViewState, WordListViewModel


@pytest.fixture
def transport(settings, fake_notion) -> httpx.ASGITransport:
    """Transport into an app backed by the fake Notion."""
    return httpx.ASGITransport(app=create_app(settings, fake_notion.client_factory(settings)))


@pytest.mark.asyncio
async def test_load_and_review_without_refetch(transport, fake_notion):
    fake_notion.add_page(word="pithy", page_id="p1")
    fake_notion.add_page(word="prolix", page_id="p2", review_count=5, last_review="2024-01-01")

    async with DashboardClient("http://dashboard", transport=transport) as client:
        view = await client.load()
        assert [word.id for word in view.words] == ["p1", "p2"]
        queries_before = len(fake_notion.requests_to("POST", "/query"))

        result = await client.mark_reviewed("p1")

    assert result.review_count == 1
    merged = {word.id: word for word in view.words}
    assert merged["p1"].review_count == 1
    assert merged["p1"].last_review == result.last_review
    assert merged["p2"].review_count == 5
    assert len(fake_notion.requests_to("POST", "/query")) == queries_before
    assert not view.is_updating("p1")


@pytest.mark.asyncio
async def test_review_skipped_while_updating(transport, fake_notion):
    fake_notion.add_page(page_id="p1")
    view = WordListViewModel()
    view.begin_update("p1")

    async with DashboardClient("http://dashboard", view_model=view, transport=transport) as client:
        assert await client.mark_reviewed("p1") is None

    assert fake_notion.requests == []
    assert view.is_updating("p1")


@pytest.mark.asyncio
async def test_failed_review_clears_updating(transport, fake_notion):
    fake_notion.add_page(page_id="p1")
    fake_notion.fail_when = lambda request: request.method == "PATCH"

    async with DashboardClient("http://dashboard", transport=transport) as client:
        await client.load()
        with pytest.raises(UpstreamError):
            await client.mark_reviewed("p1")
        assert not client.view_model.is_updating("p1")
        assert client.view_model.words[0].review_count == 0


@pytest.mark.asyncio
async def test_error_envelopes_map_to_errors(transport):
    async with DashboardClient("http://dashboard", transport=transport) as client:
        with pytest.raises(ValidationError):
            await client.mark_reviewed("   ")

    def not_found(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"success": False, "error": "Word not found"})

    async with DashboardClient("http://dashboard", transport=httpx.MockTransport(not_found)) as client:
        with pytest.raises(NotFoundError):
            await client.mark_reviewed("p1")


@pytest.mark.asyncio
async def test_loaded_view_keeps_controls(transport, fake_notion):
    fake_notion.add_page(word="alpha", page_id="a", Type={"type": "select", "select": {"name": "Noun"}})
    fake_notion.add_page(word="beta", page_id="b", Type={"type": "select", "select": {"name": "Verb"}})
    view = WordListViewModel(state=ViewState(type_filter="Verb"))

    async with DashboardClient("http://dashboard", view_model=view, transport=transport) as client:
        await client.load()

    assert [word.id for word in view.visible()] == ["b"]
