"""Test configuration."""
import json
import os
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Import after environment setup
from wordboard.clients.notion_client import NotionClient
from wordboard.config import NotionSettings, SchemaSettings, ServerSettings, Settings

fake = Faker()

BASE_URL = "https://notion.test/v1"
DATABASE_ID = "db-test"


class FakeNotion:
    """In-memory stand-in for the Notion API behind an httpx.MockTransport."""

    def __init__(self, title_property: str = "Name"):
        self.title_property = title_property
        self.pages: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_when: Optional[Callable[[httpx.Request], bool]] = None
        self.schema_fails = False

    def add_page(
        self,
        word: Optional[str] = None,
        page_id: Optional[str] = None,
        review_count: Optional[float] = None,
        last_review: Optional[str] = None,
        **extra: Any,
    ) -> Dict[str, Any]:
        """Store a page shaped like the vocabulary database."""
        page_id = page_id or fake.uuid4()
        properties: Dict[str, Any] = {
            self.title_property: {
                "type": "title",
                "title": [{"plain_text": word if word is not None else fake.word()}],
            },
            "Description": {"type": "rich_text", "rich_text": [{"plain_text": fake.sentence()}]},
            "LastReview": {"type": "date", "date": {"start": last_review} if last_review else None},
            "ReviewCount": {"type": "number", "number": review_count},
        }
        properties.update(extra)
        page = {
            "object": "page",
            "id": page_id,
            "created_time": "2024-01-01T00:00:00.000Z",
            "properties": properties,
        }
        self.pages[page_id] = page
        return page

    def title_of(self, page: Dict[str, Any]) -> str:
        runs = page["properties"].get(self.title_property, {}).get("title") or []
        return "".join(run.get("plain_text", "") for run in runs)

    def requests_to(self, method: str, suffix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.endswith(suffix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_when and self.fail_when(request):
            return httpx.Response(502, json={"object": "error", "message": "upstream exploded"})

        parts = request.url.path.split("/")[2:]  # drop "", "v1"
        if parts[0] == "databases" and len(parts) == 3 and request.method == "POST":
            return self._query(json.loads(request.content or b"{}"))
        if parts[0] == "databases" and len(parts) == 2 and request.method == "GET":
            if self.schema_fails:
                return httpx.Response(500, json={"object": "error"})
            return httpx.Response(200, json={"object": "database", "properties": {
                "Description": {"type": "rich_text"},
                self.title_property: {"type": "title"},
                "ReviewCount": {"type": "number"},
            }})
        if parts[0] == "pages" and len(parts) == 2:
            page = self.pages.get(parts[1])
            if page is None:
                return httpx.Response(404, json={"object": "error", "code": "object_not_found"})
            if request.method == "PATCH":
                # Notion answers with the type tag on every property value
                properties = json.loads(request.content)["properties"]
                page["properties"].update(
                    {name: {"type": next(iter(value)), **value} for name, value in properties.items()}
                )
            return httpx.Response(200, json=page)
        return httpx.Response(400, json={"object": "error", "code": "invalid_request_url"})

    def _query(self, body: Dict[str, Any]) -> httpx.Response:
        pages = list(self.pages.values())
        title_filter = (body.get("filter") or {}).get("title")
        if title_filter:
            if body["filter"].get("property") != self.title_property:
                return httpx.Response(400, json={"object": "error", "code": "validation_error"})
            pages = [p for p in pages if self.title_of(p) == title_filter["equals"]]

        start = int(body.get("start_cursor") or 0)
        end = start + body.get("page_size", 100)
        has_more = end < len(pages)
        return httpx.Response(200, json={
            "object": "list",
            "results": pages[start:end],
            "has_more": has_more,
            "next_cursor": str(end) if has_more else None,
        })

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client_factory(self, settings: Settings) -> Callable[[], NotionClient]:
        return lambda: NotionClient(settings.notion, transport=self.transport())


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake Notion."""
    return Settings(
        notion=NotionSettings(
            token="secret_test",
            database_id=DATABASE_ID,
            base_url=BASE_URL,
            api_version="2022-06-28",
            timeout=5.0,
            page_size=100,
        ),
        schema=SchemaSettings(),
        server=ServerSettings(host="127.0.0.1", port=8000, reload=False, metrics_enabled=True),
    )


@pytest.fixture
def unconfigured_settings(settings: Settings) -> Settings:
    """Settings with no Notion credential or database id."""
    settings.notion.token = ""
    settings.notion.database_id = ""
    return settings


@pytest.fixture
def fake_notion() -> FakeNotion:
    return FakeNotion()
