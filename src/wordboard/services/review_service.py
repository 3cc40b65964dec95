"""Service for marking words as reviewed."""
import logging
from datetime import datetime, UTC
from typing import Any, Dict, Optional, Tuple

from wordboard.clients.notion_client import NotionClient
from wordboard.config import Settings, settings as default_settings
from wordboard.errors import NotFoundError, UpstreamError, ValidationError
from wordboard.models.properties import UnknownProperty, parse_properties
from wordboard.models.word import ReviewResult
from wordboard.monitoring import reviews
from wordboard.services.normalizer import review_count
from wordboard.services.word_service import ClientFactory

logger = logging.getLogger(__name__)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2024-01-01T08:30:00.000Z."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ReviewService:
    """Service for recording reviews in Notion."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None,
        clock=None,
    ):
        """Initialize the service with settings, a Notion client factory and a clock."""
        self.settings = settings or default_settings
        self.client_factory = client_factory or (lambda: NotionClient(self.settings.notion))
        self.clock = clock or (lambda: datetime.now(UTC))

    async def mark_reviewed(
        self,
        identifier: Optional[str] = None,
        name: Optional[str] = None,
    ) -> ReviewResult:
        """Increment a word's review count and stamp its last review time.

        The word is found by page id when one is given, otherwise by exact
        title match on ``name``.

        Not idempotent: every call adds one. A client that retries after a
        success it never saw acknowledged counts the review twice.
        """
        identifier = (identifier or "").strip()
        name = (name or "").strip()
        if not identifier and not name:
            raise ValidationError("Word identifier or name is required")

        notion = self.settings.notion
        notion.require()
        schema = self.settings.schema

        async with self.client_factory() as client:
            if identifier:
                page = await client.retrieve_page(identifier)
                page_id = identifier
            else:
                page_id, page = await self._find_by_name(client, name)

            props = parse_properties(page.get("properties"))
            current = review_count(props.get(schema.review_count, UnknownProperty()))
            result = ReviewResult(review_count=current + 1, last_review=utc_timestamp(self.clock()))

            await client.update_page(page_id, {
                schema.review_count: {"number": result.review_count},
                schema.last_review: {"date": {"start": result.last_review}},
            })

        reviews.inc()
        logger.info("Marked %s reviewed (count %d)", page_id, result.review_count)
        return result

    async def title_property(self, client: NotionClient) -> str:
        """Name of the database's title property, or the configured default."""
        default = self.settings.schema.default_title
        try:
            database = await client.retrieve_database(self.settings.notion.database_id)
        except UpstreamError as e:
            logger.warning("Could not read database schema, using %r as title: %s", default, e)
            return default

        properties = database.get("properties")
        if isinstance(properties, dict):
            for prop_name, prop in properties.items():
                if isinstance(prop, dict) and prop.get("type") == "title":
                    return prop_name
        logger.warning("Database schema has no title property, using %r", default)
        return default

    async def _find_by_name(self, client: NotionClient, name: str) -> Tuple[str, Dict[str, Any]]:
        title = await self.title_property(client)
        response = await client.query_database(
            self.settings.notion.database_id,
            page_size=1,
            filter={"property": title, "title": {"equals": name}},
        )
        results = response.get("results") or []
        if not results or not isinstance(results[0], dict) or not results[0].get("id"):
            raise NotFoundError(f"No word titled {name!r}")
        page = results[0]
        return str(page["id"]), page
