"""Service for listing the words in the Notion database."""
import logging
from typing import Callable, List, Optional

from wordboard.clients.notion_client import NotionClient
from wordboard.config import Settings, settings as default_settings
from wordboard.models.word import WordRecord
from wordboard.monitoring import words_fetched
from wordboard.services.normalizer import normalize_page
from wordboard.services.pagination import fetch_all_pages

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], NotionClient]


class WordService:
    """Service for listing words. Stateless: every call re-reads Notion."""

    def __init__(self, settings: Optional[Settings] = None, client_factory: Optional[ClientFactory] = None):
        """Initialize the service with settings and a Notion client factory."""
        self.settings = settings or default_settings
        self.client_factory = client_factory or (lambda: NotionClient(self.settings.notion))

    async def list_words(self) -> List[WordRecord]:
        """Fetch and normalize every word in the database."""
        notion = self.settings.notion
        notion.require()

        async with self.client_factory() as client:
            pages = await fetch_all_pages(client, notion.database_id, page_size=notion.page_size)

        words = [normalize_page(page, self.settings.schema) for page in pages]
        words_fetched.observe(len(words))
        logger.info("Listed %d words", len(words))
        return words
