"""Read every page of a Notion database."""
import logging
from typing import Any, Dict, List

from wordboard.clients.notion_client import NotionClient

logger = logging.getLogger(__name__)

LAST_EDITED_DESC = [{"timestamp": "last_edited_time", "direction": "descending"}]


async def fetch_all_pages(
    client: NotionClient,
    database_id: str,
    page_size: int = 100,
) -> List[Dict[str, Any]]:
    """Follow the query cursor until Notion reports no more results.

    Pages are requested one after another since each needs the previous
    cursor. Results keep Notion's order, first page first. A failed page
    raises UpstreamError from the client and nothing is returned.
    """
    results: List[Dict[str, Any]] = []
    cursor = None
    batches = 0

    while True:
        response = await client.query_database(
            database_id,
            start_cursor=cursor,
            page_size=page_size,
            sorts=LAST_EDITED_DESC,
        )
        batches += 1
        results.extend(response.get("results") or [])

        if not response.get("has_more"):
            break
        next_cursor = response.get("next_cursor")
        if not next_cursor:
            logger.warning("Notion reported more results without a cursor after %d batches", batches)
            break
        if next_cursor == cursor:
            logger.warning("Notion repeated cursor %s after %d batches", cursor, batches)
            break
        cursor = next_cursor

    logger.debug("Fetched %d records in %d batches", len(results), batches)
    return results
