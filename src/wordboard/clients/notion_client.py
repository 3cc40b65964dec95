"""Async client for the parts of the Notion API the dashboard uses."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from wordboard.config import NotionSettings
from wordboard.errors import UpstreamError
from wordboard.monitoring import upstream_errors, upstream_requests

logger = logging.getLogger(__name__)


class NotionClient:
    """Thin wrapper over the Notion REST API.

    One instance per inbound request; use it as an async context manager so
    the underlying connection pool is closed. Every call is bounded by the
    configured timeout and every failure, timeouts included, is raised as
    UpstreamError.
    """

    def __init__(
        self,
        notion: NotionSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client from Notion settings."""
        self.notion = notion
        self._http = httpx.AsyncClient(
            base_url=notion.base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {notion.token}",
                "Notion-Version": notion.api_version,
                "Content-Type": "application/json",
            },
            timeout=notion.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP connection pool."""
        await self._http.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        upstream_requests.labels(operation=operation).inc()
        try:
            response = await self._http.request(method, path, json=json)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            upstream_errors.labels(operation=operation).inc()
            raise UpstreamError(f"Notion {operation} timed out: {e!r}") from e
        except httpx.HTTPStatusError as e:
            upstream_errors.labels(operation=operation).inc()
            status = e.response.status_code
            logger.debug("Notion %s failed with %s: %s", operation, status, e.response.text)
            raise UpstreamError(f"Notion {operation} returned {status}", status=status) from e
        except httpx.HTTPError as e:
            upstream_errors.labels(operation=operation).inc()
            raise UpstreamError(f"Notion {operation} failed: {e!r}") from e
        except ValueError as e:
            upstream_errors.labels(operation=operation).inc()
            raise UpstreamError(f"Notion {operation} returned invalid JSON") from e

        if not isinstance(data, dict):
            upstream_errors.labels(operation=operation).inc()
            raise UpstreamError(f"Notion {operation} returned an unexpected payload")
        return data

    async def query_database(
        self,
        database_id: str,
        start_cursor: Optional[str] = None,
        page_size: int = 100,
        sorts: Optional[List[Dict[str, Any]]] = None,
        filter: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Query one page of a database."""
        body: Dict[str, Any] = {"page_size": page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor
        if sorts:
            body["sorts"] = sorts
        if filter:
            body["filter"] = filter
        return await self._request("query", "POST", f"/databases/{database_id}/query", json=body)

    async def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        """Get a database, including its property schema."""
        return await self._request("retrieve_database", "GET", f"/databases/{database_id}")

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """Get a page with its current properties."""
        return await self._request("retrieve_page", "GET", f"/pages/{page_id}")

    async def update_page(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite the named properties of a page."""
        return await self._request(
            "update_page", "PATCH", f"/pages/{page_id}", json={"properties": properties}
        )
