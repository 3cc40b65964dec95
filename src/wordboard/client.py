"""Client for the dashboard's own JSON API."""
import logging
from typing import Any, Dict, Optional

import httpx

from wordboard.errors import (
    NotFoundError,
    UpstreamError,
    ValidationError,
    WordboardError,
)
from wordboard.models.word import ReviewResult, WordRecord
from wordboard.services.view_model import WordListViewModel

logger = logging.getLogger(__name__)


def _raise_for_envelope(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as e:
        raise UpstreamError(f"Dashboard returned invalid JSON ({response.status_code})") from e

    if isinstance(data, dict) and data.get("success"):
        return data

    message = data.get("error") if isinstance(data, dict) else None
    message = message or f"Request failed with status {response.status_code}"
    if response.status_code == 400:
        raise ValidationError(message)
    if response.status_code == 404:
        raise NotFoundError(message, public_message=message)
    raise UpstreamError(message, status=response.status_code)


class DashboardClient:
    """Loads the word list and records reviews without refetching."""

    def __init__(
        self,
        base_url: str,
        view_model: Optional[WordListViewModel] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """Initialize the client for a running dashboard."""
        self.view_model = view_model or WordListViewModel()
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._http.aclose()

    async def load(self) -> WordListViewModel:
        """Replace the view model's list with a fresh fetch."""
        response = await self._http.get("/words")
        data = _raise_for_envelope(response)
        self.view_model.set_words(WordRecord.from_dict(item) for item in data.get("words") or [])
        logger.info("Loaded %d words", len(self.view_model.words))
        return self.view_model

    async def mark_reviewed(self, word_id: str) -> Optional[ReviewResult]:
        """Record a review and merge it into the local list.

        Returns None without a request when the word is already updating.
        """
        if not self.view_model.begin_update(word_id):
            return None
        try:
            response = await self._http.post("/update-review", json={"identifier": word_id})
            data = _raise_for_envelope(response)
            result = ReviewResult(
                review_count=int(data["reviewCount"]),
                last_review=str(data["lastReviewISO"]),
            )
            self.view_model.apply_review(word_id, result)
            return result
        except WordboardError as e:
            logger.error("Failed to mark %s reviewed: %s", word_id, e)
            raise
        finally:
            self.view_model.end_update(word_id)
