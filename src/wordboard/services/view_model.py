"""In-memory search, filter and sort over the word list."""
import logging
from dataclasses import dataclass, replace
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from wordboard.models.word import ReviewResult, WordRecord

logger = logging.getLogger(__name__)

ASC = "asc"
DESC = "desc"

# Sort fields use the API's key names
DATE_FIELDS = {"createdTime", "lastReview"}
NUMERIC_FIELDS = {"reviewCount"}
SORT_FIELDS = {
    "word": "word",
    "type": "type",
    "description": "description",
    "example": "example",
    "relevance": "relevance",
    "checkbox": "checkbox",
    "createdTime": "created_time",
    "lastReview": "last_review",
    "reviewCount": "review_count",
}

CARD_BREAKPOINT = 768


class Layout(Enum):
    """How the list is presented."""
    CARDS = "cards"  # narrow screens
    TABLE = "table"


def layout_for_width(width: int, breakpoint: int = CARD_BREAKPOINT) -> Layout:
    """Cards below the breakpoint, a table from it upwards."""
    return Layout.CARDS if width < breakpoint else Layout.TABLE


@dataclass(frozen=True)
class ViewState:
    """The controls of the word list."""
    search: str = ""
    type_filter: str = ""
    relevance_filter: str = ""
    sort_field: Optional[str] = None
    sort_dir: str = ASC

    def toggle_sort(self, field: str) -> "ViewState":
        """Same field flips the direction; a new field starts ascending."""
        if field == self.sort_field:
            return replace(self, sort_dir=DESC if self.sort_dir == ASC else ASC)
        return replace(self, sort_field=field, sort_dir=ASC)


def matches(word: WordRecord, state: ViewState) -> bool:
    """Whether a word passes the filters and the search."""
    if state.type_filter and word.type != state.type_filter:
        return False
    if state.relevance_filter and word.relevance != state.relevance_filter:
        return False
    term = state.search.strip().lower()
    if not term:
        return True
    return any(term in text.lower() for text in (word.word, word.description, word.example))


def _parse_timestamp(value: Any) -> float:
    # Unparseable dates sort as the earliest possible value
    if not isinstance(value, str):
        return float("-inf")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return float("-inf")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


def _to_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def sort_key(field: str) -> Callable[[Any], Any]:
    """Key function for the non-null values of a field."""
    if field in DATE_FIELDS:
        return _parse_timestamp
    if field in NUMERIC_FIELDS:
        return _to_number
    return lambda value: str(value).lower()


def _is_null(field: str, value: Any) -> bool:
    # A word without a creation time carries an empty string
    return value is None or (field in DATE_FIELDS and value == "")


def sort_words(words: Iterable[WordRecord], field: Optional[str], direction: str = ASC) -> List[WordRecord]:
    """Stable sort; words without a value come first in either direction."""
    words = list(words)
    attr = SORT_FIELDS.get(field or "")
    if attr is None:
        return words

    nulls = [word for word in words if _is_null(field, getattr(word, attr))]
    values = [word for word in words if not _is_null(field, getattr(word, attr))]
    key = sort_key(field)
    values.sort(key=lambda word: key(getattr(word, attr)), reverse=direction == DESC)
    return nulls + values


def derive(words: Iterable[WordRecord], state: ViewState) -> List[WordRecord]:
    """The visible list for a state. Pure."""
    return sort_words(
        (word for word in words if matches(word, state)),
        state.sort_field,
        state.sort_dir,
    )


class WordListViewModel:
    """The word list as the dashboard shows it."""

    def __init__(self, words: Iterable[WordRecord] = (), state: Optional[ViewState] = None):
        """Initialize the view model with a base list and control state."""
        self.words: List[WordRecord] = list(words)
        self.state = state or ViewState()
        self.updating: Set[str] = set()

    def visible(self) -> List[WordRecord]:
        return derive(self.words, self.state)

    def set_words(self, words: Iterable[WordRecord]) -> None:
        self.words = list(words)

    def set_search(self, search: str) -> None:
        self.state = replace(self.state, search=search)

    def set_type_filter(self, value: str) -> None:
        self.state = replace(self.state, type_filter=value)

    def set_relevance_filter(self, value: str) -> None:
        self.state = replace(self.state, relevance_filter=value)

    def toggle_sort(self, field: str) -> None:
        self.state = self.state.toggle_sort(field)

    def begin_update(self, word_id: str) -> bool:
        """Mark a word as updating. False if it already was."""
        if word_id in self.updating:
            return False
        self.updating.add(word_id)
        return True

    def end_update(self, word_id: str) -> None:
        self.updating.discard(word_id)

    def is_updating(self, word_id: str) -> bool:
        return word_id in self.updating

    def apply_review(self, word_id: str, result: ReviewResult) -> bool:
        """Merge a review result into the local copy. False if the id is unknown."""
        for index, word in enumerate(self.words):
            if word.id == word_id:
                self.words[index] = word.with_review(result.review_count, result.last_review)
                return True
        logger.warning("Review result for unknown word %s", word_id)
        return False

    def stats(self) -> Dict[str, int]:
        """Counts for the dashboard header."""
        total = len(self.words)
        reviewed = sum(1 for word in self.words if word.last_review)
        return {"total": total, "reviewed": reviewed, "unreviewed": total - reviewed}

    def type_options(self) -> List[str]:
        return sorted({word.type for word in self.words if word.type}, key=str.lower)

    def relevance_options(self) -> List[str]:
        return sorted({word.relevance for word in self.words if word.relevance}, key=str.lower)
