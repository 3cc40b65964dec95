"""Flat records the dashboard serves."""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class WordRecord:
    """Normalized view of one Notion page. Rebuilt on every fetch."""
    id: str
    word: str = ""
    type: str = ""
    description: str = ""
    example: str = ""
    relevance: str = ""
    checkbox: bool = False
    created_time: str = ""
    last_review: Optional[str] = None  # None means never reviewed
    review_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape of the API."""
        return {
            "id": self.id,
            "word": self.word,
            "type": self.type,
            "description": self.description,
            "example": self.example,
            "relevance": self.relevance,
            "checkbox": self.checkbox,
            "createdTime": self.created_time,
            "lastReview": self.last_review,
            "reviewCount": self.review_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordRecord":
        """Parse the JSON shape of the API."""
        count = data.get("reviewCount")
        return cls(
            id=str(data["id"]),
            word=data.get("word") or "",
            type=data.get("type") or "",
            description=data.get("description") or "",
            example=data.get("example") or "",
            relevance=data.get("relevance") or "",
            checkbox=bool(data.get("checkbox")),
            created_time=data.get("createdTime") or "",
            last_review=data.get("lastReview") or None,
            review_count=count if isinstance(count, int) and not isinstance(count, bool) else 0,
        )

    def with_review(self, review_count: int, last_review: str) -> "WordRecord":
        """Copy with the two fields a review changes replaced."""
        return replace(self, review_count=review_count, last_review=last_review)


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of marking a word reviewed."""
    review_count: int
    last_review: str

    def to_dict(self) -> Dict[str, Any]:
        return {"reviewCount": self.review_count, "lastReviewISO": self.last_review}
