"""Flatten Notion pages into word records."""
import math
from typing import Any, Dict, Mapping, Optional

from wordboard.config import SchemaSettings
from wordboard.models.properties import Property, UnknownProperty, parse_properties
from wordboard.models.word import WordRecord

_MISSING = UnknownProperty()


def extract_title(properties: Dict[str, Property]) -> str:
    """Text of the first title-typed property, whatever it is called."""
    for prop in properties.values():
        if prop.type == "title":
            return prop.plain_text().strip()
    return ""


def extract_type(prop: Property) -> str:
    """Select option name, else multi-select option names joined."""
    if prop.type in ("select", "multi_select"):
        return ", ".join(prop.option_names())
    return ""


def select_name(prop: Property) -> str:
    return prop.option_names()[0] if prop.type == "select" and prop.option_names() else ""


def first_rich_text(prop: Property) -> str:
    """First run of a rich_text property."""
    return prop.first_text() if prop.type == "rich_text" else ""


def review_count(prop: Property) -> int:
    """Numeric review counter, 0 when absent or not a number."""
    value = prop.number_value()
    if value is None or not math.isfinite(value):
        return 0
    return max(int(value), 0)


def normalize_page(page: Any, schema: Optional[SchemaSettings] = None) -> WordRecord:
    """Build a WordRecord from one raw Notion page. Never raises."""
    schema = schema or SchemaSettings()
    if not isinstance(page, Mapping):
        page = {}
    props = parse_properties(page.get("properties"))

    def get(name: str) -> Property:
        return props.get(name, _MISSING)

    created_time = page.get("created_time")
    if not isinstance(created_time, str) or not created_time:
        created_time = get(schema.created_time).timestamp()

    return WordRecord(
        id=str(page.get("id") or ""),
        word=extract_title(props),
        type=extract_type(get(schema.type)),
        description=first_rich_text(get(schema.description)),
        example=first_rich_text(get(schema.example)),
        relevance=select_name(get(schema.relevance)),
        checkbox=get(schema.checkbox).flag(),
        created_time=created_time,
        last_review=get(schema.last_review).date_start(),
        review_count=review_count(get(schema.review_count)),
    )
