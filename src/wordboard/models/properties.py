"""Typed views over Notion page properties.

Notion tags every property value with its type (``{"type": "select",
"select": {...}}``). Each tag we care about parses into its own dataclass;
anything else becomes an ``UnknownProperty``. Every variant answers every
accessor: a variant that does not carry a kind of value returns the empty
default for it, so callers never have to probe the raw dicts.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class TextRun:
    """One run of rich text."""
    text: str = ""

    @classmethod
    def parse(cls, raw: Any) -> "TextRun":
        if not isinstance(raw, Mapping):
            return cls()
        plain = raw.get("plain_text")
        if isinstance(plain, str) and plain:
            return cls(plain)
        content = raw.get("text")
        if isinstance(content, Mapping) and isinstance(content.get("content"), str):
            return cls(content["content"])
        return cls()


def _parse_runs(raw: Any) -> List[TextRun]:
    if not isinstance(raw, list):
        return []
    return [TextRun.parse(item) for item in raw]


def _option_name(raw: Any) -> str:
    if isinstance(raw, Mapping) and isinstance(raw.get("name"), str):
        return raw["name"]
    return ""


@dataclass(frozen=True)
class Property:
    """Base property; every accessor returns its empty default."""
    type: str = "unknown"

    def plain_text(self) -> str:
        """All text runs joined."""
        return ""

    def first_text(self) -> str:
        """Text of the first run only."""
        return ""

    def option_names(self) -> List[str]:
        return []

    def number_value(self) -> Optional[float]:
        return None

    def flag(self) -> bool:
        return False

    def date_start(self) -> Optional[str]:
        return None

    def timestamp(self) -> str:
        return ""


@dataclass(frozen=True)
class UnknownProperty(Property):
    """A property of a type the dashboard does not read."""


@dataclass(frozen=True)
class _TextProperty(Property):
    runs: List[TextRun] = field(default_factory=list)

    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)

    def first_text(self) -> str:
        return self.runs[0].text if self.runs else ""


@dataclass(frozen=True)
class TitleProperty(_TextProperty):
    type: str = "title"


@dataclass(frozen=True)
class RichTextProperty(_TextProperty):
    type: str = "rich_text"


@dataclass(frozen=True)
class SelectProperty(Property):
    type: str = "select"
    name: str = ""

    def option_names(self) -> List[str]:
        return [self.name] if self.name else []


@dataclass(frozen=True)
class MultiSelectProperty(Property):
    type: str = "multi_select"
    names: List[str] = field(default_factory=list)

    def option_names(self) -> List[str]:
        return list(self.names)


@dataclass(frozen=True)
class CheckboxProperty(Property):
    type: str = "checkbox"
    checked: bool = False

    def flag(self) -> bool:
        return self.checked


@dataclass(frozen=True)
class NumberProperty(Property):
    type: str = "number"
    value: Optional[float] = None

    def number_value(self) -> Optional[float]:
        return self.value


@dataclass(frozen=True)
class DateProperty(Property):
    type: str = "date"
    start: Optional[str] = None

    def date_start(self) -> Optional[str]:
        return self.start


@dataclass(frozen=True)
class CreatedTimeProperty(Property):
    type: str = "created_time"
    value: str = ""

    def timestamp(self) -> str:
        return self.value


def parse_property(raw: Any) -> Property:
    """Parse one raw Notion property value. Never raises."""
    if not isinstance(raw, Mapping):
        return UnknownProperty()

    tag = raw.get("type")
    value = raw.get(tag) if isinstance(tag, str) else None

    if tag == "title":
        return TitleProperty(runs=_parse_runs(value))
    if tag == "rich_text":
        return RichTextProperty(runs=_parse_runs(value))
    if tag == "select":
        return SelectProperty(name=_option_name(value))
    if tag == "multi_select":
        names = [_option_name(option) for option in value] if isinstance(value, list) else []
        return MultiSelectProperty(names=[name for name in names if name])
    if tag == "checkbox":
        return CheckboxProperty(checked=value is True)
    if tag == "number":
        # bool is an int subclass but never a Notion number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return NumberProperty(value=value)
        return NumberProperty()
    if tag == "date":
        start = value.get("start") if isinstance(value, Mapping) else None
        return DateProperty(start=start if isinstance(start, str) and start else None)
    if tag == "created_time":
        return CreatedTimeProperty(value=value if isinstance(value, str) else "")

    return UnknownProperty(type=tag if isinstance(tag, str) else "unknown")


def parse_properties(raw: Any) -> Dict[str, Property]:
    """Parse a page's whole property mapping."""
    if not isinstance(raw, Mapping):
        return {}
    return {str(name): parse_property(value) for name, value in raw.items()}
