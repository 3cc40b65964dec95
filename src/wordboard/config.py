"""Configuration settings for the dashboard."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from wordboard.errors import ConfigurationError

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_API_VERSION = "2022-06-28"
MAX_PAGE_SIZE = 100  # Notion rejects larger pages


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


@dataclass
class NotionSettings:
    """Notion API configuration settings."""
    token: str = field(default_factory=lambda: _env("NOTION_TOKEN"))
    database_id: str = field(default_factory=lambda: _env("NOTION_DB_ID"))
    base_url: str = field(default_factory=lambda: _env("NOTION_BASE_URL", NOTION_API_URL))
    api_version: str = field(default_factory=lambda: _env("NOTION_VERSION", NOTION_API_VERSION))
    timeout: float = field(default_factory=lambda: float(_env("NOTION_TIMEOUT", "10")))
    page_size: int = field(default_factory=lambda: int(_env("NOTION_PAGE_SIZE", str(MAX_PAGE_SIZE))))

    def missing(self) -> List[str]:
        """Names of the required variables that are not set."""
        missing = []
        if not self.token:
            missing.append("NOTION_TOKEN")
        if not self.database_id:
            missing.append("NOTION_DB_ID")
        return missing

    def require(self) -> None:
        """Raise ConfigurationError if the credential or database id is missing."""
        missing = self.missing()
        if missing:
            raise ConfigurationError(f"Missing {' or '.join(missing)}")


@dataclass
class SchemaSettings:
    """Names of the Notion properties the dashboard reads and writes."""
    type: str = field(default_factory=lambda: _env("NOTION_PROP_TYPE", "Type"))
    description: str = field(default_factory=lambda: _env("NOTION_PROP_DESCRIPTION", "Description"))
    example: str = field(default_factory=lambda: _env("NOTION_PROP_EXAMPLE", "Example"))
    relevance: str = field(default_factory=lambda: _env("NOTION_PROP_RELEVANCE", "Relevance"))
    checkbox: str = field(default_factory=lambda: _env("NOTION_PROP_CHECKBOX", "Checkbox"))
    created_time: str = field(default_factory=lambda: _env("NOTION_PROP_CREATED_TIME", "Created time"))
    last_review: str = field(default_factory=lambda: _env("NOTION_PROP_LAST_REVIEW", "LastReview"))
    review_count: str = field(default_factory=lambda: _env("NOTION_PROP_REVIEW_COUNT", "ReviewCount"))
    # Only used when the database schema cannot be read
    default_title: str = field(default_factory=lambda: _env("NOTION_PROP_TITLE", "Name"))


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = field(default_factory=lambda: os.getenv("LOG_DIR", None))
    rotation: str = field(default_factory=lambda: _env("LOG_ROTATION", "midnight"))
    interval: int = field(default_factory=lambda: int(_env("LOG_INTERVAL", "1")))
    backup_count: int = field(default_factory=lambda: int(_env("LOG_BACKUP_COUNT", "7")))


@dataclass
class ServerSettings:
    """HTTP server settings."""
    host: str = field(default_factory=lambda: _env("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(_env("PORT", "8000")))
    reload: bool = field(default_factory=lambda: _env("RELOAD", "false").lower() == "true")
    metrics_enabled: bool = field(default_factory=lambda: _env("METRICS_ENABLED", "true").lower() == "true")


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    notion: NotionSettings = field(default_factory=NotionSettings)
    schema: SchemaSettings = field(default_factory=SchemaSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    server: ServerSettings = field(default_factory=ServerSettings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid.

        Missing Notion credentials are not checked here: they are reported
        per request so the server can still start and answer with an error.
        """
        if self.notion.timeout <= 0:
            raise ValueError("NOTION_TIMEOUT must be positive")

        if self.notion.page_size < 1 or self.notion.page_size > MAX_PAGE_SIZE:
            raise ValueError(f"NOTION_PAGE_SIZE must be between 1 and {MAX_PAGE_SIZE}")

        if self.server.port < 1 or self.server.port > 65535:
            raise ValueError("PORT must be between 1 and 65535")


# Create global settings instance
settings = Settings()
settings.validate()
