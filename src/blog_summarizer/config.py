"""Configuration helpers for the blog summarizer."""

import sys

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str | None = Field(
        None,
        alias="DATABASE_URL",
        description="Postgres DSN for the summaries table; persistence is skipped when unset.",
    )
    summaries_table: str = Field("summaries", alias="SUMMARIES_TABLE")
    mongodb_uri: str | None = Field(
        None,
        alias="MONGODB_URI",
        description="MongoDB URI for the full-text archive; archiving is skipped when unset.",
    )
    mongodb_database: str = Field("blog_summarizer", alias="MONGODB_DATABASE")
    mongodb_collection: str = Field("full_texts", alias="MONGODB_COLLECTION")
    dictionary_path: str | None = Field(
        None,
        alias="DICTIONARY_PATH",
        description="Optional override for the word list; defaults to the packaged Urdu list.",
    )
    fetch_timeout_seconds: float = Field(
        10.0,
        alias="FETCH_TIMEOUT_SECONDS",
        description="Hard deadline for downloading a page, in seconds.",
    )
    min_selector_chars: int = Field(
        200,
        alias="MIN_SELECTOR_CHARS",
        description="Text length a selector tier must exceed to be accepted.",
    )
    min_content_chars: int = Field(
        100,
        alias="MIN_CONTENT_CHARS",
        description="Shortest article body accepted after cleanup.",
    )
    max_content_chars: int = Field(
        10000,
        alias="MAX_CONTENT_CHARS",
        description="Longer bodies are truncated and marked with '...'.",
    )
    min_paragraph_chars: int = Field(
        50,
        alias="MIN_PARAGRAPH_CHARS",
        description="Paragraphs at or below this length are ignored by the paragraph fallback.",
    )
    content_selectors: list[str] | None = Field(
        None,
        alias="CONTENT_SELECTORS",
        description=(
            "JSON list of CSS selectors tried in order before the paragraph fallback. "
            "Replaces the built-in list when set."
        ),
    )
    cors_allow_origins: list[str] = Field(
        default_factory=list,
        alias="CORS_ALLOW_ORIGINS",
        description="JSON list of origins allowed to call the API; empty allows any origin.",
    )
    cors_allow_credentials: bool = Field(
        False,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Send cookies cross-origin; ignored while any origin is allowed.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL")


def get_settings() -> Settings:
    """Return a settings instance built from the current environment."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the configured level."""
    resolved = (level or get_settings().log_level).upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=resolved,
        format="{time:HH:mm:ss} | {level: <8} | {name}:{line} - {message}",
    )
