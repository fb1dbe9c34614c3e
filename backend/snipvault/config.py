"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - store_key and SCHEMA_VERSION together identify the persisted layout

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for everything: works out-of-the-box as a local app
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


def async_database_url(url: str) -> str:
    """Plain sqlite:// URLs need the aiosqlite driver for the async engine."""
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    database_url: str = "sqlite+aiosqlite:///./snipvault.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_sqlite_url(cls, v: str) -> str:
        return async_database_url(v) if isinstance(v, str) else v

    database_pool_size: int = 5
    database_max_overflow: int = 5

    store_key: str = "snipvault.snippets"
    store_quota_bytes: int = 5 * 1024 * 1024

    # Write-through when 0; otherwise rapid mutations are batched
    persist_debounce_ms: int = 0

    # Unknown actions raise (development) or are logged and ignored
    strict_actions: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
