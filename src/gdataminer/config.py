"""Miner settings loaded from the environment (prefix GDATAMINER_)."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gdataminer.auth import READONLY_SCOPES


class MinerSettings(BaseSettings):
    """
    Configuration for a miner process.

    Attributes:
        client_secrets_file: OAuth client secrets JSON.
        token_file: OAuth token JSON (created/refreshed as needed).
        account_id: Online account id; derives the datasource scope.
        collections: Collection kinds to crawl, comma-separated in the env.
        db_path: SQLite store path; empty keeps the store in memory.
        max_workers: Collections crawled concurrently.
        max_retries: Transport retries for 429/5xx/network failures.
        initial_retry_delay_sec: First backoff delay, doubled per retry.
        page_size: Items requested per page.
        supports_all_drives: Include shared drives in the Drive listing.
        log_level: Logging level for setup_logging.
    """

    client_secrets_file: str = Field(default="")
    token_file: str = Field(default="")
    account_id: str = Field(default="default")
    collections: str = Field(default="documents,photos")
    db_path: str = Field(default="")

    max_workers: int = Field(default=1, ge=1, le=4)
    max_retries: int = Field(default=3, ge=0, le=10)
    initial_retry_delay_sec: float = Field(default=1.0, gt=0, le=60)
    page_size: int = Field(default=100, ge=1, le=1000)
    supports_all_drives: bool = Field(default=True)

    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="GDATAMINER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("client_secrets_file", "token_file", "account_id", "db_path", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("collections")
    @classmethod
    def known_collections(cls, v: str) -> str:
        names = [c.strip() for c in v.split(",") if c.strip()]
        if not names:
            raise ValueError("at least one collection is required")
        unknown = [c for c in names if c not in READONLY_SCOPES]
        if unknown:
            raise ValueError(f"unknown collections: {', '.join(unknown)}")
        return ",".join(names)

    @property
    def collection_list(self) -> list[str]:
        return self.collections.split(",")

    def is_auth_configured(self) -> bool:
        return bool(self.client_secrets_file and self.token_file)


@lru_cache
def get_settings() -> MinerSettings:
    """Get cached settings instance."""
    return MinerSettings()


def refresh_settings() -> MinerSettings:
    """Clear the settings cache and reload from the environment."""
    get_settings.cache_clear()
    return get_settings()
