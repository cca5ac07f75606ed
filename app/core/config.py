# app/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

DataSource = Literal["sql", "notion"]


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./support_desk.db")
    APP_NAME: str = "Support Desk API"
    APP_DESC: str = "Ticket and feedback tracking for the support team"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # comma separated, "*" when unset
    CORS_ORIGINS: str | None = None

    # Ticket backend
    DATA_SOURCE: DataSource = "sql"
    NOTION_TOKEN: str | None = None
    NOTION_DATABASE_ID: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def is_configured(self, source: DataSource) -> bool:
        if source == "notion":
            return bool(self.NOTION_TOKEN and self.NOTION_DATABASE_ID)
        return bool(self.DATABASE_URL)


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["DataSource", "Settings", "get_settings"]
