"""Configuration for the CRM console, loaded from ``CRM_*`` environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CRMSettings(BaseSettings):
    """Settings read once by the composition root."""

    model_config = SettingsConfigDict(
        env_prefix="CRM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Directory Service
    api_base_url: str = Field(
        default="https://user-api.builder-io.workers.dev/api",
        description="Base URL of the Directory Service",
    )
    api_key: Optional[str] = Field(default=None, description="Bearer token, if any")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")

    # List screen
    page_size: int = Field(default=25, gt=0, description="Rows per page")
    sort_by: str = Field(default="name.first", description="Server-side sort key")
    search_debounce_ms: int = Field(
        default=500, ge=0, description="Delay after the last keystroke before searching"
    )

    # Editor
    default_password: Optional[str] = Field(
        default=None,
        description="Password sent when creating a customer; omitted when unset",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


@lru_cache()
def get_settings() -> CRMSettings:
    """Get cached settings instance."""
    return CRMSettings()
