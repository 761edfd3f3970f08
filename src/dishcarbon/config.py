"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from DISHCARBON_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="DISHCARBON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Uploads
    max_file_size_mb: float = Field(default=10, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Footprint table (YAML file or directory); packaged table when unset
    footprint_table: Optional[str] = None

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once, using the settings level by default."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
