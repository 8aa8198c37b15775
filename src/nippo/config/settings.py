"""Application settings using Pydantic Settings."""

from datetime import tzinfo
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nippo.infrastructure.parsing.timestamps import resolve_timezone


def default_checkpoint_path() -> Path:
    return Path.home() / ".config" / "nippo" / "checkpoint.json"


class Settings(BaseSettings):
    """Application settings loaded from ``NIPPO_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NIPPO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote folder holding the journal documents
    drive_folder_id: str = ""

    # Sync checkpoint
    checkpoint_path: Path = Field(default_factory=default_checkpoint_path)

    # IANA zone for written timestamps; unset = machine local zone
    timezone: str | None = None

    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        resolve_timezone(value)
        return value or None

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def tzinfo(self) -> tzinfo | None:
        return resolve_timezone(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
