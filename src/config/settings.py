"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file). Every setting has a default, so an empty environment is a
valid configuration.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    search_index_name: str = Field(default="stapubox_global_v1", alias="SEARCH_INDEX_NAME")
    default_hits_per_page: int = Field(default=20, alias="DEFAULT_HITS_PER_PAGE")
    near_me_radius_meters: int = Field(default=10_000, alias="NEAR_ME_RADIUS_METERS")

    entry_fee_respects_direction: bool = Field(
        default=False,
        alias="ENTRY_FEE_RESPECTS_DIRECTION",
    )
    around_user_by_default: bool = Field(default=False, alias="AROUND_USER_BY_DEFAULT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("search_index_name")
    @classmethod
    def validate_index_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("SEARCH_INDEX_NAME must not be empty")
        return value

    @field_validator("default_hits_per_page")
    @classmethod
    def validate_hits_per_page(cls, value: int) -> int:
        """A zero page size would be indistinguishable from "use the default"."""

        if value < 1:
            raise ValueError("DEFAULT_HITS_PER_PAGE must be >= 1")
        return value

    @field_validator("near_me_radius_meters")
    @classmethod
    def validate_radius(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("NEAR_ME_RADIUS_METERS must be > 0")
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
