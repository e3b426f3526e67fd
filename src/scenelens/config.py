"""Environment-based configuration for SceneLens."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from SCENELENS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCENELENS_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Authentication (None = disabled)
    api_key: str | None = None

    # Recognition provider
    imagga_endpoint: str = "https://api.imagga.com"
    imagga_api_key: str | None = None
    imagga_api_secret: str | None = None
    request_timeout: float = Field(default=30.0, gt=0)

    # Input limits
    max_file_size: int = Field(default=20_971_520, ge=1)

    # Synthesis thresholds (fractions of 1.0)
    object_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    high_level_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    medium_level_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    @property
    def provider_configured(self) -> bool:
        return bool(self.imagga_api_key and self.imagga_api_secret)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
