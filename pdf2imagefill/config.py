"""Application configuration using pydantic-settings."""

import tempfile
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Rendering: 1 PDF point becomes `render_scale` pixels
    render_scale: float = Field(default=2.0, gt=0)
    max_render_scale: float = Field(default=4.0, gt=0)

    # Request limits
    max_body_size_mb: int = Field(default=50, gt=0)

    # Scratch space for PDF assembly
    temp_dir: Path = Path(tempfile.gettempdir()) / "pdf2imagefill"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    @property
    def max_body_size_bytes(self) -> int:
        return self.max_body_size_mb * 1024 * 1024

    def resolve_scale(self, scale: float | None) -> float:
        """Return the rendering scale for a request.

        Args:
            scale: Per-request override, or None to use the configured default

        Raises:
            ValueError: If the override is out of range
        """
        if scale is None:
            return self.render_scale
        if scale <= 0 or scale > self.max_render_scale:
            raise ValueError(f"scale must be in (0, {self.max_render_scale}], got {scale}")
        return scale


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
