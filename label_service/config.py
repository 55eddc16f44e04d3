"""
Configuration management for the Label Service.
Loads environment variables with validation.
"""

from pathlib import Path
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =============================================================================
    # Label Defaults
    # =============================================================================
    default_label_type: Literal["substrate", "non-substrate"] = "substrate"
    default_label_size: Literal["outer", "inner"] = "outer"

    # =============================================================================
    # Rendering
    # =============================================================================
    raster_scale: int = 4  # Supersampling factor used for export
    font_regular: str = "DejaVuSans.ttf"
    font_bold: str = "DejaVuSans-Bold.ttf"

    # =============================================================================
    # Export
    # =============================================================================
    export_dir: Path = Path("exports")
    export_settle_delay_ms: int = 50
    page_format: Literal["A4", "letter"] = "A4"
    page_offset_in: float = 0.5
    jpeg_quality: int = 100

    # =============================================================================
    # Deployment Configuration
    # =============================================================================
    port: int = 8001
    cors_origins: list[str] = []
    log_level: Literal["debug", "info", "warning", "error"] = "info"
    environment: Literal["development", "staging", "production"] = "development"

    # =============================================================================
    # Computed Properties
    # =============================================================================
    @property
    def export_settle_delay_seconds(self) -> float:
        """Convert settle delay from milliseconds to seconds."""
        return self.export_settle_delay_ms / 1000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


# Global settings instance
settings = Settings()
