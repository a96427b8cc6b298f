"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Habit Atlas engine configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Catalog data
    # Empty means the YAML files shipped inside atlas/domains/habits/data.
    atlas_data_dir: str = ""
    atlas_log_level: str = "info"

    # Development builds fail fast when the impact model references a habit the
    # catalog does not define; production builds log and skip it.
    atlas_strict_integrity: bool = False

    # Scoring
    atlas_dominant_threshold: float = 3.0

    # Recommendations
    atlas_critical_min_level: int = 1
    atlas_max_recommendations: int = 5


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
