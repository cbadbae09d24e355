"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings, overridable through ``VORONOI_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VORONOI_", env_file=".env", extra="ignore"
    )

    # Geometry
    epsilon: float = Field(
        default=1e-5, gt=0, description="Tolerance for every approximate comparison"
    )

    # Generation
    default_seed: str = Field(default="default", description="Fallback PRNG seed")
    color_count: int = Field(default=6, ge=1, description="Colors used by the CLI")
    relaxation_iterations: int = Field(
        default=3, ge=0, description="Default Lloyd relaxation passes"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format: json or console")


settings = Settings()
