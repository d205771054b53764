"""Engine configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (``SERIESFIT_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="SERIESFIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Polynomial formula rendering
    coefficient_epsilon: float = 1e-10
    formula_decimals: int = 4

    # Series.clone() default naming
    copy_suffix: str = " (Copy)"

    # Log a warning when filtering a series whose times are not a step-1 run
    warn_non_contiguous: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
