from typing import Optional

from services.common.settings import BaseSettings, Field, SettingsConfigDict

ONE_DAY_SECONDS = 24 * 60 * 60


class Settings(BaseSettings):
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")

    # Tracking store settings
    tracking_ttl_seconds: int = Field(
        default=ONE_DAY_SECONDS,
        validation_alias="TRACKING_TTL_SECONDS",
        description="Seconds a tracking record stays visible after insertion",
    )
    check_period_seconds: int = Field(
        default=600,
        validation_alias="TRACKING_CHECK_PERIOD_SECONDS",
        description="Interval of the expired-record sweep, 0 disables it",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
