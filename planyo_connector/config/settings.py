"""Application settings and configuration management."""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class PlanyoSettings(BaseSettings):
    """Planyo REST API configuration."""

    site_id: str = ""
    api_key: str = ""
    hash_key: str = ""  # Shared secret used for request signing
    base_url: str = "https://www.planyo.com/rest/"
    request_timeout: float = 30.0
    max_response_bytes: int = 1024 * 1024

    model_config = SettingsConfigDict(env_prefix="PLANYO_")

    def missing_credentials(self) -> list[str]:
        """Return the names of required credential variables that are not set."""
        missing = []
        if not self.site_id.strip():
            missing.append("PLANYO_SITE_ID")
        if not self.api_key.strip():
            missing.append("PLANYO_API_KEY")
        if not self.hash_key.strip():
            missing.append("PLANYO_HASH_KEY")
        return missing


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Sub-settings
    planyo: PlanyoSettings = PlanyoSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
