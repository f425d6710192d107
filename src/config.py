"""
Configuration management for the Locale Redirect service.
Uses Pydantic Settings to load configuration from environment variables.
"""
import re

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Locale detection
    # Order matters: earlier locales win ties and the first valid one is the default
    supported_locales: str = Field(
        default="en",
        description="Space- or comma-separated locale identifiers, e.g. 'en ca es hu'"
    )
    locale_cookie_name: str = Field(
        default="Detected-Language",
        description="Cookie remembering the detected locale"
    )
    locale_cookie_ttl_hours: int = Field(
        default=24,
        gt=0,
        description="Lifetime of the detection cookie in hours"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    @property
    def supported_locale_list(self) -> list[str]:
        return [code for code in re.split(r"[\s,]+", self.supported_locales) if code]


# Global settings instance
settings = Settings()
