"""
Configuration - Application settings and logging setup.

Settings are read from the environment (prefix TICTAC_) and an optional
.env file. Use get_settings() for the cached instance.
"""

from functools import lru_cache
import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TICTAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    allowed_origins: str = Field(
        default="*",
        description="Comma-separated CORS origins",
    )
    host: str = Field(default="127.0.0.1", description="Bind address for `tictac serve`")
    port: int = Field(default=8000, description="Bind port for `tictac serve`")
    api_prefix: str = Field(default="/api/v1", description="Prefix for all API routes")

    @property
    def origin_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get the application settings singleton."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service and the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
