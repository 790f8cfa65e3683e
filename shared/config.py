"""
Shared configuration management for the Wurd content client.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared import __version__


class WurdConfig(BaseSettings):
    """Client settings, read from ``WURD_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="WURD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Content API
    api_url: str = Field(default="https://api.wurd.io")
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default=f"wurd-client/{__version__}")

    # Cache
    cache_max_age_seconds: float = Field(default=60.0, ge=0)


@lru_cache(maxsize=1)
def get_config() -> WurdConfig:
    """Get the process-wide configuration."""
    return WurdConfig()
