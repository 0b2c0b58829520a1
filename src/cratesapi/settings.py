import functools

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "Settings",
    "settings",
]


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    # Descriptive identifier required by the crates.io crawler policy,
    # e.g. "my_crawler (help@my_crawler.com)"
    user_agent: str | None = None
    base_url: str = "https://crates.io/api/v1"
    # Seconds, handed to httpx as is
    timeout: float = 30.0
    # One of the standard logging level names, case insensitive
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="cratesapi_",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@functools.cache
def settings() -> Settings:
    """
    Use simple caching function to make sure settings are not created on import.
    """
    return Settings()
