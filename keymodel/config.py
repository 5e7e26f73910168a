"""
Configuration Management Module

Configures keymodel via environment variables or .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    keymodel Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    DEBUG: bool = False

    # Redis Config
    # Redis connection URL used by init_redis()
    REDIS_URL: str = "redis://localhost:6379/0"
    # Wrap every command batch in MULTI/EXEC
    REDIS_TRANSACTION: bool = True

    # Schema Config
    # Prefix marking a declared field as part of the primary key
    KEY_FIELD_SIGIL: str = "$"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get keymodel configuration (Singleton)

    Returns:
        Settings: Configuration instance
    """
    return Settings()
