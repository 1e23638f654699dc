"""
Shared configuration management for skue services.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local", validation_alias=AliasChoices("SKUE_ENV", "env"))
    log_level: str = Field(default="info", validation_alias=AliasChoices("SKUE_LOG_LEVEL", "log_level"))

    # Redis cache
    redis_url: str = Field(
        default="redis://127.0.0.1:6379/0",
        validation_alias=AliasChoices("SKUE_REDIS_URL", "redis_url")
    )
    redis_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RCACHE_REDIS_PASS", "redis_password")
    )
    cache_enabled: bool = Field(default=True, validation_alias=AliasChoices("SKUE_CACHE_ENABLED", "cache_enabled"))
    cache_ttl: int = Field(default=120, ge=1, validation_alias=AliasChoices("SKUE_CACHE_TTL", "cache_ttl"))

    # MongoDB backing store
    mongo_address: str = Field(default="localhost", validation_alias=AliasChoices("MG_DB_ADDRESS", "mongo_address"))
    mongo_username: Optional[str] = Field(default=None, validation_alias=AliasChoices("MG_DB_USER", "mongo_username"))
    mongo_password: Optional[str] = Field(default=None, validation_alias=AliasChoices("MG_DB_PASS", "mongo_password"))
    mongo_database: str = Field(default="skue", validation_alias=AliasChoices("MG_DB_DBNAME", "mongo_database"))
    mongo_timeout_ms: int = Field(
        default=5000,
        ge=1,
        validation_alias=AliasChoices("SKUE_MONGO_TIMEOUT_MS", "mongo_timeout_ms")
    )

    # Listing
    list_limit: int = Field(default=25, ge=1, validation_alias=AliasChoices("SKUE_LIST_LIMIT", "list_limit"))
    list_max_limit: int = Field(default=100, ge=1, validation_alias=AliasChoices("SKUE_LIST_MAX_LIMIT", "list_max_limit"))

    # Security
    api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("SOCCER_API_KEY", "api_key"))


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
