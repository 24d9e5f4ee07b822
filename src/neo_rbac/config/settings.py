"""
Settings for neo-rbac.

Environment-driven configuration using pydantic-settings. All variables use the
``RBAC_`` prefix, e.g. ``RBAC_CACHE_ENABLED=true`` or ``RBAC_MAX_DEPTH=5``.
"""
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CACHE_TTL = 300  # 5 minutes
DEFAULT_MAX_DEPTH = 10


class CacheConfig(BaseModel):
    """Cache settings recognized by role stores.

    Caching is opt-in. ``ttl`` is expressed in seconds.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    ttl: int = Field(default=DEFAULT_CACHE_TTL, gt=0)


class RBACSettings(BaseSettings):
    """Runtime settings for the RBAC engine and its stores."""

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Inheritance resolution
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)

    # Cache
    cache_enabled: bool = False
    cache_ttl: int = Field(default=DEFAULT_CACHE_TTL, gt=0)

    # PostgreSQL store
    database_url: Optional[str] = None
    db_schema: str = "public"
    roles_table: str = "roles"
    users_table: str = "users"

    # Route protection redirects
    unauthorized_url: str = "/login"
    forbidden_url: str = "/forbidden"

    @property
    def cache_config(self) -> CacheConfig:
        """Cache settings as a CacheConfig."""
        return CacheConfig(enabled=self.cache_enabled, ttl=self.cache_ttl)


@lru_cache()
def get_settings() -> RBACSettings:
    """Get cached settings instance."""
    return RBACSettings()
