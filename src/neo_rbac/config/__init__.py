"""Configuration for neo-rbac."""

from .logging_config import LoggingConfig, setup_logging, get_logger
from .settings import (
    CacheConfig,
    RBACSettings,
    get_settings,
    DEFAULT_CACHE_TTL,
    DEFAULT_MAX_DEPTH,
)

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    "CacheConfig",
    "RBACSettings",
    "get_settings",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_MAX_DEPTH",
]
