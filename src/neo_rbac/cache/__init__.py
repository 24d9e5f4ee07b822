"""Caching for role store lookups."""

from ..config.settings import CacheConfig
from .ttl_cache import TTLCache, CacheEntry

__all__ = ["CacheConfig", "TTLCache", "CacheEntry"]
