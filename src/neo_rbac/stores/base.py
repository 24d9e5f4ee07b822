"""
Base role store with optional TTL caching.

Concrete stores subclass BaseRoleStore and wrap their backend lookups in
``with_cache`` so caching policy stays independent of lookup mechanics.
"""
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, TypeVar

from ..cache.ttl_cache import TTLCache
from ..config.settings import CacheConfig
from ..domain.role import RoleRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRoleStore(ABC):
    """Abstract role store implementing RoleStoreProtocol."""

    ROLE_KEY = "role:{role_name}"
    SUBJECT_ROLE_KEY = "user-role:{subject_id}"

    def __init__(self, cache_config: Optional[CacheConfig] = None):
        self.cache_config = cache_config or CacheConfig()
        self._cache: Optional[TTLCache] = None
        if self.cache_config.enabled:
            self._cache = TTLCache(ttl=self.cache_config.ttl)
            logger.info(
                f"Initialized {self.__class__.__name__} with cache ttl={self.cache_config.ttl}s"
            )

    @property
    def cache(self) -> Optional[TTLCache]:
        """The store's cache, None when caching is disabled."""
        return self._cache

    async def with_cache(self, key: str, fetcher: Callable[[], Awaitable[T]]) -> T:
        """Get from cache or fetch and cache.

        Args:
            key: Cache key
            fetcher: Zero-argument coroutine function performing the lookup

        Returns:
            Cached or freshly fetched value
        """
        if self._cache is None:
            return await fetcher()
        return await self._cache.get_or_fetch(key, fetcher)

    async def clear_cache(self, key: Optional[str] = None) -> None:
        """Clear one cache entry, or the whole cache when no key is given."""
        if self._cache is None:
            return
        await self._cache.clear(key)

    def role_cache_key(self, role_name: str) -> str:
        return self.ROLE_KEY.format(role_name=role_name)

    def subject_role_cache_key(self, subject_id: str) -> str:
        return self.SUBJECT_ROLE_KEY.format(subject_id=subject_id)

    @abstractmethod
    async def find_role(self, role_name: str) -> Optional[RoleRecord]:
        """Get a role by name, excluding soft-deleted roles."""

    @abstractmethod
    async def get_subject_role(self, subject_id: str) -> Optional[str]:
        """Get the role name assigned to a subject."""

    @abstractmethod
    async def get_role_permissions(self, role_name: str) -> List[str]:
        """Get the direct permissions of a role."""
