"""
Role inheritance resolution.

Walks the single-parent chain from a role to its root, collecting direct
permissions along the way. Depth counts edges: the starting role sits at
depth 0, so ``max_depth=10`` allows a chain of 11 roles.

Failure policy is split on purpose:
- resolve_permissions and get_hierarchy raise on cycles and excessive depth
  since a truncated result would be silently wrong.
- inherits_from answers False in the same situations.
"""
import logging
from typing import List, Optional, Set, Tuple

from ..config.settings import DEFAULT_MAX_DEPTH, RBACSettings, get_settings
from ..core.exceptions import (
    CircularInheritanceError,
    DepthExceededError,
    RoleHierarchyError,
)
from ..domain.protocols import RoleStoreProtocol
from ..domain.role import RoleRecord

logger = logging.getLogger(__name__)

ChainLink = Tuple[str, Optional[RoleRecord]]


class RoleInheritanceResolver:
    """Computes effective permissions and ancestry over a role store."""

    def __init__(self, store: RoleStoreProtocol, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 0:
            raise ValueError("max_depth must not be negative")
        self._store = store
        self.max_depth = max_depth

    @classmethod
    def from_settings(
        cls,
        store: RoleStoreProtocol,
        settings: Optional[RBACSettings] = None
    ) -> "RoleInheritanceResolver":
        """Create a resolver whose depth limit comes from RBACSettings."""
        settings = settings or get_settings()
        return cls(store, max_depth=settings.max_depth)

    @property
    def store(self) -> RoleStoreProtocol:
        return self._store

    async def _walk(
        self,
        role_name: str,
        max_depth: Optional[int],
        chain: Optional[List[ChainLink]] = None
    ) -> List[ChainLink]:
        """Traverse from role_name towards the root.

        Returns the visited (name, record) pairs in order. The record is None
        for a name the store does not know, which also ends the walk.
        When chain is given it is filled in place, so callers still see the
        links visited before an error was raised.

        Raises:
            DepthExceededError: More than max_depth edges would be traversed
            CircularInheritanceError: A role reappears in the path
        """
        limit = self.max_depth if max_depth is None else max_depth
        visited: Set[str] = set()
        if chain is None:
            chain = []

        current: Optional[str] = role_name
        depth = 0
        while current is not None:
            if depth > limit:
                raise DepthExceededError(current, limit)
            if current in visited:
                raise CircularInheritanceError(current)
            visited.add(current)

            record = await self._store.find_role(current)
            chain.append((current, record))
            if record is None:
                break

            current = record.parent
            depth += 1

        return chain

    async def resolve_permissions(self, role_name: str, max_depth: Optional[int] = None) -> Set[str]:
        """
        Resolve all permissions for a role including inherited ones.

        Args:
            role_name: Role to resolve
            max_depth: Maximum edges to traverse, defaults to the resolver's limit

        Returns:
            Deduplicated set of permissions; empty for an unknown role

        Raises:
            CircularInheritanceError: The chain loops back on itself
            DepthExceededError: The chain is deeper than max_depth
        """
        try:
            chain = await self._walk(role_name, max_depth)
        except RoleHierarchyError as e:
            logger.warning(f"Cannot resolve permissions for role {role_name}: {e.message}")
            raise

        permissions: Set[str] = set()
        for _, record in chain:
            if record is not None:
                permissions.update(record.permissions)

        logger.debug(
            f"Resolved {len(permissions)} permissions for role {role_name} "
            f"across {len(chain)} roles"
        )
        return permissions

    async def inherits_from(
        self,
        role_name: str,
        candidate_parent: str,
        max_depth: Optional[int] = None
    ) -> bool:
        """
        Check if a role inherits from another role, directly or indirectly.

        A role never inherits from itself. Cycles and an unknown starting role
        yield False instead of raising. When the chain is deeper than max_depth
        the answer is True only if candidate_parent was reached within bounds.
        """
        if role_name == candidate_parent:
            return False

        chain: List[ChainLink] = []
        try:
            await self._walk(role_name, max_depth, chain)
        except DepthExceededError as e:
            names = [name for name, _ in chain]
            # the limit tripped on a role already in the path, so the chain loops
            found = e.role_name not in names and candidate_parent in names[1:]
            logger.debug(f"inherits_from({role_name}, {candidate_parent}) is {found}: {e.message}")
            return found
        except CircularInheritanceError as e:
            logger.debug(f"inherits_from({role_name}, {candidate_parent}) is False: {e.message}")
            return False

        if chain[0][1] is None:
            return False

        return any(name == candidate_parent for name, _ in chain[1:])

    async def get_hierarchy(self, role_name: str, max_depth: Optional[int] = None) -> List[str]:
        """
        Get the ordered chain from a role up to its root.

        Returns:
            ``[role_name, parent, ..., root]``; ``[role_name]`` for an unknown role

        Raises:
            CircularInheritanceError: The chain loops back on itself
            DepthExceededError: The chain is deeper than max_depth
        """
        try:
            chain = await self._walk(role_name, max_depth)
        except RoleHierarchyError as e:
            logger.warning(f"Cannot build hierarchy for role {role_name}: {e.message}")
            raise

        return [name for name, _ in chain]


async def resolve_role_permissions(
    store: RoleStoreProtocol,
    role_name: str,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> Set[str]:
    """Resolve a role's effective permissions without keeping a resolver around."""
    return await RoleInheritanceResolver(store, max_depth).resolve_permissions(role_name)


async def inherits_from(
    store: RoleStoreProtocol,
    role_name: str,
    candidate_parent: str,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> bool:
    """Check whether role_name inherits from candidate_parent."""
    return await RoleInheritanceResolver(store, max_depth).inherits_from(role_name, candidate_parent)


async def get_role_hierarchy(
    store: RoleStoreProtocol,
    role_name: str,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> List[str]:
    """Get the ordered ancestor chain of role_name."""
    return await RoleInheritanceResolver(store, max_depth).get_hierarchy(role_name)
