"""
Authorization service for subject-level permission and role checks.

Permission checks here use the subject's role's *direct* permissions only.
Inherited permissions are a separate, explicit path through
get_effective_permissions / has_effective_permission.
"""
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set, Union

from ..core.exceptions import PermissionDeniedError, RoleRequiredError
from ..domain.protocols import RoleStoreProtocol
from .inheritance import RoleInheritanceResolver

logger = logging.getLogger(__name__)

DenialHook = Callable[[str, Any], Union[None, Awaitable[None]]]


class AuthorizationService:
    """
    Facade composing subject->role lookup with permission checks.

    Empty inputs follow fixed conventions independent of the subject's role:
    ``has_all_permissions(s, [])`` is True, ``has_any_permission(s, [])`` and
    ``has_any_role(s, [])`` are False.
    """

    def __init__(
        self,
        store: RoleStoreProtocol,
        resolver: Optional[RoleInheritanceResolver] = None,
        on_permission_denied: Optional[DenialHook] = None,
        on_role_denied: Optional[DenialHook] = None
    ):
        """
        Initialize the service.

        Args:
            store: Role store used for subject and role lookups
            resolver: Inheritance resolver; one is built over store if omitted
            on_permission_denied: Called with (subject_id, permission or list)
                before a require_*permission* call raises
            on_role_denied: Called with (subject_id, role or list) before a
                require_*role call raises
        """
        self._store = store
        self._resolver = resolver or RoleInheritanceResolver(store)
        self._on_permission_denied = on_permission_denied
        self._on_role_denied = on_role_denied

    @property
    def store(self) -> RoleStoreProtocol:
        return self._store

    @property
    def resolver(self) -> RoleInheritanceResolver:
        return self._resolver

    async def get_role_permissions(self, role: str) -> List[str]:
        """Get the direct permissions of a role."""
        return await self._store.get_role_permissions(role)

    async def _get_subject_permissions(self, subject_id: str) -> Optional[Set[str]]:
        role = await self._store.get_subject_role(subject_id)
        if not role:
            logger.debug(f"Subject {subject_id} has no assigned role")
            return None
        return set(await self._store.get_role_permissions(role))

    async def has_permission(self, subject_id: str, permission: str) -> bool:
        """Check if the subject's role directly grants a permission."""
        permissions = await self._get_subject_permissions(subject_id)
        if permissions is None:
            return False
        return permission in permissions

    async def has_any_permission(self, subject_id: str, permissions: Sequence[str]) -> bool:
        """Check if the subject's role grants at least one of the permissions."""
        if not permissions:
            return False
        granted = await self._get_subject_permissions(subject_id)
        if granted is None:
            return False
        return any(permission in granted for permission in permissions)

    async def has_all_permissions(self, subject_id: str, permissions: Sequence[str]) -> bool:
        """Check if the subject's role grants every one of the permissions."""
        if not permissions:
            return True
        granted = await self._get_subject_permissions(subject_id)
        if granted is None:
            return False
        return all(permission in granted for permission in permissions)

    async def has_role(self, subject_id: str, role: str) -> bool:
        """Check if the subject is assigned exactly this role."""
        subject_role = await self._store.get_subject_role(subject_id)
        return subject_role is not None and subject_role == role

    async def has_any_role(self, subject_id: str, roles: Sequence[str]) -> bool:
        """Check if the subject is assigned one of the roles."""
        if not roles:
            return False
        subject_role = await self._store.get_subject_role(subject_id)
        return subject_role is not None and subject_role in roles

    async def get_effective_permissions(self, subject_id: str) -> Set[str]:
        """Get the subject's permissions including those inherited by its role.

        Raises:
            CircularInheritanceError: The role chain loops back on itself
            DepthExceededError: The role chain is too deep
        """
        role = await self._store.get_subject_role(subject_id)
        if not role:
            return set()
        return await self._resolver.resolve_permissions(role)

    async def has_effective_permission(self, subject_id: str, permission: str) -> bool:
        """Check a permission against the subject's inherited permission set."""
        return permission in await self.get_effective_permissions(subject_id)

    async def require_permission(self, subject_id: str, permission: str) -> None:
        """Require a permission or raise PermissionDeniedError."""
        if not await self.has_permission(subject_id, permission):
            await self._deny_permission(subject_id, permission, [permission], require_all=True)

    async def require_any_permission(self, subject_id: str, permissions: Sequence[str]) -> None:
        """Require at least one of the permissions or raise PermissionDeniedError."""
        if not await self.has_any_permission(subject_id, permissions):
            await self._deny_permission(subject_id, list(permissions), permissions, require_all=False)

    async def require_all_permissions(self, subject_id: str, permissions: Sequence[str]) -> None:
        """Require every one of the permissions or raise PermissionDeniedError."""
        if not await self.has_all_permissions(subject_id, permissions):
            await self._deny_permission(subject_id, list(permissions), permissions, require_all=True)

    async def require_role(self, subject_id: str, role: str) -> None:
        """Require a role or raise RoleRequiredError."""
        if not await self.has_role(subject_id, role):
            await self._deny_role(subject_id, role, [role])

    async def require_any_role(self, subject_id: str, roles: Sequence[str]) -> None:
        """Require one of the roles or raise RoleRequiredError."""
        if not await self.has_any_role(subject_id, roles):
            await self._deny_role(subject_id, list(roles), roles)

    async def _deny_permission(
        self,
        subject_id: str,
        hook_arg: Any,
        permissions: Sequence[str],
        require_all: bool
    ) -> None:
        logger.warning(
            f"Permission denied for subject {subject_id}: {', '.join(permissions)}"
        )
        if self._on_permission_denied is not None:
            await _maybe_await(self._on_permission_denied(subject_id, hook_arg))
        raise PermissionDeniedError(permissions, subject_id=subject_id, require_all=require_all)

    async def _deny_role(self, subject_id: str, hook_arg: Any, roles: Sequence[str]) -> None:
        logger.warning(f"Role required for subject {subject_id}: {', '.join(roles)}")
        if self._on_role_denied is not None:
            await _maybe_await(self._on_role_denied(subject_id, hook_arg))
        raise RoleRequiredError(roles, subject_id=subject_id)


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result
