"""
In-memory role store.

Useful for unit tests, demos and prototyping. Roles and subject assignments
live in plain dictionaries owned by the instance.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config.settings import CacheConfig
from ..domain.role import RoleRecord
from .base import BaseRoleStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRoleStore(BaseRoleStore):
    """
    Role store backed by dictionaries.

    Example:
        store = InMemoryRoleStore(
            roles=[
                {"name": "user", "permissions": ["users.read"]},
                {"name": "admin", "permissions": ["users.delete"], "parent": "user"},
            ],
            subjects=[{"id": "1", "role": "admin"}],
        )
    """

    def __init__(
        self,
        roles: Optional[Iterable[Union[RoleRecord, Mapping[str, Any]]]] = None,
        subjects: Optional[Iterable[Mapping[str, str]]] = None,
        cache_config: Optional[CacheConfig] = None
    ):
        super().__init__(cache_config)
        self._roles: Dict[str, RoleRecord] = {}
        self._subjects: Dict[str, str] = {}

        for role in roles or []:
            record = role if isinstance(role, RoleRecord) else RoleRecord.from_mapping(role)
            self._roles[record.name] = record

        for subject in subjects or []:
            self._subjects[str(subject["id"])] = subject["role"]

    async def find_role(self, role_name: str) -> Optional[RoleRecord]:
        """Find a role by name; soft-deleted roles are invisible."""
        return await self.with_cache(
            self.role_cache_key(role_name),
            lambda: self._lookup_role(role_name)
        )

    async def get_subject_role(self, subject_id: str) -> Optional[str]:
        return await self.with_cache(
            self.subject_role_cache_key(subject_id),
            lambda: self._lookup_subject_role(subject_id)
        )

    async def _lookup_role(self, role_name: str) -> Optional[RoleRecord]:
        role = self._roles.get(role_name)
        if role is None or role.is_deleted:
            return None
        return role

    async def _lookup_subject_role(self, subject_id: str) -> Optional[str]:
        return self._subjects.get(subject_id)

    async def get_role_permissions(self, role_name: str) -> List[str]:
        role = await self.find_role(role_name)
        return list(role.permissions) if role else []

    def set_role(
        self,
        name: str,
        permissions: Iterable[str],
        parent: Optional[str] = None
    ) -> RoleRecord:
        """Add or replace a role."""
        existing = self._roles.get(name)
        now = utc_now()
        record = RoleRecord(
            name=name,
            permissions=list(permissions),
            parent=parent,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self._roles[name] = record
        return record

    def set_subject(self, subject_id: str, role: str) -> None:
        """Assign a role to a subject, replacing any previous assignment."""
        self._subjects[subject_id] = role

    def delete_role(self, name: str) -> None:
        """Remove a role entirely. Unknown names are ignored."""
        self._roles.pop(name, None)

    def soft_delete_role(self, name: str) -> bool:
        """Mark a role deleted so lookups no longer see it.

        Returns:
            True if the role existed and was not already deleted
        """
        role = self._roles.get(name)
        if role is None or role.is_deleted:
            return False
        now = utc_now()
        self._roles[name] = RoleRecord(
            name=role.name,
            permissions=role.permissions,
            parent=role.parent,
            created_at=role.created_at,
            updated_at=now,
            deleted_at=now,
        )
        return True

    def delete_subject(self, subject_id: str) -> None:
        """Remove a subject's assignment. Unknown ids are ignored."""
        self._subjects.pop(subject_id, None)

    def clear(self) -> None:
        """Remove all roles and subject assignments."""
        self._roles.clear()
        self._subjects.clear()
