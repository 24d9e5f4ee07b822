"""
Role store protocol.

The narrow lookup contract the resolution engine consumes. Persistence
backends implement it; the engine never writes through it.
"""
from typing import List, Optional, Protocol, runtime_checkable

from .role import RoleRecord


@runtime_checkable
class RoleStoreProtocol(Protocol):
    """Protocol for role and subject-role lookups."""

    async def find_role(self, role_name: str) -> Optional[RoleRecord]:
        """Get a role by name. Soft-deleted roles must not be returned."""
        ...

    async def get_subject_role(self, subject_id: str) -> Optional[str]:
        """Get the name of the role assigned to a subject."""
        ...

    async def get_role_permissions(self, role_name: str) -> List[str]:
        """Get the direct permissions of a role, empty if the role is unknown."""
        ...
