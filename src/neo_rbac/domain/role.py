"""
Role entity - a named bundle of permissions with an optional parent.

Inheritance is single-parent, so the role graph is a forest keyed by name.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional


@dataclass(frozen=True)
class RoleRecord:
    """
    Role as returned by a role store.

    Permissions are kept in storage order with duplicates removed; callers that
    need set semantics use ``permission_set``.
    Hashing uses the name, parent and timestamps only.
    """
    name: str
    permissions: Optional[List[str]] = field(default=None, hash=False)
    parent: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    def __post_init__(self):
        """Normalize permissions and reject empty names."""
        if not self.name:
            raise ValueError("Role name must not be empty")
        permissions = list(dict.fromkeys(self.permissions or []))
        object.__setattr__(self, 'permissions', permissions)
        if self.parent == "":
            object.__setattr__(self, 'parent', None)

    @property
    def is_deleted(self) -> bool:
        """Check if the role has been soft-deleted."""
        return self.deleted_at is not None

    @property
    def has_parent(self) -> bool:
        return self.parent is not None

    @property
    def permission_set(self) -> FrozenSet[str]:
        """Direct permissions as a set."""
        return frozenset(self.permissions)

    def has_permission(self, permission: str) -> bool:
        """Check if the role directly grants a permission (exact match)."""
        return permission in self.permissions

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RoleRecord":
        """Build a record from a plain mapping.

        Accepts ``parent`` or ``inherits`` for the parent role name.
        """
        return cls(
            name=data["name"],
            permissions=list(data.get("permissions") or []),
            parent=data.get("parent", data.get("inherits")),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            deleted_at=data.get("deleted_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "permissions": list(self.permissions),
            "parent": self.parent,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "deleted_at": self.deleted_at,
        }

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"RoleRecord(name='{self.name}', parent={self.parent!r}, permissions={len(self.permissions)})"
