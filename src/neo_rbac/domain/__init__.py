"""Domain types and contracts for neo-rbac."""

from .role import RoleRecord
from .protocols import RoleStoreProtocol

__all__ = ["RoleRecord", "RoleStoreProtocol"]
