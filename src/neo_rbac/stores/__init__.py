"""Role store implementations."""

from .base import BaseRoleStore
from .memory import InMemoryRoleStore
from .postgres import PostgresRoleStore

__all__ = ["BaseRoleStore", "InMemoryRoleStore", "PostgresRoleStore"]
