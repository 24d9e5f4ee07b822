"""Role resolution and authorization services."""

from .inheritance import (
    RoleInheritanceResolver,
    resolve_role_permissions,
    inherits_from,
    get_role_hierarchy,
)
from .authorization import AuthorizationService

__all__ = [
    "RoleInheritanceResolver",
    "resolve_role_permissions",
    "inherits_from",
    "get_role_hierarchy",
    "AuthorizationService",
]
