"""
Role hierarchy and authorization exceptions.

Two families live here:
- Hierarchy errors signal a misconfigured role graph (cycles, runaway depth).
  They always surface to the caller of a full resolution.
- Authorization errors signal an expected denial raised by the require_*
  checks, carrying the missing permissions or roles.
"""

from typing import Iterable, List, Optional, Union

from .base import RBACError


def _as_list(value: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


class RoleHierarchyError(RBACError):
    """Base exception for invalid role inheritance graphs."""

    def __init__(self, message: str, error_code: str, role_name: str):
        super().__init__(message, error_code)
        self.role_name = role_name
        self.details["role_name"] = role_name


class CircularInheritanceError(RoleHierarchyError):
    """Raised when a role reappears in the active inheritance path."""

    def __init__(self, role_name: str):
        super().__init__(
            f"Circular role inheritance detected: {role_name}",
            "CIRCULAR_INHERITANCE",
            role_name
        )


class DepthExceededError(RoleHierarchyError):
    """Raised when the inheritance chain is deeper than allowed."""

    def __init__(self, role_name: str, max_depth: int):
        super().__init__(
            f"Role inheritance depth exceeded {max_depth} for role: {role_name}",
            "INHERITANCE_DEPTH_EXCEEDED",
            role_name
        )
        self.max_depth = max_depth
        self.details["max_depth"] = max_depth


class AuthorizationError(RBACError):
    """Base exception for authorization denials."""

    def __init__(self, message: str, error_code: str, subject_id: Optional[str] = None):
        super().__init__(message, error_code)
        self.subject_id = subject_id
        self.details["subject_id"] = subject_id


class PermissionDeniedError(AuthorizationError):
    """Raised when a subject lacks the required permission(s)."""

    def __init__(
        self,
        permissions: Union[str, Iterable[str]],
        subject_id: Optional[str] = None,
        require_all: bool = True
    ):
        self.permissions = _as_list(permissions)
        if not self.permissions:
            message = "Permission denied"
        elif len(self.permissions) == 1:
            message = f"Permission denied: {self.permissions[0]}"
        else:
            quantifier = "all" if require_all else "one"
            message = f"Permission denied: requires {quantifier} of {', '.join(self.permissions)}"
        super().__init__(message, "PERMISSION_DENIED", subject_id)
        self.details["required_permissions"] = self.permissions


class RoleRequiredError(AuthorizationError):
    """Raised when a subject does not hold the required role(s)."""

    def __init__(self, roles: Union[str, Iterable[str]], subject_id: Optional[str] = None):
        self.roles = _as_list(roles)
        if not self.roles:
            message = "Role required"
        elif len(self.roles) == 1:
            message = f"Role required: {self.roles[0]}"
        else:
            message = f"Role required: one of {', '.join(self.roles)}"
        super().__init__(message, "ROLE_REQUIRED", subject_id)
        self.details["required_roles"] = self.roles
