"""Exception hierarchy for neo-rbac."""

from .base import RBACError, ConfigurationError, create_error_response
from .rbac import (
    RoleHierarchyError,
    CircularInheritanceError,
    DepthExceededError,
    AuthorizationError,
    PermissionDeniedError,
    RoleRequiredError,
)
from .http_mapping import HTTP_STATUS_MAP, get_http_status_code

__all__ = [
    "RBACError",
    "ConfigurationError",
    "create_error_response",
    "RoleHierarchyError",
    "CircularInheritanceError",
    "DepthExceededError",
    "AuthorizationError",
    "PermissionDeniedError",
    "RoleRequiredError",
    "HTTP_STATUS_MAP",
    "get_http_status_code",
]
