"""Core building blocks shared across neo-rbac."""

from .exceptions import (
    RBACError,
    ConfigurationError,
    RoleHierarchyError,
    CircularInheritanceError,
    DepthExceededError,
    AuthorizationError,
    PermissionDeniedError,
    RoleRequiredError,
    get_http_status_code,
    create_error_response,
)
