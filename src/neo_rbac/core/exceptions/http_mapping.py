"""HTTP status code mapping for neo-rbac exceptions."""

from typing import Dict, Type

from .base import RBACError, ConfigurationError
from .rbac import (
    AuthorizationError,
    PermissionDeniedError,
    RoleRequiredError,
    RoleHierarchyError,
    CircularInheritanceError,
    DepthExceededError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,
    RoleRequiredError: 403,

    # 500 Internal Server Error (misconfigured role graph or store)
    RoleHierarchyError: 500,
    CircularInheritanceError: 500,
    DepthExceededError: 500,
    ConfigurationError: 500,
    RBACError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Walks the exception's MRO so subclasses inherit their parent's mapping.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code, 500 for anything unmapped
    """
    for exc_type in type(exception).__mro__:
        if exc_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_type]
    return 500
