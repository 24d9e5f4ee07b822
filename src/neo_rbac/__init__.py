"""Neo-RBAC - role-based access control with role inheritance.

Resolves a role's effective permissions across a single-parent inheritance
chain, guards against cyclic or runaway hierarchies, and answers subject-level
permission and role checks over a pluggable, optionally cached role store.
"""

from .__version__ import __version__

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .config import (
    CacheConfig,
    RBACSettings,
    get_settings,
    get_logger,
)

from .core.exceptions import (
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

from .domain import RoleRecord, RoleStoreProtocol

from .cache import TTLCache

from .stores import BaseRoleStore, InMemoryRoleStore, PostgresRoleStore

from .services import (
    RoleInheritanceResolver,
    AuthorizationService,
    resolve_role_permissions,
    inherits_from,
    get_role_hierarchy,
)

__all__ = [
    "__version__",
    # Configuration
    "CacheConfig",
    "RBACSettings",
    "get_settings",
    "get_logger",
    "setup_logging",
    # Exceptions
    "RBACError",
    "ConfigurationError",
    "RoleHierarchyError",
    "CircularInheritanceError",
    "DepthExceededError",
    "AuthorizationError",
    "PermissionDeniedError",
    "RoleRequiredError",
    "get_http_status_code",
    "create_error_response",
    # Domain
    "RoleRecord",
    "RoleStoreProtocol",
    # Cache
    "TTLCache",
    # Stores
    "BaseRoleStore",
    "InMemoryRoleStore",
    "PostgresRoleStore",
    # Services
    "RoleInheritanceResolver",
    "AuthorizationService",
    "resolve_role_permissions",
    "inherits_from",
    "get_role_hierarchy",
]
