"""FastAPI integration for neo-rbac."""

from .middleware import (
    RBACMiddleware,
    RouteProtection,
    create_role_middleware,
    create_permission_middleware,
)
from .dependencies import RBACDependencies
from .exception_handlers import register_exception_handlers

__all__ = [
    "RBACMiddleware",
    "RouteProtection",
    "create_role_middleware",
    "create_permission_middleware",
    "RBACDependencies",
    "register_exception_handlers",
]
