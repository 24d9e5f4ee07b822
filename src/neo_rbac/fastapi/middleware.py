"""
Route protection middleware for FastAPI applications.

Matches the request path against a table of protected path prefixes (the
longest prefix wins) and redirects subjects that are unauthenticated or lack
the required role or direct permissions.

Usage:
    rbac = RBACMiddleware(
        store=store,
        get_subject_id=subject_from_session,
        protected_routes={
            "/admin": RouteProtection(roles=["admin"]),
            "/api/users": RouteProtection(permissions=["users.read"]),
        },
    )
    app.middleware("http")(rbac)
"""
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse

from ..config.settings import RBACSettings, get_settings
from ..domain.protocols import RoleStoreProtocol

logger = logging.getLogger(__name__)

SubjectResolver = Callable[[Request], Awaitable[Optional[str]]]
CustomCheck = Callable[[Request, str, RoleStoreProtocol], Awaitable[bool]]


@dataclass
class RouteProtection:
    """Requirements for a protected path prefix.

    Attributes:
        permissions: Direct permissions the subject must hold, all of them
        any_permissions: Direct permissions of which the subject needs one
        roles: Roles of which the subject must hold one
        custom: Extra async check receiving (request, subject_id, store)
    """
    permissions: List[str] = field(default_factory=list)
    any_permissions: List[str] = field(default_factory=list)
    roles: List[str] = field(default_factory=list)
    custom: Optional[CustomCheck] = None

    @property
    def needs_permissions(self) -> bool:
        return bool(self.permissions or self.any_permissions)


class RBACMiddleware:
    """
    HTTP middleware enforcing role and permission requirements per path.

    Decisions use the subject's role's direct permissions.
    """

    def __init__(
        self,
        store: RoleStoreProtocol,
        get_subject_id: SubjectResolver,
        protected_routes: Dict[str, RouteProtection],
        unauthorized_url: str = "/login",
        forbidden_url: str = "/forbidden",
        is_public_route: Optional[Callable[[str], bool]] = None
    ):
        """
        Initialize the middleware.

        Args:
            store: Role store for subject and permission lookups
            get_subject_id: Extracts the subject id from the request, None if anonymous
            protected_routes: Path prefix -> requirements
            unauthorized_url: Redirect target for anonymous requests
            forbidden_url: Redirect target for denied requests
            is_public_route: Predicate over the path that bypasses all checks
        """
        self.store = store
        self.get_subject_id = get_subject_id
        self.protected_routes = protected_routes
        self.unauthorized_url = unauthorized_url
        self.forbidden_url = forbidden_url
        self.is_public_route = is_public_route

        # Most specific prefix first
        self._ordered_routes = sorted(protected_routes, key=len, reverse=True)

        logger.info(f"Initialized RBACMiddleware with {len(protected_routes)} protected routes")

    @classmethod
    def from_settings(
        cls,
        store: RoleStoreProtocol,
        get_subject_id: SubjectResolver,
        protected_routes: Dict[str, RouteProtection],
        settings: Optional[RBACSettings] = None,
        is_public_route: Optional[Callable[[str], bool]] = None
    ) -> "RBACMiddleware":
        """Create middleware using the redirect targets from RBACSettings."""
        settings = settings or get_settings()
        return cls(
            store=store,
            get_subject_id=get_subject_id,
            protected_routes=protected_routes,
            unauthorized_url=settings.unauthorized_url,
            forbidden_url=settings.forbidden_url,
            is_public_route=is_public_route,
        )

    def match_route(self, path: str) -> Optional[str]:
        """Return the longest protected prefix matching path."""
        for route in self._ordered_routes:
            if path.startswith(route):
                return route
        return None

    async def __call__(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if self.is_public_route and self.is_public_route(path):
            return await call_next(request)

        route = self.match_route(path)
        if route is None:
            return await call_next(request)

        allowed = await self._check(request, self.protected_routes[route])
        if allowed is None:
            logger.debug(f"Anonymous request to protected path {path}")
            return RedirectResponse(self.unauthorized_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        if not allowed:
            logger.warning(f"Access to {path} denied by rule {route!r}")
            return RedirectResponse(self.forbidden_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

        return await call_next(request)

    async def _check(self, request: Request, protection: RouteProtection) -> Optional[bool]:
        """Evaluate a rule. None means unauthenticated."""
        subject_id = await self.get_subject_id(request)
        if not subject_id:
            return None

        role = await self.store.get_subject_role(subject_id)
        if not role:
            return False

        if protection.roles and role not in protection.roles:
            return False

        if protection.needs_permissions:
            granted = set(await self.store.get_role_permissions(role))

            if protection.permissions and not all(p in granted for p in protection.permissions):
                return False

            if protection.any_permissions and not any(p in granted for p in protection.any_permissions):
                return False

        if protection.custom is not None:
            if not await protection.custom(request, subject_id, self.store):
                return False

        return True


def create_role_middleware(
    store: RoleStoreProtocol,
    get_subject_id: SubjectResolver,
    allowed_roles: List[str],
    unauthorized_url: str = "/login",
    forbidden_url: str = "/forbidden"
) -> RBACMiddleware:
    """Middleware requiring one of allowed_roles on every path."""
    return RBACMiddleware(
        store=store,
        get_subject_id=get_subject_id,
        protected_routes={"": RouteProtection(roles=list(allowed_roles))},
        unauthorized_url=unauthorized_url,
        forbidden_url=forbidden_url,
    )


def create_permission_middleware(
    store: RoleStoreProtocol,
    get_subject_id: SubjectResolver,
    required_permissions: List[str],
    unauthorized_url: str = "/login",
    forbidden_url: str = "/forbidden"
) -> RBACMiddleware:
    """Middleware requiring all of required_permissions on every path."""
    return RBACMiddleware(
        store=store,
        get_subject_id=get_subject_id,
        protected_routes={"": RouteProtection(permissions=list(required_permissions))},
        unauthorized_url=unauthorized_url,
        forbidden_url=forbidden_url,
    )
