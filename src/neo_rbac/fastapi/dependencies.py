"""
FastAPI dependencies for permission and role checks.

Usage:
    rbac = RBACDependencies(service, get_subject_id=subject_from_header)

    @app.delete("/users/{user_id}")
    async def delete_user(
        user_id: str,
        subject_id: str = Depends(rbac.require_permission("users.delete")),
    ):
        ...

Denials raise PermissionDeniedError / RoleRequiredError; register the
handlers from ``exception_handlers`` to turn them into 403 responses.
"""
import logging
from typing import Awaitable, Callable, Optional, Sequence

from fastapi import HTTPException, Request, status

from ..services.authorization import AuthorizationService

logger = logging.getLogger(__name__)

SubjectResolver = Callable[[Request], Awaitable[Optional[str]]]
SubjectDependency = Callable[[Request], Awaitable[str]]


class RBACDependencies:
    """Factory of request dependencies bound to an AuthorizationService."""

    def __init__(self, service: AuthorizationService, get_subject_id: SubjectResolver):
        """
        Initialize the dependency factory.

        Args:
            service: Authorization service performing the checks
            get_subject_id: Extracts the subject id from the request, None if anonymous
        """
        self.service = service
        self.get_subject_id = get_subject_id

    async def current_subject(self, request: Request) -> str:
        """Dependency returning the authenticated subject id, 401 otherwise."""
        subject_id = await self.get_subject_id(request)
        if not subject_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required"
            )
        return subject_id

    def _guard(self, check: Callable[[str], Awaitable[None]]) -> SubjectDependency:
        async def dependency(request: Request) -> str:
            subject_id = await self.current_subject(request)
            await check(subject_id)
            return subject_id
        return dependency

    def require_permission(self, permission: str) -> SubjectDependency:
        return self._guard(lambda subject_id: self.service.require_permission(subject_id, permission))

    def require_any_permission(self, permissions: Sequence[str]) -> SubjectDependency:
        permissions = list(permissions)
        return self._guard(lambda subject_id: self.service.require_any_permission(subject_id, permissions))

    def require_all_permissions(self, permissions: Sequence[str]) -> SubjectDependency:
        permissions = list(permissions)
        return self._guard(lambda subject_id: self.service.require_all_permissions(subject_id, permissions))

    def require_role(self, role: str) -> SubjectDependency:
        return self._guard(lambda subject_id: self.service.require_role(subject_id, role))

    def require_any_role(self, roles: Sequence[str]) -> SubjectDependency:
        roles = list(roles)
        return self._guard(lambda subject_id: self.service.require_any_role(subject_id, roles))
