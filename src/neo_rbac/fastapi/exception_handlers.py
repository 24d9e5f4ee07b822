"""
Exception handlers mapping neo-rbac errors to HTTP responses.

Authorization denials become 403 responses carrying the missing permissions
or roles. Hierarchy errors indicate a misconfigured role graph and become a
500 configuration error without leaking role details.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    AuthorizationError,
    RBACError,
    RoleHierarchyError,
    create_error_response,
    get_http_status_code,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register neo-rbac exception handlers on the application.

    Args:
        app: FastAPI application instance
    """
    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        return JSONResponse(
            status_code=get_http_status_code(exc),
            content=create_error_response(exc)
        )

    @app.exception_handler(RoleHierarchyError)
    async def role_hierarchy_error_handler(request: Request, exc: RoleHierarchyError):
        logger.error(f"Role hierarchy misconfigured while serving {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=get_http_status_code(exc),
            content={
                "error": {
                    "code": "RBAC_CONFIGURATION_ERROR",
                    "message": "Role configuration error",
                    "details": {},
                    "type": exc.__class__.__name__,
                }
            }
        )

    @app.exception_handler(RBACError)
    async def rbac_error_handler(request: Request, exc: RBACError):
        logger.error(f"RBAC error while serving {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=get_http_status_code(exc),
            content=create_error_response(exc)
        )
