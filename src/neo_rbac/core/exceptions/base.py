"""Base exceptions for neo-rbac.

All exceptions inherit from RBACError and carry an error code and a details
mapping so they can be turned into structured API responses.
"""

from typing import Any, Dict, Optional


class RBACError(Exception):
    """Base exception for all neo-rbac errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(RBACError):
    """Raised when a store or service is configured with invalid values."""

    def __init__(self, message: str = "RBAC configuration error", setting: Optional[str] = None):
        super().__init__(message, "CONFIGURATION_ERROR")
        self.details["setting"] = setting


def create_error_response(exception: RBACError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-rbac exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
