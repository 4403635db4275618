"""
Exception hierarchy for the cache admin service.

Every domain error derives from AppError and carries:
- error_code: Machine-readable error code (from ErrorCode enum)
- status_code: HTTP status code used by the API error handler
- message: Human-readable error message
- details: Optional dictionary with additional context
- suggested_action: Optional hint for the caller

Usage:
    from cache_admin.domain.exceptions import AgentNotFound, ServiceHasNoAgent

    raise AgentNotFound(f"Agent with ID '{agent_id}' not found")
    raise ServiceHasNoAgent(details={"service_id": service.id})
"""

from typing import Any, Optional
from cache_admin.api.schemas.errors import ErrorCode


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        error_code: Machine-readable error code (from ErrorCode enum)
        status_code: HTTP status code (default: 500)
        message: Human-readable error message
        details: Optional dictionary with additional error context
        suggested_action: Optional user-friendly suggestion for resolution
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggested_action: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.suggested_action = suggested_action or self.default_suggested_action
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code.value}, "
            f"status_code={self.status_code}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )


# ========================================
# Authentication Errors (401)
# ========================================


class AuthError(AppError):
    """Base class for authentication errors."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED
    default_message = "Authentication required"
    default_suggested_action = "Please provide valid authentication credentials"
    www_authenticate: Optional[str] = "Bearer"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password."""

    error_code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid email or password"
    default_suggested_action = "Please check your email and password and try again"


class TokenExpired(AuthError):
    """Bearer token has expired."""

    error_code = ErrorCode.TOKEN_EXPIRED
    default_message = "Authentication token has expired"
    default_suggested_action = "Please log in again"


class TokenInvalid(AuthError):
    """Bearer token is malformed or has a bad signature."""

    error_code = ErrorCode.TOKEN_INVALID
    default_message = "Authentication token is invalid"
    default_suggested_action = "Please log in again to obtain a valid token"


class ApiKeyMissing(AuthError):
    """Agent callback without X-Api-Key header."""

    error_code = ErrorCode.API_KEY_MISSING
    default_message = "API Key is missing"
    default_suggested_action = "Send the agent API key in the X-Api-Key header"
    www_authenticate = 'ApiKey realm="X-Api-Key"'


class ApiKeyInvalid(AuthError):
    """API key does not match an active agent."""

    error_code = ErrorCode.API_KEY_INVALID
    default_message = "Invalid API Key"
    default_suggested_action = "Please check the agent API key or regenerate it"
    www_authenticate = 'ApiKey realm="X-Api-Key"'


# ========================================
# Authorization Errors (403)
# ========================================


class InsufficientPermissions(AppError):
    """User lacks the role required by the endpoint."""

    status_code = 403
    error_code = ErrorCode.INSUFFICIENT_PERMISSIONS
    default_message = "You do not have permission to perform this action"
    default_suggested_action = "Please contact your administrator to request the necessary permissions"


class ServiceAccessDenied(AppError):
    """User is not linked to the requested service."""

    status_code = 403
    error_code = ErrorCode.RESOURCE_ACCESS_DENIED
    default_message = "You do not have access to this service"
    default_suggested_action = "Ask an administrator to link this service to your account"


# ========================================
# Business rule errors (400)
# ========================================


class InvalidOperation(AppError):
    """Request violates a business rule."""

    status_code = 400
    error_code = ErrorCode.INVALID_OPERATION
    default_message = "The requested operation is not allowed"


class DuplicateEmail(InvalidOperation):
    """Email is already used by another user."""

    error_code = ErrorCode.DUPLICATE_EMAIL
    default_message = "A user with this email already exists"
    default_suggested_action = "Use a different email address"


class ServiceAlreadyLinked(InvalidOperation):
    """Service name is already in the user's linked list."""

    default_message = "Service is already linked to this user"


class ServiceNotLinked(InvalidOperation):
    """Service name is not in the user's linked list."""

    default_message = "Service is not linked to this user"


class ServiceHasNoAgent(InvalidOperation):
    """Service has no agent to relay cache requests to."""

    error_code = ErrorCode.SERVICE_HAS_NO_AGENT
    default_message = "Service is not associated with any agent"
    default_suggested_action = "Register the service through its agent or assign an agent first"


class AgentInactive(InvalidOperation):
    """Agent exists but its API key has been deactivated."""

    error_code = ErrorCode.AGENT_INACTIVE
    default_message = "Agent is not active"
    default_suggested_action = "Regenerate the agent API key to reactivate it"


# ========================================
# Resource Errors (404)
# ========================================


class NotFound(AppError):
    """Resource not found."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"
    default_suggested_action = "Please check the resource ID and try again"


class UserNotFound(NotFound):
    error_code = ErrorCode.USER_NOT_FOUND
    default_message = "User not found"


class AgentNotFound(NotFound):
    error_code = ErrorCode.AGENT_NOT_FOUND
    default_message = "Agent not found"


class ServiceNotFound(NotFound):
    error_code = ErrorCode.SERVICE_NOT_FOUND
    default_message = "Service not found"


# ========================================
# External / infrastructure errors
# ========================================


class ExternalError(AppError):
    """Base class for failures outside this process."""

    default_message = "An external service error occurred"
    default_suggested_action = "An external service is currently unavailable. Please try again later"


class AgentRequestFailed(ExternalError):
    """Relayed call to an agent failed or returned an unreadable body."""

    status_code = 500
    error_code = ErrorCode.EXTERNAL_SERVICE_ERROR
    default_message = "Agent request failed"
    default_suggested_action = "Check that the agent is running and reachable, then retry"


class DatabaseError(ExternalError):
    """Document store operation failed."""

    status_code = 503
    error_code = ErrorCode.DATABASE_UNAVAILABLE
    default_message = "Database operation failed"
    default_suggested_action = "The database is currently unavailable. Please try again later"
