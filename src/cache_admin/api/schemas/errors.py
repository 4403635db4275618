"""Error response schemas and error codes."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """
    Standard error codes for API responses.

    Error codes are grouped by the HTTP status they are returned with.
    """

    # ===== Validation / business rule errors (400) =====
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed (400)"""

    INVALID_OPERATION = "INVALID_OPERATION"
    """Request conflicts with a business rule (400)"""

    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    """Another user already uses this email (400)"""

    SERVICE_HAS_NO_AGENT = "SERVICE_HAS_NO_AGENT"
    """Service is not attached to any agent (400)"""

    AGENT_INACTIVE = "AGENT_INACTIVE"
    """Agent API key is not active (400)"""

    # ===== Authentication Errors (401) =====
    UNAUTHORIZED = "UNAUTHORIZED"
    """Authentication required (401)"""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    """Invalid email or password (401)"""

    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    """Authentication token has expired (401)"""

    TOKEN_INVALID = "TOKEN_INVALID"
    """Authentication token is invalid (401)"""

    API_KEY_MISSING = "API_KEY_MISSING"
    """X-Api-Key header missing (401)"""

    API_KEY_INVALID = "API_KEY_INVALID"
    """API key is invalid or revoked (401)"""

    # ===== Authorization Errors (403) =====
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    """User lacks required role (403)"""

    RESOURCE_ACCESS_DENIED = "RESOURCE_ACCESS_DENIED"
    """Access to specific resource denied (403)"""

    # ===== Not Found Errors (404) =====
    NOT_FOUND = "NOT_FOUND"
    """Resource not found (404)"""

    USER_NOT_FOUND = "USER_NOT_FOUND"
    """User not found (404)"""

    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
    """Agent not found (404)"""

    SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
    """Service not found (404)"""

    # ===== Server Errors (500) =====
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Internal server error (500)"""

    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    """Call to a remote agent failed (500)"""

    # ===== Service Unavailable (503) =====
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    """Document store unavailable (503)"""


class FieldError(BaseModel):
    """Field-level validation error."""

    field: str = Field(
        ...,
        description="Field name or path (e.g., 'body.email')",
        examples=["body.email", "body.password"]
    )
    message: str = Field(
        ...,
        description="Human-readable error message for this field",
        examples=["This field is required"]
    )
    code: str | None = Field(
        default=None,
        description="Machine-readable error code for this field",
        examples=["MISSING", "STRING_TOO_SHORT"]
    )
    value: Any | None = Field(
        default=None,
        description="The invalid value that was provided",
    )


class ErrorDetail(BaseModel):
    """
    Detailed error information.

    Rendered under the ``error`` key of every error response:

        {
            "error": {"code": "AGENT_NOT_FOUND", "message": "Agent not found"},
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """

    code: ErrorCode = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[FieldError] | None = Field(
        default=None,
        description="Field-level error details (validation errors only)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (resource ids, upstream status...)",
    )
