"""
Fleet Management API — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for every failure the services report.
How:   Each exception class carries a message, an optional context dict, and
       the HTTP status / machine-readable code the global handler in main.py
       uses to render the JSON error envelope.
Who:   Raised by services and repositories; caught by the global handler.

Exception Hierarchy:
    FleetManagementError (base)
    ├── InvalidParameterError       → 400 (missing/empty required input)
    ├── InvalidFormatError          → 400 (date string not dd-MM-yyyy)
    ├── InvalidRoleError            → 400 (unknown role on user creation)
    ├── NotFoundError               → 404 (taxi/user/role absent)
    ├── InvalidCredentialsError     → 401 (password mismatch)
    ├── AuthenticationError         → 401 (missing/invalid/expired token)
    ├── PermissionDeniedError       → 403 (authority missing)
    ├── DuplicateEmailError         → 409 (email already registered)
    ├── AttachmentUnavailableError  → 500 (static attachment unreadable)
    ├── MailTransportError          → 502 (SMTP rejected or unreachable)
    ├── OperationTimeoutError       → 504 (DB/SMTP call exceeded its bound)
    └── DatabaseError               → 500 (unexpected store failure)
"""

from typing import Any, Dict, Optional


class FleetManagementError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
        status_code / error_code: Used by the global exception handler
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidParameterError(FleetManagementError):
    """Raised when a required input is missing, empty or out of range."""

    status_code = 400
    error_code = "invalid_parameter"

    def __init__(
        self,
        message: str = "Invalid parameter",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidFormatError(FleetManagementError):
    """Raised when a value does not match its expected format (e.g. dd-MM-yyyy)."""

    status_code = 400
    error_code = "invalid_format"


class InvalidRoleError(FleetManagementError):
    """Raised when a user is created with a role that does not exist."""

    status_code = 400
    error_code = "invalid_role"

    def __init__(
        self,
        role_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if role_name is not None:
            ctx["role"] = role_name
        super().__init__(message="The roles specified does not exist.", context=ctx)


class NotFoundError(FleetManagementError):
    """
    Raised when a requested resource does not exist.

    The ORM returns None for missing rows; services convert that None into
    this exception so the boundary can answer 404.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvalidCredentialsError(FleetManagementError):
    """Raised on login when the password does not match the stored hash."""

    status_code = 401
    error_code = "invalid_credentials"

    def __init__(self, message: str = "Incorrect Password"):
        super().__init__(message=message)


class AuthenticationError(FleetManagementError):
    """Raised when a bearer token is missing, malformed, forged or expired."""

    status_code = 401
    error_code = "unauthorized"


class PermissionDeniedError(FleetManagementError):
    """Raised when the principal lacks the authority a route requires."""

    status_code = 403
    error_code = "forbidden"


class DuplicateEmailError(FleetManagementError):
    """Raised when registering an email that already belongs to a user."""

    status_code = 409
    error_code = "duplicate_email"

    def __init__(self, email: str):
        super().__init__(
            message=f"A user with email '{email}' already exists.",
            context={"email": email},
        )


class AttachmentUnavailableError(FleetManagementError):
    """Raised when a fixed local attachment cannot be read from disk."""

    status_code = 500
    error_code = "attachment_unavailable"


class MailTransportError(FleetManagementError):
    """
    Raised when the SMTP transport rejects a message or cannot be reached.

    Mail is fire-and-forget: nothing is retried or queued.
    """

    status_code = 502
    error_code = "mail_transport_error"


class OperationTimeoutError(FleetManagementError):
    """Raised when a database statement or SMTP exchange exceeds its time bound."""

    status_code = 504
    error_code = "timeout"

    def __init__(
        self,
        operation: str,
        timeout: float,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update(operation=operation, timeout_seconds=timeout)
        super().__init__(
            message=f"The {operation} did not complete within {timeout:g} seconds.",
            context=ctx,
        )


class DatabaseError(FleetManagementError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the context is
    logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
