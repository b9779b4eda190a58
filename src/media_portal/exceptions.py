"""Domain-specific exceptions for the media portal API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses. Each carries the status code it is rendered with by
``middleware.error_handler.portal_exception_handler``.
"""

from typing import Any


class PortalAPIError(Exception):
    """Base exception for all portal API errors."""

    status_code: int = 500

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class AuthenticationError(PortalAPIError):
    """Raised when a request carries no usable credentials."""

    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials do not match."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


# =============================================================================
# Permission Errors (403)
# =============================================================================


class ForbiddenError(PortalAPIError):
    """Raised when the caller is authenticated but not allowed."""

    status_code = 403


class PermissionDeniedError(ForbiddenError):
    """Raised when the caller's role permissions miss every required one.

    ``granted`` is None when the user holds no role at all; the response
    then omits the permission lists.
    """

    def __init__(
        self,
        required: list[str] | None = None,
        granted: list[str] | None = None,
    ) -> None:
        super().__init__("You do not have permission to perform this action")
        self.required = required
        self.granted = granted


class AccountDisabledError(ForbiddenError):
    """Raised when a deactivated account tries to log in."""

    def __init__(self) -> None:
        super().__init__("Your account has been deactivated. Please contact the admin.")


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(PortalAPIError):
    """Base class for resource not found errors."""

    status_code = 404


class UserNotFoundError(NotFoundError):
    """Raised when a portal user cannot be found."""

    def __init__(self, user_id: Any = None) -> None:
        details = {"user_id": str(user_id)} if user_id else {}
        super().__init__("User not found", details)


class RoleNotFoundError(NotFoundError):
    """Raised when a role cannot be found."""

    def __init__(self, role_id: Any = None) -> None:
        details = {"role_id": str(role_id)} if role_id else {}
        super().__init__("Role not found", details)


class RoleAssignmentNotFoundError(NotFoundError):
    """Raised when removing a role the user does not hold."""

    def __init__(self) -> None:
        super().__init__("Role assignment not found")


class RegistrationNotFoundError(NotFoundError):
    """Raised when a registration cannot be found."""

    def __init__(self, registration_id: Any = None) -> None:
        details = {"registration_id": str(registration_id)} if registration_id else {}
        super().__init__("Registration not found", details)


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification is absent or owned by someone else."""

    def __init__(self) -> None:
        super().__init__("Notification not found")


class EventNotFoundError(NotFoundError):
    """Raised when an event cannot be found."""

    def __init__(self) -> None:
        super().__init__("Event not found")


class MinutesNotFoundError(NotFoundError):
    """Raised when meeting minutes cannot be found."""

    def __init__(self) -> None:
        super().__init__("Meeting minutes not found")


class AttachmentNotFoundError(NotFoundError):
    """Raised when an attachment index or file is missing."""

    def __init__(self, message: str = "File not found") -> None:
        super().__init__(message)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(PortalAPIError):
    """Base class for resource conflict errors."""

    status_code = 409


class RoleAlreadyAssignedError(ConflictError):
    """Raised when a (user, role) pair is already linked."""

    def __init__(self) -> None:
        super().__init__("Role already assigned to this user")


class RoleAlreadyExistsError(ConflictError):
    """Raised when a role name or slug is already taken."""

    def __init__(self, name: str | None = None) -> None:
        details = {"name": name} if name else {}
        super().__init__("Role with this name already exists", details)


class UserAlreadyExistsError(ConflictError):
    """Raised when an account with the same email or username exists."""

    def __init__(self, email: str | None = None) -> None:
        details = {"email": email} if email else {}
        super().__init__("A user with this email already exists", details)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(PortalAPIError):
    """Base class for validation errors."""

    status_code = 400


class InvalidStateError(ValidationError):
    """Raised when a registration is not in a state that allows the action."""

    def __init__(self, current_status: str) -> None:
        super().__init__(f"Registration is already {current_status}", {"status": current_status})


# =============================================================================
# Internal Errors (500)
# =============================================================================


class InternalError(PortalAPIError):
    """Raised when an unexpected store or verifier failure occurs."""

    status_code = 500
