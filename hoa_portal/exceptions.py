# hoa_portal/exceptions.py
"""
Error taxonomy for the privileged workflows.

Each error carries the HTTP status it is rendered with by the exception
handler in main.py:

    Unauthorized                      -> 401
    Forbidden                         -> 403
    ValidationError, InvalidTransition,
    StaleState, DuplicateEmail,
    NotFound                          -> 400

All of them are terminal for the request; nothing here is retried.
"""

from typing import Any, Dict, Optional


class HOAPortalError(Exception):
    """Base exception for all request-terminating errors."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class Unauthorized(HOAPortalError):
    """Missing, malformed, expired or unknown bearer credential."""

    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(HOAPortalError):
    """Caller role not allowed, or target tenant is not the caller's."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ValidationError(HOAPortalError):
    code = "VALIDATION_ERROR"


class NotFound(HOAPortalError):
    code = "NOT_FOUND"


class DuplicateEmail(HOAPortalError):
    code = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        super().__init__(
            f"Email address {email} is already in use. Please use a different email.",
            details={"email": email},
        )
        self.email = email


class InvalidTransition(HOAPortalError):
    """Requested action is not legal from the entity's current status."""

    code = "INVALID_TRANSITION"

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(message, details={"current_status": current_status})
        self.current_status = current_status


class StaleState(InvalidTransition):
    """The record changed status between read and conditional write."""

    code = "STALE_STATE"
