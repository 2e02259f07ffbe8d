"""
Errors - Failure taxonomy for console operations.

- Unauthorized: credential invalid or expired. Session already torn down.
- RequestFailed: backend rejected the call or was unreachable.
- ProfileResolutionFailed: identity resolved but its profile could not be.
- ValidationFailed: client-side precondition failed. No network call was made.
"""

from typing import Optional


class HRPortalError(Exception):
    """Base class for console errors."""

    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(HRPortalError):
    """Backend answered 401. Callers must not retry."""

    default_message = "Unauthorized"


class RequestFailed(HRPortalError):
    """Backend answered with a non-success status, or could not be reached."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProfileResolutionFailed(HRPortalError):
    """Profile fetch or creation failed after sign-in. Never fatal."""

    default_message = "Signed in, but your profile could not be loaded."


class ValidationFailed(HRPortalError):
    """Form precondition failed before submission."""

    default_message = "Invalid input"


class NotPermitted(ValidationFailed):
    """Current session may not perform this action."""

    default_message = "Not permitted"
