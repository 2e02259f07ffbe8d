"""
Form validation run before any network call.
"""

from typing import Dict, Any, Iterable
from hr_portal.errors import ValidationFailed


MIN_PASSWORD_LENGTH = 6


def validate_new_employee(form: Dict[str, Any]) -> None:
    """
    Check the create-employee form.

    Raises:
        ValidationFailed: On missing credentials, short password or bad email
    """
    username = form.get("username") or ""
    password = form.get("tempPassword") or ""

    if not username or not password:
        raise ValidationFailed("Username and password are required for new employees.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("Password must be at least 6 characters.")
    if "@" not in (form.get("email") or ""):
        raise ValidationFailed("Please enter a valid email.")


def validate_password_change(new_password: str, confirmation: str) -> None:
    """
    Check the change-password form.

    Raises:
        ValidationFailed: On short password or confirmation mismatch
    """
    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("New password must be at least 6 characters.")
    if new_password != confirmation:
        raise ValidationFailed("New password and confirmation do not match.")


def validate_status(value: str, allowed: Iterable[str]) -> None:
    """Reject status values outside the closed set for a record type."""
    allowed = tuple(allowed)
    if value not in allowed:
        raise ValidationFailed(f"Status must be one of: {', '.join(allowed)}.")
