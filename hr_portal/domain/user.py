"""
User Domain Model - Roles, permission flags and login mode.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional, Union
from enum import Enum


class Role(Enum):
    """Console roles. Determines view partition and backend scope."""
    ADMIN = "admin"          # Full console access
    EMPLOYEE = "employee"    # Self-service portal, narrowed by permissions

    @classmethod
    def parse(cls, value: Union["Role", str, None]) -> "Role":
        """
        Parse a role from a backend value.

        Args:
            value: Role member or role string

        Returns:
            Matching role

        Raises:
            ValueError: If the value is not a known role
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid role: {value!r}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid role: {value!r}") from None


class LoginMode(Enum):
    """Which login tab the user chose. A hint, never authoritative."""
    ADMIN = "admin"
    EMPLOYEE = "employee"

    @classmethod
    def from_fragment(cls, fragment: Optional[str]) -> "LoginMode":
        """Map a URL fragment (e.g. '#/employee-login') to a login mode."""
        if fragment == "#/employee-login":
            return cls.EMPLOYEE
        return cls.ADMIN

    @property
    def fragment(self) -> str:
        return f"#/{self.value}-login"


PERMISSION_NAMES = ("attendance_view", "leave_apply", "profile_view")


@dataclass(frozen=True)
class Permissions:
    """
    Permission flags narrowing what an employee session may see or do.

    Admin sessions always hold every flag.
    """
    attendance_view: bool = False
    leave_apply: bool = False
    profile_view: bool = False

    @classmethod
    def all(cls) -> "Permissions":
        return cls(attendance_view=True, leave_apply=True, profile_view=True)

    @classmethod
    def none(cls) -> "Permissions":
        return cls()

    def allows(self, permission: str) -> bool:
        """
        Check a named permission flag.

        Args:
            permission: One of attendance_view, leave_apply, profile_view

        Returns:
            True if granted. Unknown names are never granted.
        """
        if permission not in PERMISSION_NAMES:
            return False
        return getattr(self, permission)

    def to_dict(self) -> Dict[str, bool]:
        """Serialize to dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Permissions":
        """
        Deserialize from a backend payload.

        Missing flags are False and unknown keys are ignored.

        Raises:
            ValueError: If the payload is not a mapping or a flag is not a bool
        """
        if data is None:
            return cls.none()
        if not isinstance(data, dict):
            raise ValueError(f"Invalid permissions: {data!r}")

        flags = {}
        for name in PERMISSION_NAMES:
            value = data.get(name, False)
            if not isinstance(value, bool):
                raise ValueError(f"Permission {name} must be a boolean, got {value!r}")
            flags[name] = value
        return cls(**flags)
