"""
Session Domain Model - The resolved record of who is logged in.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from hr_portal.domain.user import Role, Permissions


@dataclass(frozen=True)
class Session:
    """
    Session entity - resolved identity with role and permissions.

    Domain rules:
    - role is a closed enum, never a free-form backend string
    - admin sessions hold every permission and no employee link
    - employee_id is only present for employee sessions
    - sessions are immutable; a change produces a new session
    """
    user_id: str
    username: str
    role: Role = Role.EMPLOYEE
    permissions: Permissions = field(default_factory=Permissions.none)

    # Optional fields
    employee_id: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def create(
        cls,
        user_id: str,
        username: str,
        role: Any = Role.EMPLOYEE,
        permissions: Any = None,
        employee_id: Optional[str] = None,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> "Session":
        """
        Create a validated session.

        Args:
            user_id: Opaque identity reference
            username: Login name shown in the console
            role: Role member or role string
            permissions: Permissions instance or backend permission mapping
            employee_id: Linked employee record (employee role only)
            display_name: Optional display name
            email: Optional email

        Returns:
            New session instance

        Raises:
            ValueError: If role, permissions or user_id are invalid
        """
        if not user_id:
            raise ValueError("Session requires a user id")

        role = Role.parse(role)

        if role is Role.ADMIN:
            permissions = Permissions.all()
            employee_id = None
        elif not isinstance(permissions, Permissions):
            permissions = Permissions.from_dict(permissions)

        return cls(
            user_id=str(user_id),
            username=username or str(user_id),
            role=role,
            permissions=permissions,
            employee_id=str(employee_id) if employee_id else None,
            display_name=display_name,
            email=email,
        )

    @classmethod
    def minimal(
        cls,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> "Session":
        """Employee session with no permissions, built from a bare identity."""
        return cls.create(
            user_id=user_id,
            username=username or email or user_id,
            role=Role.EMPLOYEE,
            email=email,
        )

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def can(self, permission: str) -> bool:
        """Check a permission flag. Admin holds every flag."""
        return self.permissions.allows(permission)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "permissions": self.permissions.to_dict(),
            "employee_id": self.employee_id,
            "name": self.display_name,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """
        Deserialize from a backend user payload.

        Accepts 'id', 'user_id' or 'uid' as the identity key.

        Raises:
            ValueError: If the payload is not a mapping or fails validation
        """
        if not isinstance(data, dict):
            raise ValueError(f"Invalid user payload: {data!r}")

        user_id = data.get("id") or data.get("user_id") or data.get("uid")
        if user_id is None:
            raise ValueError("User payload has no id")

        return cls.create(
            user_id=str(user_id),
            username=data.get("username") or data.get("email") or str(user_id),
            role=data.get("role"),
            permissions=data.get("permissions"),
            employee_id=data.get("employee_id"),
            display_name=data.get("name"),
            email=data.get("email"),
        )
