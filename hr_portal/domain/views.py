"""
View Domain Model - Closed set of console view keys, partitioned by role.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum
from hr_portal.domain.user import Role


EMPLOYEE_PREFIX = "employee-"


class View(Enum):
    """Console view keys. Employee keys carry the 'employee-' prefix."""
    # Admin console
    DASHBOARD = "dashboard"
    EMPLOYEES = "employees"
    ATTENDANCE = "attendance"
    LEAVE = "leave"
    SETTINGS = "settings"

    # Employee portal
    EMPLOYEE_DASHBOARD = "employee-dashboard"
    EMPLOYEE_ATTENDANCE = "employee-attendance"
    EMPLOYEE_LEAVE = "employee-leave"
    EMPLOYEE_PROFILE = "employee-profile"

    @property
    def role(self) -> Role:
        """Role partition this view belongs to."""
        if self.value.startswith(EMPLOYEE_PREFIX):
            return Role.EMPLOYEE
        return Role.ADMIN

    @property
    def required_permission(self) -> Optional[str]:
        """Permission flag an employee needs to see this view, if any."""
        return _REQUIRED_PERMISSIONS.get(self)

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def default_for(cls, role: Role) -> "View":
        """Landing view for a role."""
        if role is Role.ADMIN:
            return cls.DASHBOARD
        return cls.EMPLOYEE_DASHBOARD

    @classmethod
    def partition(cls, role: Role) -> Tuple["View", ...]:
        """All view keys of a role, in navigation order."""
        return tuple(view for view in cls if view.role is role)


_REQUIRED_PERMISSIONS = {
    View.EMPLOYEE_ATTENDANCE: "attendance_view",
    View.EMPLOYEE_LEAVE: "leave_apply",
    View.EMPLOYEE_PROFILE: "profile_view",
}

_LABELS = {
    View.DASHBOARD: "Dashboard",
    View.EMPLOYEES: "Employees",
    View.ATTENDANCE: "Attendance",
    View.LEAVE: "Leave",
    View.SETTINGS: "Settings",
    View.EMPLOYEE_DASHBOARD: "My Dashboard",
    View.EMPLOYEE_ATTENDANCE: "My Attendance",
    View.EMPLOYEE_LEAVE: "My Leave",
    View.EMPLOYEE_PROFILE: "My Profile",
}


@dataclass(frozen=True)
class NavItem:
    """A navigation control shown to the current session."""
    view: View
    label: str

    @classmethod
    def for_view(cls, view: View) -> "NavItem":
        return cls(view=view, label=view.label)
