"""
Domain Models - Pure console entities.

No infrastructure dependencies. Domain logic only.
"""

from hr_portal.domain.user import Role, Permissions, LoginMode
from hr_portal.domain.session import Session
from hr_portal.domain.views import View, NavItem
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
    DashboardSummary,
    filter_employees,
)

__all__ = [
    "Role",
    "Permissions",
    "LoginMode",
    "Session",
    "View",
    "NavItem",
    "Employee",
    "AttendanceEntry",
    "LeaveRequest",
    "CompanySettings",
    "DashboardSummary",
    "filter_employees",
]
