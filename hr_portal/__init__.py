"""
HR Portal - Admin console and employee self-service client

Hexagonal architecture for session resolution, role-gated navigation and
record loading against either the REST API or a managed backend.

Usage:
    from hr_portal.container import build_rest_console
    from hr_portal import LoginMode, View

    async with build_rest_console() as console:
        await console.sign_in("admin", "secret", LoginMode.ADMIN)
        await console.wait_until_loaded()

        console.navigate(View.EMPLOYEES)
        for employee in console.employees(query="fin"):
            print(employee.name, employee.department)
"""

__version__ = "0.1.0"

from hr_portal.sdk.client import HRConsole
from hr_portal.domain.user import Role, Permissions, LoginMode
from hr_portal.domain.session import Session
from hr_portal.domain.views import View

__all__ = [
    "HRConsole",
    "Role",
    "Permissions",
    "LoginMode",
    "Session",
    "View",
]
