"""
REST Console Example - Sign in against the HR REST API and edit records.

Reads HR_API_BASE (default http://localhost:3000/api). The token is kept in
~/.hr_portal/credentials.json, so a second run resumes the session.
"""

import asyncio
import sys

from hr_portal import LoginMode, View
from hr_portal.config import configure_logging
from hr_portal.container import build_rest_console
from hr_portal.errors import HRPortalError


async def main(username: str, password: str):
    configure_logging()

    async with build_rest_console() as console:
        session = await console.start()
        if session is None:
            try:
                session = await console.sign_in(username, password, LoginMode.ADMIN)
            except HRPortalError as e:
                print(f"Login failed: {e.message}")
                return

        print(f"Signed in as {session.username} ({session.role.value})")
        print("Views:", ", ".join(item.label for item in console.navigation()))

        if not await console.wait_until_loaded():
            print("Could not load records, showing last known state")

        summary = console.summary()
        print(f"\nEmployees: {summary.employees}")
        print(f"Attendance entries: {summary.attendance}")
        print(f"Leave requests: {summary.leave_requests}")

        if session.is_admin:
            console.navigate(View.EMPLOYEES)
            for employee in console.employees(status="Active"):
                print(f"  {employee.name:<24} {employee.department:<16} {employee.email}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: python examples/rest_console.py USERNAME PASSWORD")
        sys.exit(2)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
