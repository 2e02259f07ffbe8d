"""
Managed Backend Example - First admin login with in-memory provider and store.

Shows the one-time admin self-provisioning path, the profile fallback
warning and an employee portal session.
"""

import asyncio

from hr_portal import LoginMode
from hr_portal.adapters import (
    MemoryCredentialAdapter,
    MemoryDocumentStore,
    MemoryIdentityProvider,
)
from hr_portal.config import Settings
from hr_portal.container import build_managed_console


async def main():
    provider = MemoryIdentityProvider()
    documents = MemoryDocumentStore()

    provider.add_account("boss@acme.test", "s3cret!", uid="uid-boss", role="admin")
    provider.add_account("alice@acme.test", "s3cret!", uid="uid-alice", role="employee")

    employee = await documents.add("employees", {
        "name": "Alice Doe",
        "email": "alice@acme.test",
        "department": "Engineering",
    })
    await documents.set("users", "uid-alice", {
        "role": "employee",
        "username": "alice",
        "employee_id": employee["id"],
        "permissions": {"attendance_view": False, "leave_apply": True, "profile_view": True},
    })

    settings = Settings(_env_file=None, credential_backend="memory")
    async with build_managed_console(
        provider, documents, settings, credentials=MemoryCredentialAdapter()
    ) as console:
        # First admin login provisions users/uid-boss
        session = await console.sign_in("boss@acme.test", "s3cret!", LoginMode.ADMIN)
        print(f"Admin: {session.username} -> {console.active_view.value}")
        print(f"Profile created: {await documents.get('users', 'uid-boss')}")
        await console.sign_out()

        # Employee portal; no attendance_view, so no attendance view or fetch
        session = await console.sign_in("alice@acme.test", "s3cret!", LoginMode.EMPLOYEE)
        await console.wait_until_loaded()
        print(f"\nEmployee: {session.username} -> {console.active_view.value}")
        print("Views:", ", ".join(item.label for item in console.navigation()))

        request = await console.apply_leave("2024-07-01", "2024-07-05", "Summer trip")
        print(f"Leave request {request.id}: {request.status}")
        await console.sign_out()

        # Profile store unavailable: minimal session plus a warning
        documents.deny("users")
        session = await console.sign_in("boss@acme.test", "s3cret!")
        print(f"\nFallback: {session.role.value}, warning: {console.warning}")


if __name__ == "__main__":
    asyncio.run(main())
