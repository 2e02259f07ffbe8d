"""
Integration tests for the console against the REST API binding.
"""

import asyncio
import pytest
from hr_portal import LoginMode, Role, View
from hr_portal.errors import Unauthorized, RequestFailed, ValidationFailed, NotPermitted
from hr_portal.ports.credential_port import TOKEN_KEY, LOGIN_MODE_KEY


def assert_view_matches_session(console):
    session = console.session
    if session is None:
        assert console.active_view is None
    else:
        assert console.active_view.role is session.role


async def wait_for_call(api, call):
    while api.count(call) == 0:
        await asyncio.sleep(0)


class TestSignIn:
    """Sign-in, resume and sign-out."""

    async def test_admin_login_loads_console(self, console, api, credentials):
        session = await console.sign_in("admin", "secret", LoginMode.ADMIN)

        assert session.role is Role.ADMIN
        assert credentials.retrieve(TOKEN_KEY)
        assert console.active_view is View.DASHBOARD

        assert await console.wait_until_loaded()
        summary = console.summary()
        assert (summary.employees, summary.attendance, summary.leave_requests) == (2, 2, 1)
        assert console.cache.settings.company_name == "Acme"

    async def test_bad_credentials(self, console, credentials):
        with pytest.raises(RequestFailed) as exc:
            await console.sign_in("admin", "wrong")

        assert exc.value.message == "Invalid credentials"
        assert console.session is None
        assert credentials.retrieve(TOKEN_KEY) is None

    async def test_login_mode_from_fragment(self, console, credentials):
        assert console.login_mode is LoginMode.ADMIN

        console.set_login_mode_from_fragment("#/employee-login")

        assert console.login_mode is LoginMode.EMPLOYEE
        assert credentials.retrieve(LOGIN_MODE_KEY) == "employee"

    async def test_resume_on_startup(self, console, api, credentials):
        """A persisted token resumes the session."""
        credentials.store(TOKEN_KEY, api.token_for("admin"))

        session = await console.start()

        assert session.is_admin
        assert console.active_view is View.DASHBOARD
        assert await console.wait_until_loaded()
        assert len(console.employees()) == 2

    async def test_resume_with_stale_token(self, console, credentials):
        """Startup never raises; a rejected token is cleared."""
        credentials.store(TOKEN_KEY, "expired-token")

        assert await console.start() is None
        assert console.session is None
        assert credentials.retrieve(TOKEN_KEY) is None

    async def test_resume_without_token(self, console, api):
        assert await console.start() is None
        assert api.calls == []

    async def test_sign_out(self, console, credentials):
        await console.sign_in("admin", "secret")
        await console.wait_until_loaded()

        await console.sign_out()

        assert console.session is None
        assert console.active_view is None
        assert credentials.retrieve(TOKEN_KEY) is None
        assert console.cache.employees == []

    async def test_change_password(self, console, api):
        await console.sign_in("admin", "secret")

        with pytest.raises(ValidationFailed):
            await console.change_password("secret", "newpass", "newpas")
        assert api.count("POST /auth/change-password") == 0

        await console.change_password("secret", "newpass", "newpass")
        await console.sign_out()

        assert (await console.sign_in("admin", "newpass")).is_admin


class TestUnauthorized:
    """A 401 from any authenticated call tears the session down."""

    async def test_401_from_mutation(self, console, api, credentials):
        await console.sign_in("admin", "secret")
        await console.wait_until_loaded()
        console.navigate(View.SETTINGS)

        api.expire_all()
        with pytest.raises(Unauthorized):
            await console.delete_employee("2")

        assert console.session is None
        assert console.active_view is None
        assert credentials.retrieve(TOKEN_KEY) is None
        assert console.cache.employees == []

    async def test_401_from_background_load(self, console, api, credentials):
        await console.sign_in("admin", "secret")
        await console.wait_until_loaded()

        api.expire_all()

        assert not await console.refresh()
        assert console.session is None
        assert credentials.retrieve(TOKEN_KEY) is None


class TestAdminConsole:
    """Admin mutations patch the cache from the server's response."""

    @pytest.fixture(autouse=True)
    async def signed_in(self, console):
        await console.sign_in("admin", "secret")
        await console.wait_until_loaded()

    async def test_update_patches_without_refetch(self, console, api):
        fetched = api.count("GET /employees")

        updated = await console.update_employee("2", {"department": "Sales"})

        assert updated.department == "Sales"
        assert [e.id for e in console.employees()] == ["1", "2"]
        assert console.employees()[1].department == "Sales"
        assert console.employees()[1].name == "Bob Roe"
        assert api.count("GET /employees") == fetched

    async def test_create_employee_validation(self, console, api):
        """Five-character passwords never reach the server, six do."""
        form = {
            "name": "Carol",
            "email": "carol@corp.test",
            "role": "Designer",
            "department": "Product",
            "username": "carol",
            "tempPassword": "12345",
        }

        with pytest.raises(ValidationFailed):
            await console.create_employee(form)
        assert api.count("POST /employees") == 0

        form["tempPassword"] = "123456"
        created = await console.create_employee(form)

        assert api.count("POST /employees") == 1
        assert console.employees()[0].id == created.id
        assert created.username == "carol"

    async def test_create_employee_server_rejection(self, console, api):
        api.employees[0]["username"] = "carol"
        before = list(console.cache.employees)

        with pytest.raises(RequestFailed) as exc:
            await console.create_employee({
                "name": "Carol",
                "email": "carol@corp.test",
                "username": "carol",
                "tempPassword": "123456",
            })

        assert exc.value.message == "Username already exists"
        assert console.cache.employees == before

    async def test_delete_employee(self, console):
        await console.delete_employee("1")

        assert [e.id for e in console.employees()] == ["2"]

    async def test_filter(self, console):
        assert [e.id for e in console.employees("bob")] == ["2"]
        assert [e.id for e in console.employees(status="Active")] == ["1"]

    async def test_attendance(self, console):
        entry = await console.record_attendance("2", "2024-05-02", "Absent")

        assert console.cache.attendance[0] == entry
        assert entry.employee_name == "Bob Roe"

        with pytest.raises(ValidationFailed):
            await console.record_attendance("2", "2024-05-03", "Sick")

    async def test_approve_leave(self, console):
        approved = await console.record_leave(
            "1", "2024-06-01", "2024-06-03", "Trip", "Approved", leave_id="l1"
        )

        assert approved.status == "Approved"
        assert len(console.cache.leave_requests) == 1
        assert console.cache.leave_requests[0].status == "Approved"

    async def test_save_settings(self, console, api):
        await console.save_settings({
            "companyName": "Globex",
            "timezone": "Europe/Berlin",
            "defaultWorkHours": "7",
        })

        assert api.settings["companyName"] == "Globex"
        assert console.cache.settings.timezone == "Europe/Berlin"


class TestEmployeePortal:
    """Employee sessions only load what their permissions allow."""

    async def test_full_permissions(self, console, api):
        await console.sign_in("alice", "secret", LoginMode.EMPLOYEE)

        assert console.active_view is View.EMPLOYEE_DASHBOARD
        assert await console.wait_until_loaded()
        assert console.cache.profile.name == "Alice Doe"
        assert [a.id for a in console.cache.my_attendance] == ["a1"]
        assert api.count("GET /employees") == 0

    async def test_no_attendance_permission(self, console, api):
        api.set_permissions("alice", {"attendance_view": False, "leave_apply": True, "profile_view": True})

        await console.sign_in("alice", "secret", LoginMode.EMPLOYEE)

        assert await console.wait_until_loaded()
        assert api.count("GET /employee/attendance") == 0
        assert console.cache.my_attendance == []
        assert len(console.cache.my_leave) == 1
        assert not console.navigate(View.EMPLOYEE_ATTENDANCE)
        assert console.navigate(View.EMPLOYEE_LEAVE)

    async def test_apply_and_withdraw_leave(self, console, api):
        await console.sign_in("alice", "secret")
        await console.wait_until_loaded()

        request = await console.apply_leave("2024-07-01", "2024-07-05", "Holiday")

        assert request.status == "Pending"
        assert console.cache.my_leave[0].id == request.id

        await console.withdraw_leave(request.id)

        assert request.id not in [r.id for r in console.cache.my_leave]
        assert request.id not in [r["id"] for r in api.leave]

    async def test_employee_cannot_use_admin_actions(self, console, api):
        await console.sign_in("alice", "secret")

        with pytest.raises(NotPermitted):
            await console.delete_employee("1")
        assert api.count("DELETE /employees") == 0

    async def test_leave_apply_requires_permission(self, console, api):
        api.set_permissions("alice", {"attendance_view": True, "leave_apply": False, "profile_view": True})
        await console.sign_in("alice", "secret")

        with pytest.raises(NotPermitted):
            await console.apply_leave("2024-07-01", "2024-07-05")


class TestLateResponses:
    """Responses for a previous session are never applied."""

    async def test_load_after_logout_discarded(self, console, api):
        api.held.add("GET /employees")

        await console.sign_in("admin", "secret")
        await wait_for_call(api, "GET /employees")
        await console.sign_out()
        api.release()

        assert not await console.wait_until_loaded()
        assert console.cache.employees == []
        assert console.session is None

    async def test_mutation_after_relogin_not_applied(self, console, api):
        await console.sign_in("admin", "secret")
        await console.wait_until_loaded()

        api.held.add("PUT /employees")
        update = asyncio.create_task(console.update_employee("2", {"department": "Sales"}))
        await wait_for_call(api, "PUT /employees")

        await console.sign_out()
        await console.sign_in("admin", "secret")
        assert await console.wait_until_loaded()

        api.release()
        updated = await update

        # Returned to the caller, but the fresh cache is left alone
        assert updated.department == "Sales"
        assert console.cache.find_employee("2").department == "Finance"

    async def test_concurrent_logout_login(self, console):
        await console.sign_in("admin", "secret")

        await asyncio.gather(
            console.sign_out(),
            console.sign_in("alice", "secret"),
            console.sign_out(),
            console.sign_in("admin", "secret"),
        )
        await console.wait_until_loaded()

        assert_view_matches_session(console)

    async def test_role_switch_sequence(self, console):
        for username in ("admin", "alice", "admin", "alice"):
            await console.sign_out()
            assert_view_matches_session(console)
            await console.sign_in(username, "secret")
            assert_view_matches_session(console)
            for view in View:
                console.navigate(view)
                assert_view_matches_session(console)
