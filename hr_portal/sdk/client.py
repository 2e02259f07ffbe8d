"""
HR Console - High-level SDK for the admin console and employee portal.

Wires the session resolver, view router, data loader and record cache, and
exposes the console's actions.
"""

import logging
from typing import Optional, Dict, Any, List, Union
from hr_portal.errors import NotPermitted, ProfileResolutionFailed
from hr_portal.validation import (
    validate_new_employee,
    validate_password_change,
    validate_status,
)
from hr_portal.domain.session import Session
from hr_portal.domain.user import LoginMode, Permissions
from hr_portal.domain.views import View, NavItem
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
    DashboardSummary,
    EMPLOYEE_STATUSES,
    ATTENDANCE_STATUSES,
    LEAVE_STATUSES,
    ALL_STATUSES,
    filter_employees,
)
from hr_portal.ports.records_port import RecordsPort
from hr_portal.http import AuthenticatedClient
from hr_portal.sdk.loaders import DataLoader, RecordCache
from hr_portal.sdk.resolver import SessionResolver
from hr_portal.sdk.router import ViewRouter


logger = logging.getLogger(__name__)

EMPLOYEE_FIELDS = ("name", "email", "role", "department", "status")


class HRConsole:
    """
    HR console session coordinator.

    Mutations are single fire-and-wait calls. On success the cache is patched
    from the server's response; on failure the cache is untouched and the
    error propagates. A response that lands after the session changed is
    returned but not applied.

    Example:
        from hr_portal.container import build_rest_console

        async with build_rest_console() as console:
            await console.sign_in("admin", "secret", LoginMode.ADMIN)
            await console.wait_until_loaded()
            print(console.summary())
            await console.update_employee(emp_id, {"department": "Finance"})
    """

    def __init__(
        self,
        resolver: SessionResolver,
        records: RecordsPort,
        cache: Optional[RecordCache] = None,
        http: Optional[AuthenticatedClient] = None,
    ):
        """
        Initialize the console.

        Args:
            resolver: Session resolver for the chosen backend binding
            records: Records port for the same binding
            cache: Record cache (new empty cache if omitted)
            http: HTTP client owned by the console, closed by aclose()
        """
        self._resolver = resolver
        self._records = records
        self._store = resolver.store
        self._http = http
        self.cache = cache or RecordCache()

        self.router = ViewRouter(self._store)
        self.loader = DataLoader(records, self._store, self.cache)
        self.loader.attach()
        self._subscription = self._store.subscribe(self._on_session_change)

    # Session

    @property
    def session(self) -> Optional[Session]:
        return self._store.session

    @property
    def warning(self) -> Optional[ProfileResolutionFailed]:
        """Non-fatal sign-in warning to show as a banner."""
        return self._resolver.warning

    @property
    def login_mode(self) -> LoginMode:
        return self._resolver.login_mode

    def set_login_mode(self, mode: LoginMode) -> None:
        self._resolver.set_login_mode(mode)

    def set_login_mode_from_fragment(self, fragment: Optional[str]) -> LoginMode:
        """Follow a URL fragment such as '#/employee-login'."""
        mode = LoginMode.from_fragment(fragment)
        self._resolver.set_login_mode(mode)
        return mode

    async def start(self) -> Optional[Session]:
        """Resume a persisted session, if any. Never raises."""
        return await self._resolver.resume()

    async def sign_in(
        self,
        username: str,
        password: str,
        mode: Optional[LoginMode] = None,
    ) -> Optional[Session]:
        """
        Sign in and publish the session.

        Raises:
            RequestFailed: Credentials rejected
        """
        return await self._resolver.sign_in(username, password, mode)

    async def sign_out(self) -> None:
        await self._resolver.sign_out()

    async def change_password(self, current: str, new: str, confirm: str) -> None:
        """
        Change the signed-in user's password.

        Raises:
            ValidationFailed: New password too short or not confirmed
            NotPermitted: Nobody is signed in
        """
        self._require_session()
        validate_password_change(new, confirm)
        await self._resolver.change_password(current, new)

    def _on_session_change(self, previous: Optional[Session], current: Optional[Session]) -> None:
        if current is None or (previous is not None and previous.user_id != current.user_id):
            self.cache.reset()

    # Navigation

    @property
    def active_view(self) -> Optional[View]:
        return self.router.active

    def navigation(self) -> List[NavItem]:
        return self.router.navigation()

    def navigate(self, view: Union[View, str]) -> bool:
        return self.router.navigate(View(view))

    # Loading

    async def wait_until_loaded(self) -> bool:
        """Wait for the batch started by the last session change."""
        return await self.loader.wait()

    async def refresh(self) -> bool:
        """Reload the current session's records."""
        session = self._store.session
        if session is None:
            return False
        return await self.loader.load(session)

    # Guards

    def _require_session(self) -> Session:
        session = self._store.session
        if session is None:
            raise NotPermitted("You are signed out.")
        return session

    def _require_admin(self) -> Session:
        session = self._require_session()
        if not session.is_admin:
            raise NotPermitted("Only administrators can do that.")
        return session

    def _require_permission(self, permission: str) -> Session:
        session = self._require_session()
        if not session.can(permission):
            raise NotPermitted("Your account does not have access to that.")
        return session

    def _employee_name(self, employee_id: str) -> str:
        employee = self.cache.find_employee(employee_id)
        return employee.name if employee else ""

    # Employees (admin)

    def employees(self, query: str = "", status: str = ALL_STATUSES) -> List[Employee]:
        """Cached employees matching the table's search box and status filter."""
        return filter_employees(self.cache.employees, query, status)

    async def create_employee(self, form: Dict[str, Any]) -> Employee:
        """
        Create an employee with a login account.

        Args:
            form: name, email, role, department, status, username,
                tempPassword and optional permissions

        Raises:
            ValidationFailed: Missing credentials, short password, bad email
        """
        self._require_admin()
        validate_new_employee(form)
        status = form.get("status") or "Active"
        validate_status(status, EMPLOYEE_STATUSES)

        permissions = form.get("permissions")
        payload = {
            "name": form.get("name", ""),
            "email": form["email"],
            "role": form.get("role", ""),
            "department": form.get("department", ""),
            "status": status,
            "username": form["username"],
            "password": form["tempPassword"],
            "permissions": Permissions.from_dict(permissions).to_dict()
            if permissions is not None else Permissions.all().to_dict(),
        }

        generation = self._store.generation
        created = await self._records.create_employee(payload)
        if self._store.is_current(generation):
            self.cache.employees = RecordCache.upsert(self.cache.employees, created)
        return created

    async def update_employee(self, employee_id: str, form: Dict[str, Any]) -> Employee:
        """
        Update an employee. Fields missing from the form keep their cached value.
        """
        self._require_admin()

        current = self.cache.find_employee(employee_id)
        payload = current.to_dict() if current else {}
        payload.pop("id", None)
        payload.pop("username", None)
        payload.update({k: form[k] for k in EMPLOYEE_FIELDS if k in form})
        if "permissions" in form:
            payload["permissions"] = Permissions.from_dict(form["permissions"]).to_dict()
        if "status" in payload:
            validate_status(payload["status"], EMPLOYEE_STATUSES)

        generation = self._store.generation
        updated = await self._records.update_employee(employee_id, payload)
        if self._store.is_current(generation):
            self.cache.employees = RecordCache.upsert(self.cache.employees, updated)
        return updated

    async def delete_employee(self, employee_id: str) -> None:
        self._require_admin()

        generation = self._store.generation
        await self._records.delete_employee(employee_id)
        if self._store.is_current(generation):
            self.cache.employees = RecordCache.remove(self.cache.employees, employee_id)

    # Attendance (admin)

    async def record_attendance(
        self,
        employee_id: str,
        date: str,
        status: str = "Present",
        entry_id: Optional[str] = None,
    ) -> AttendanceEntry:
        """
        Create an attendance entry, or update it when entry_id is given.
        """
        self._require_admin()
        validate_status(status, ATTENDANCE_STATUSES)

        payload = {
            "employee_id": employee_id,
            "employee_name": self._employee_name(employee_id),
            "date": date,
            "status": status,
        }

        generation = self._store.generation
        if entry_id is None:
            entry = await self._records.create_attendance(payload)
        else:
            entry = await self._records.update_attendance(entry_id, payload)
        if self._store.is_current(generation):
            self.cache.attendance = RecordCache.upsert(self.cache.attendance, entry)
        return entry

    async def delete_attendance(self, entry_id: str) -> None:
        self._require_admin()

        generation = self._store.generation
        await self._records.delete_attendance(entry_id)
        if self._store.is_current(generation):
            self.cache.attendance = RecordCache.remove(self.cache.attendance, entry_id)

    # Leave (admin)

    async def record_leave(
        self,
        employee_id: str,
        start_date: str,
        end_date: str,
        reason: str = "",
        status: str = "Pending",
        leave_id: Optional[str] = None,
    ) -> LeaveRequest:
        """
        Create a leave request, or update it (e.g. approve) when leave_id is given.
        """
        self._require_admin()
        validate_status(status, LEAVE_STATUSES)

        payload = {
            "employee_id": employee_id,
            "employee_name": self._employee_name(employee_id),
            "start_date": start_date,
            "end_date": end_date,
            "reason": reason,
            "status": status,
        }

        generation = self._store.generation
        if leave_id is None:
            request = await self._records.create_leave(payload)
        else:
            request = await self._records.update_leave(leave_id, payload)
        if self._store.is_current(generation):
            self.cache.leave_requests = RecordCache.upsert(self.cache.leave_requests, request)
        return request

    async def delete_leave(self, leave_id: str) -> None:
        self._require_admin()

        generation = self._store.generation
        await self._records.delete_leave(leave_id)
        if self._store.is_current(generation):
            self.cache.leave_requests = RecordCache.remove(self.cache.leave_requests, leave_id)

    # Settings (admin)

    async def save_settings(self, settings: Union[CompanySettings, Dict[str, Any]]) -> CompanySettings:
        self._require_admin()
        if not isinstance(settings, CompanySettings):
            settings = CompanySettings.from_dict(settings)

        generation = self._store.generation
        await self._records.save_settings(settings)
        if self._store.is_current(generation):
            self.cache.settings = settings
        return settings

    # Employee self-service

    async def apply_leave(self, start_date: str, end_date: str, reason: str = "") -> LeaveRequest:
        """
        Submit a leave request for the signed-in employee.

        Raises:
            NotPermitted: Session lacks leave_apply
        """
        session = self._require_permission("leave_apply")

        generation = self._store.generation
        request = await self._records.apply_leave(session, {
            "start_date": start_date,
            "end_date": end_date,
            "reason": reason,
        })
        if self._store.is_current(generation):
            self.cache.my_leave = RecordCache.upsert(self.cache.my_leave, request)
        return request

    async def withdraw_leave(self, leave_id: str) -> None:
        session = self._require_permission("leave_apply")

        generation = self._store.generation
        await self._records.withdraw_leave(session, leave_id)
        if self._store.is_current(generation):
            self.cache.my_leave = RecordCache.remove(self.cache.my_leave, leave_id)

    # Dashboards

    def summary(self) -> DashboardSummary:
        """Counts for the active role's dashboard."""
        session = self._store.session
        if session is None:
            return DashboardSummary()
        if session.is_admin:
            return DashboardSummary(
                employees=len(self.cache.employees),
                attendance=len(self.cache.attendance),
                leave_requests=len(self.cache.leave_requests),
            )
        return DashboardSummary(
            attendance=len(self.cache.my_attendance),
            leave_requests=len(self.cache.my_leave),
        )

    # Lifecycle

    def close(self) -> None:
        """Release every subscription."""
        self._subscription.close()
        self.loader.close()
        self.router.close()
        self._resolver.close()

    async def aclose(self) -> None:
        self.close()
        if self._http is not None:
            await self._http.aclose()

    async def __aenter__(self) -> "HRConsole":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
