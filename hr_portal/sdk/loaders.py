"""
Data Loaders - Role-scoped record fetch, applied all-or-nothing.

One batch runs per session change (never per navigation). Failures are
swallowed: the dashboards keep their last known state.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, TypeVar
from hr_portal.domain.session import Session
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
)
from hr_portal.ports.records_port import RecordsPort
from hr_portal.ports.subscription import Subscription
from hr_portal.sdk.store import SessionStore


logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass
class RecordCache:
    """
    Last known server state plus locally applied edits.

    Admin lists and employee lists are kept apart; only the side matching
    the session role is populated.
    """
    # Admin console
    employees: List[Employee] = field(default_factory=list)
    attendance: List[AttendanceEntry] = field(default_factory=list)
    leave_requests: List[LeaveRequest] = field(default_factory=list)
    settings: CompanySettings = field(default_factory=CompanySettings)

    # Employee portal
    profile: Optional[Employee] = None
    my_attendance: List[AttendanceEntry] = field(default_factory=list)
    my_leave: List[LeaveRequest] = field(default_factory=list)

    def apply_admin(
        self,
        employees: List[Employee],
        attendance: List[AttendanceEntry],
        leave_requests: List[LeaveRequest],
        settings: CompanySettings,
    ) -> None:
        """Replace the admin lists in one step."""
        self.employees = list(employees)
        self.attendance = list(attendance)
        self.leave_requests = list(leave_requests)
        self.settings = settings

    def apply_employee(
        self,
        profile: Optional[Employee],
        attendance: List[AttendanceEntry],
        leave: List[LeaveRequest],
    ) -> None:
        """Replace the employee lists in one step."""
        self.profile = profile
        self.my_attendance = list(attendance)
        self.my_leave = list(leave)

    @staticmethod
    def upsert(records: List[R], record: R) -> List[R]:
        """
        Replace the record with the same id, or prepend it.

        Returns:
            New list (the input is not mutated)
        """
        record_id = getattr(record, "id")
        if any(getattr(item, "id") == record_id for item in records):
            return [record if getattr(item, "id") == record_id else item for item in records]
        return [record] + list(records)

    @staticmethod
    def remove(records: List[R], record_id: str) -> List[R]:
        """Drop the record with this id. Returns a new list."""
        return [item for item in records if getattr(item, "id") != record_id]

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        for employee in self.employees:
            if employee.id == employee_id:
                return employee
        return None

    def reset(self) -> None:
        """Forget everything (sign-out)."""
        self.apply_admin([], [], [], CompanySettings())
        self.apply_employee(None, [], [])


async def _skip(value: Any) -> Any:
    return value


class DataLoader:
    """
    Fetches the records a session may see.

    Admin: employees, attendance, leave and settings, in parallel.
    Employee: profile, attendance and leave, each only if the matching
    permission is granted; otherwise an empty result without a network call.

    Results are applied only if every fetch succeeded and the session that
    started the batch is still current.
    """

    def __init__(self, records: RecordsPort, store: SessionStore, cache: RecordCache):
        """
        Initialize data loader.

        Args:
            records: Backend records port
            store: Session store (generation check and change feed)
            cache: Cache to populate
        """
        self._records = records
        self._store = store
        self._cache = cache
        self._subscription: Optional[Subscription] = None
        self._task: Optional["asyncio.Task[bool]"] = None

    def attach(self) -> None:
        """Load on every change to a different non-null session."""
        if self._subscription is None:
            self._subscription = self._store.subscribe(self._on_session_change)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def _on_session_change(self, previous: Optional[Session], current: Optional[Session]) -> None:
        if current is None or current == previous:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Session changed outside an event loop, load skipped")
            return
        self._task = loop.create_task(self.load(current, self._store.generation))

    async def wait(self) -> bool:
        """
        Wait for the most recently scheduled batch.

        Returns:
            True if it applied its results, False otherwise (or nothing pending)
        """
        task = self._task
        if task is None:
            return False
        return await task

    async def load(self, session: Session, generation: Optional[int] = None) -> bool:
        """
        Run one batch for a session.

        Args:
            session: Session to load for
            generation: Store generation the batch belongs to (current if omitted)

        Returns:
            True if results were applied, False if the batch failed or went stale
        """
        if generation is None:
            generation = self._store.generation

        try:
            if session.is_admin:
                results = await asyncio.gather(
                    self._records.list_employees(),
                    self._records.list_attendance(),
                    self._records.list_leave(),
                    self._records.get_settings(),
                )
            else:
                results = await asyncio.gather(
                    self._records.my_profile(session)
                    if session.can("profile_view") else _skip(None),
                    self._records.my_attendance(session)
                    if session.can("attendance_view") else _skip([]),
                    self._records.my_leave(session)
                    if session.can("leave_apply") else _skip([]),
                )
        except Exception as e:
            logger.debug("Background load for %s failed: %s", session.user_id, e)
            return False

        if not self._store.is_current(generation):
            logger.debug("Discarding stale load for %s", session.user_id)
            return False

        if session.is_admin:
            self._cache.apply_admin(*results)
        else:
            self._cache.apply_employee(*results)
        return True
