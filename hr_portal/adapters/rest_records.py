"""
REST Records Adapter - Implements RecordsPort over the REST API.

Admin endpoints take the record id as a query parameter:
GET/POST /employees, PUT/DELETE /employees?id=...
(same pattern for /attendance and /leave), GET/PUT /settings.

Employee endpoints are scoped by the bearer token:
/employee/me, /employee/attendance, /employee/leave[?id=...].
"""

from typing import Dict, Any, List, Optional, Callable, TypeVar
from hr_portal.errors import RequestFailed
from hr_portal.ports.records_port import RecordsPort
from hr_portal.http import AuthenticatedClient
from hr_portal.domain.session import Session
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
)


T = TypeVar("T")


def _parse_list(data: Any, parse: Callable[[Dict[str, Any]], T]) -> List[T]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise RequestFailed("Malformed list response")
    try:
        return [parse(item) for item in data]
    except (ValueError, TypeError, AttributeError) as e:
        raise RequestFailed("Malformed record in response") from e


def _parse_one(data: Any, parse: Callable[[Dict[str, Any]], T]) -> T:
    try:
        return parse(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise RequestFailed("Malformed record in response") from e


class RestRecordsAdapter(RecordsPort):
    """RecordsPort backed by the REST API."""

    def __init__(self, client: AuthenticatedClient):
        """
        Initialize REST records adapter.

        Args:
            client: Authenticated client (carries the bearer token)
        """
        self._client = client

    # Employees

    async def list_employees(self) -> List[Employee]:
        return _parse_list(await self._client.call("/employees"), Employee.from_dict)

    async def create_employee(self, payload: Dict[str, Any]) -> Employee:
        data = await self._client.call("/employees", method="POST", json=payload)
        return _parse_one(data, Employee.from_dict)

    async def update_employee(self, employee_id: str, payload: Dict[str, Any]) -> Employee:
        data = await self._client.call(
            "/employees", method="PUT", json=payload, params={"id": employee_id}
        )
        return _parse_one(data, Employee.from_dict)

    async def delete_employee(self, employee_id: str) -> None:
        await self._client.call("/employees", method="DELETE", params={"id": employee_id})

    # Attendance

    async def list_attendance(self) -> List[AttendanceEntry]:
        return _parse_list(await self._client.call("/attendance"), AttendanceEntry.from_dict)

    async def create_attendance(self, payload: Dict[str, Any]) -> AttendanceEntry:
        data = await self._client.call("/attendance", method="POST", json=payload)
        return _parse_one(data, AttendanceEntry.from_dict)

    async def update_attendance(self, entry_id: str, payload: Dict[str, Any]) -> AttendanceEntry:
        data = await self._client.call(
            "/attendance", method="PUT", json=payload, params={"id": entry_id}
        )
        return _parse_one(data, AttendanceEntry.from_dict)

    async def delete_attendance(self, entry_id: str) -> None:
        await self._client.call("/attendance", method="DELETE", params={"id": entry_id})

    # Leave

    async def list_leave(self) -> List[LeaveRequest]:
        return _parse_list(await self._client.call("/leave"), LeaveRequest.from_dict)

    async def create_leave(self, payload: Dict[str, Any]) -> LeaveRequest:
        data = await self._client.call("/leave", method="POST", json=payload)
        return _parse_one(data, LeaveRequest.from_dict)

    async def update_leave(self, leave_id: str, payload: Dict[str, Any]) -> LeaveRequest:
        data = await self._client.call(
            "/leave", method="PUT", json=payload, params={"id": leave_id}
        )
        return _parse_one(data, LeaveRequest.from_dict)

    async def delete_leave(self, leave_id: str) -> None:
        await self._client.call("/leave", method="DELETE", params={"id": leave_id})

    # Settings

    async def get_settings(self) -> CompanySettings:
        data = await self._client.call("/settings")
        if data is not None and not isinstance(data, dict):
            raise RequestFailed("Malformed settings response")
        return CompanySettings.from_dict(data)

    async def save_settings(self, settings: CompanySettings) -> None:
        await self._client.call("/settings", method="PUT", json=settings.to_dict())

    # Employee self-service (scoped server-side by the token)

    async def my_profile(self, session: Session) -> Optional[Employee]:
        data = await self._client.call("/employee/me")
        if data is None:
            return None
        return _parse_one(data, Employee.from_dict)

    async def my_attendance(self, session: Session) -> List[AttendanceEntry]:
        return _parse_list(
            await self._client.call("/employee/attendance"), AttendanceEntry.from_dict
        )

    async def my_leave(self, session: Session) -> List[LeaveRequest]:
        return _parse_list(await self._client.call("/employee/leave"), LeaveRequest.from_dict)

    async def apply_leave(self, session: Session, payload: Dict[str, Any]) -> LeaveRequest:
        data = await self._client.call("/employee/leave", method="POST", json=payload)
        return _parse_one(data, LeaveRequest.from_dict)

    async def withdraw_leave(self, session: Session, leave_id: str) -> None:
        await self._client.call("/employee/leave", method="DELETE", params={"id": leave_id})
