"""
Document Records Adapter - Implements RecordsPort over a document store.

Managed-backend binding. Collections:
- employees
- attendance
- leave_requests
- settings/company
- users/{uid} (console profiles, see DocumentProfileAdapter)

Account creation needs elevated privilege the client does not have, so new
employees go through the admin side-channel POST /admin/create-employee.
"""

from typing import Dict, Any, List, Optional
from hr_portal.errors import RequestFailed
from hr_portal.ports.records_port import RecordsPort
from hr_portal.ports.document_port import DocumentStorePort, ProfileStorePort
from hr_portal.http import AuthenticatedClient
from hr_portal.domain.session import Session
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
)


EMPLOYEES = "employees"
ATTENDANCE = "attendance"
LEAVE_REQUESTS = "leave_requests"
SETTINGS = "settings"
COMPANY_SETTINGS_ID = "company"
USERS = "users"

PROVISIONING_PATH = "/admin/create-employee"


class DocumentRecordsAdapter(RecordsPort):
    """RecordsPort backed by a document store."""

    def __init__(
        self,
        documents: DocumentStorePort,
        provisioning: Optional[AuthenticatedClient] = None,
    ):
        """
        Initialize document records adapter.

        Args:
            documents: Document store
            provisioning: Client for the account-provisioning endpoint
        """
        self._documents = documents
        self._provisioning = provisioning

    # Employees

    async def list_employees(self) -> List[Employee]:
        docs = await self._documents.list(EMPLOYEES, order_by="name")
        return [Employee.from_dict(doc) for doc in docs]

    async def create_employee(self, payload: Dict[str, Any]) -> Employee:
        """Provision the login account and employee record server-side."""
        if self._provisioning is None:
            raise RequestFailed("Employee provisioning endpoint is not configured")

        data = await self._provisioning.call(PROVISIONING_PATH, method="POST", json=payload)
        try:
            return Employee.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise RequestFailed("Malformed provisioning response") from e

    async def update_employee(self, employee_id: str, payload: Dict[str, Any]) -> Employee:
        doc = await self._documents.update(EMPLOYEES, employee_id, payload)
        return Employee.from_dict(doc)

    async def delete_employee(self, employee_id: str) -> None:
        await self._documents.delete(EMPLOYEES, employee_id)

    # Attendance

    async def list_attendance(self) -> List[AttendanceEntry]:
        docs = await self._documents.list(ATTENDANCE, order_by="date", descending=True)
        return [AttendanceEntry.from_dict(doc) for doc in docs]

    async def create_attendance(self, payload: Dict[str, Any]) -> AttendanceEntry:
        return AttendanceEntry.from_dict(await self._documents.add(ATTENDANCE, payload))

    async def update_attendance(self, entry_id: str, payload: Dict[str, Any]) -> AttendanceEntry:
        return AttendanceEntry.from_dict(await self._documents.update(ATTENDANCE, entry_id, payload))

    async def delete_attendance(self, entry_id: str) -> None:
        await self._documents.delete(ATTENDANCE, entry_id)

    # Leave

    async def list_leave(self) -> List[LeaveRequest]:
        docs = await self._documents.list(LEAVE_REQUESTS, order_by="start_date", descending=True)
        return [LeaveRequest.from_dict(doc) for doc in docs]

    async def create_leave(self, payload: Dict[str, Any]) -> LeaveRequest:
        return LeaveRequest.from_dict(await self._documents.add(LEAVE_REQUESTS, payload))

    async def update_leave(self, leave_id: str, payload: Dict[str, Any]) -> LeaveRequest:
        return LeaveRequest.from_dict(await self._documents.update(LEAVE_REQUESTS, leave_id, payload))

    async def delete_leave(self, leave_id: str) -> None:
        await self._documents.delete(LEAVE_REQUESTS, leave_id)

    # Settings

    async def get_settings(self) -> CompanySettings:
        return CompanySettings.from_dict(await self._documents.get(SETTINGS, COMPANY_SETTINGS_ID))

    async def save_settings(self, settings: CompanySettings) -> None:
        await self._documents.set(SETTINGS, COMPANY_SETTINGS_ID, settings.to_dict())

    # Employee self-service, scoped to the session's employee link

    async def my_profile(self, session: Session) -> Optional[Employee]:
        if not session.employee_id:
            return None
        doc = await self._documents.get(EMPLOYEES, session.employee_id)
        return Employee.from_dict(doc) if doc else None

    async def my_attendance(self, session: Session) -> List[AttendanceEntry]:
        if not session.employee_id:
            return []
        docs = await self._documents.list(
            ATTENDANCE,
            where={"employee_id": session.employee_id},
            order_by="date",
            descending=True,
        )
        return [AttendanceEntry.from_dict(doc) for doc in docs]

    async def my_leave(self, session: Session) -> List[LeaveRequest]:
        if not session.employee_id:
            return []
        docs = await self._documents.list(
            LEAVE_REQUESTS,
            where={"employee_id": session.employee_id},
            order_by="start_date",
            descending=True,
        )
        return [LeaveRequest.from_dict(doc) for doc in docs]

    async def apply_leave(self, session: Session, payload: Dict[str, Any]) -> LeaveRequest:
        if not session.employee_id:
            raise RequestFailed("No employee record is linked to this account", status_code=403)

        doc = dict(payload)
        doc.update({
            "employee_id": session.employee_id,
            "employee_name": session.display_name or session.username,
            "status": "Pending",
        })
        return LeaveRequest.from_dict(await self._documents.add(LEAVE_REQUESTS, doc))

    async def withdraw_leave(self, session: Session, leave_id: str) -> None:
        doc = await self._documents.get(LEAVE_REQUESTS, leave_id)
        if doc is None:
            return
        if doc.get("employee_id") != session.employee_id:
            raise RequestFailed("Missing or insufficient permissions.", status_code=403)
        await self._documents.delete(LEAVE_REQUESTS, leave_id)


class DocumentProfileAdapter(ProfileStorePort):
    """Console profiles stored as users/{uid}."""

    def __init__(self, documents: DocumentStorePort):
        self._documents = documents

    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        return await self._documents.get(USERS, uid)

    async def create_profile(self, uid: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._documents.set(USERS, uid, data)
