"""
Records Port - Interface for backend CRUD on HR records.

Implementations:
- RestRecordsAdapter: REST API
- DocumentRecordsAdapter: Document store plus provisioning side-channel

Admin operations act on every record. Employee-scoped operations receive
the session so the adapter can scope reads to the linked employee.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
from hr_portal.domain.session import Session
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
)


class RecordsPort(ABC):
    """Port: Read and mutate backend records."""

    # Employees

    @abstractmethod
    async def list_employees(self) -> List[Employee]:
        """List all employees."""
        pass

    @abstractmethod
    async def create_employee(self, payload: Dict[str, Any]) -> Employee:
        """
        Create an employee and its login account.

        Args:
            payload: Employee fields plus 'username' and 'password'

        Returns:
            Created employee as stored by the backend
        """
        pass

    @abstractmethod
    async def update_employee(self, employee_id: str, payload: Dict[str, Any]) -> Employee:
        """
        Update an employee.

        Returns:
            Updated employee as stored by the backend
        """
        pass

    @abstractmethod
    async def delete_employee(self, employee_id: str) -> None:
        """Delete an employee."""
        pass

    # Attendance

    @abstractmethod
    async def list_attendance(self) -> List[AttendanceEntry]:
        """List all attendance entries."""
        pass

    @abstractmethod
    async def create_attendance(self, payload: Dict[str, Any]) -> AttendanceEntry:
        """Create an attendance entry."""
        pass

    @abstractmethod
    async def update_attendance(self, entry_id: str, payload: Dict[str, Any]) -> AttendanceEntry:
        """Update an attendance entry."""
        pass

    @abstractmethod
    async def delete_attendance(self, entry_id: str) -> None:
        """Delete an attendance entry."""
        pass

    # Leave

    @abstractmethod
    async def list_leave(self) -> List[LeaveRequest]:
        """List all leave requests."""
        pass

    @abstractmethod
    async def create_leave(self, payload: Dict[str, Any]) -> LeaveRequest:
        """Create a leave request on behalf of an employee."""
        pass

    @abstractmethod
    async def update_leave(self, leave_id: str, payload: Dict[str, Any]) -> LeaveRequest:
        """Update a leave request (including approval status)."""
        pass

    @abstractmethod
    async def delete_leave(self, leave_id: str) -> None:
        """Delete a leave request."""
        pass

    # Settings

    @abstractmethod
    async def get_settings(self) -> CompanySettings:
        """Get company settings."""
        pass

    @abstractmethod
    async def save_settings(self, settings: CompanySettings) -> None:
        """Replace company settings."""
        pass

    # Employee self-service

    @abstractmethod
    async def my_profile(self, session: Session) -> Optional[Employee]:
        """Employee record linked to the session, if any."""
        pass

    @abstractmethod
    async def my_attendance(self, session: Session) -> List[AttendanceEntry]:
        """Attendance entries of the session's employee."""
        pass

    @abstractmethod
    async def my_leave(self, session: Session) -> List[LeaveRequest]:
        """Leave requests of the session's employee."""
        pass

    @abstractmethod
    async def apply_leave(self, session: Session, payload: Dict[str, Any]) -> LeaveRequest:
        """
        Submit a leave request for the session's employee.

        Args:
            session: Employee session
            payload: start_date, end_date, reason

        Returns:
            Created leave request (status set by the backend)
        """
        pass

    @abstractmethod
    async def withdraw_leave(self, session: Session, leave_id: str) -> None:
        """Delete one of the session's own leave requests."""
        pass
