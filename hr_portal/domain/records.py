"""
Record Domain Models - Employees, attendance, leave and company settings.

Records are owned by the backend. The client only caches them.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Iterable
from hr_portal.domain.user import Permissions


EMPLOYEE_STATUSES = ("Active", "Onboarding", "Inactive")
ATTENDANCE_STATUSES = ("Present", "Remote", "Absent")
LEAVE_STATUSES = ("Pending", "Approved", "Rejected")

ALL_STATUSES = "All"


def _record_id(data: Dict[str, Any]) -> str:
    if not isinstance(data, dict):
        raise ValueError(f"Invalid record payload: {data!r}")
    record_id = data.get("id")
    if record_id is None:
        raise ValueError("Record payload has no id")
    return str(record_id)


@dataclass
class Employee:
    """
    Employee record.

    'role' is the job title, not the console role.
    """
    id: str
    name: str
    email: str
    role: str = ""
    department: str = ""
    status: str = "Active"
    permissions: Permissions = field(default_factory=Permissions.all)
    username: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "department": self.department,
            "status": self.status,
            "permissions": self.permissions.to_dict(),
        }
        if self.username:
            data["username"] = self.username
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Employee":
        """Deserialize from dict."""
        permissions = data.get("permissions")
        return cls(
            id=_record_id(data),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=data.get("role") or "",
            department=data.get("department") or "",
            status=data.get("status") or "Active",
            permissions=Permissions.from_dict(permissions) if permissions is not None else Permissions.all(),
            username=data.get("username"),
        )


@dataclass
class AttendanceEntry:
    """One attendance mark for one employee on one date."""
    id: str
    employee_id: str
    date: str
    status: str = "Present"
    employee_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "date": self.date,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttendanceEntry":
        """Deserialize from dict."""
        return cls(
            id=_record_id(data),
            employee_id=str(data.get("employee_id") or ""),
            date=data.get("date") or "",
            status=data.get("status") or "Present",
            employee_name=data.get("employee_name") or "",
        )


@dataclass
class LeaveRequest:
    """A leave request spanning start_date..end_date."""
    id: str
    employee_id: str
    start_date: str
    end_date: str
    reason: str = ""
    status: str = "Pending"
    employee_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "reason": self.reason,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaveRequest":
        """Deserialize from dict."""
        return cls(
            id=_record_id(data),
            employee_id=str(data.get("employee_id") or ""),
            start_date=data.get("start_date") or "",
            end_date=data.get("end_date") or "",
            reason=data.get("reason") or "",
            status=data.get("status") or "Pending",
            employee_name=data.get("employee_name") or "",
        )


@dataclass
class CompanySettings:
    """Company-wide settings. Wire format uses camelCase keys."""
    company_name: str = ""
    timezone: str = ""
    default_work_hours: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format."""
        return {
            "companyName": self.company_name,
            "timezone": self.timezone,
            "defaultWorkHours": self.default_work_hours,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CompanySettings":
        """Deserialize from the wire format. Missing values become ''."""
        data = data or {}
        hours = data.get("defaultWorkHours")
        return cls(
            company_name=data.get("companyName") or "",
            timezone=data.get("timezone") or "",
            default_work_hours=str(hours) if hours else "",
        )


@dataclass(frozen=True)
class DashboardSummary:
    """Counts shown on the dashboards."""
    employees: int = 0
    attendance: int = 0
    leave_requests: int = 0


def filter_employees(
    employees: Iterable[Employee],
    query: str = "",
    status: str = ALL_STATUSES,
) -> List[Employee]:
    """
    Filter the employee table by free-text query and status.

    Args:
        employees: Employees to filter
        query: Case-insensitive substring of name or email
        status: Exact status, or 'All'

    Returns:
        Matching employees, original order kept
    """
    needle = (query or "").lower()
    status = status or ALL_STATUSES

    matches = []
    for employee in employees:
        if needle and needle not in employee.name.lower() and needle not in employee.email.lower():
            continue
        if status != ALL_STATUSES and employee.status != status:
            continue
        matches.append(employee)
    return matches
