"""
Unit tests for record models, the employee filter and the record cache.
"""

import pytest
from hr_portal.domain.records import (
    Employee,
    AttendanceEntry,
    LeaveRequest,
    CompanySettings,
    filter_employees,
)
from hr_portal.domain.user import Permissions
from hr_portal.sdk.loaders import RecordCache


@pytest.fixture
def staff():
    return [
        Employee(id="1", name="Alice Doe", email="alice@corp.test", department="Finance"),
        Employee(id="2", name="Bob Roe", email="bob@corp.test", status="Onboarding"),
        Employee(id="3", name="Carol", email="carol@other.test", status="Inactive"),
    ]


def test_employee_from_dict():
    employee = Employee.from_dict({
        "id": 5,
        "name": "Dan",
        "email": "dan@corp.test",
        "permissions": {"leave_apply": True},
    })

    assert employee.id == "5"
    assert employee.status == "Active"
    assert employee.permissions == Permissions(leave_apply=True)


def test_employee_permissions_default_to_all():
    employee = Employee.from_dict({"id": "1", "name": "Dan", "email": "d@corp.test"})

    assert employee.permissions == Permissions.all()


def test_record_requires_id():
    with pytest.raises(ValueError):
        AttendanceEntry.from_dict({"employee_id": "1", "date": "2024-05-01"})


def test_leave_request_from_dict():
    request = LeaveRequest.from_dict({
        "id": "l1",
        "employee_id": 3,
        "start_date": "2024-06-01",
        "end_date": "2024-06-03",
    })

    assert request.employee_id == "3"
    assert request.status == "Pending"


def test_null_fields_become_empty_strings():
    """Explicit nulls in stored records read back as defaults."""
    employee = Employee.from_dict({"id": "9", "name": "Nobody", "email": None, "status": None})
    entry = AttendanceEntry.from_dict({"id": "a1", "employee_id": None, "date": None, "employee_name": None})
    request = LeaveRequest.from_dict({
        "id": "l2",
        "employee_id": "9",
        "start_date": None,
        "end_date": None,
        "reason": None,
        "status": None,
    })

    assert employee.email == ""
    assert employee.role == ""
    assert employee.status == "Active"
    assert (entry.employee_id, entry.date, entry.employee_name) == ("", "", "")
    assert entry.status == "Present"
    assert (request.start_date, request.end_date, request.reason) == ("", "", "")
    assert request.status == "Pending"


def test_settings_wire_format():
    """Settings travel with camelCase keys."""
    settings = CompanySettings.from_dict({
        "companyName": "Acme",
        "timezone": "UTC",
        "defaultWorkHours": 8,
    })

    assert settings.company_name == "Acme"
    assert settings.default_work_hours == "8"
    assert settings.to_dict() == {
        "companyName": "Acme",
        "timezone": "UTC",
        "defaultWorkHours": "8",
    }
    assert CompanySettings.from_dict(None) == CompanySettings()


class TestFilterEmployees:
    """Test the employee table filter."""

    def test_no_filter(self, staff):
        assert filter_employees(staff) == staff

    def test_query_matches_name_or_email(self, staff):
        assert [e.id for e in filter_employees(staff, "DOE")] == ["1"]
        assert [e.id for e in filter_employees(staff, "corp.test")] == ["1", "2"]

    def test_status(self, staff):
        assert [e.id for e in filter_employees(staff, status="Inactive")] == ["3"]
        assert [e.id for e in filter_employees(staff, "bob", "Active")] == []

    def test_record_with_null_email(self, staff):
        nobody = Employee.from_dict({"id": "9", "name": "Nobody", "email": None})

        assert filter_employees(staff + [nobody], "zzz") == []
        assert [e.id for e in filter_employees(staff + [nobody], "nobody")] == ["9"]


class TestRecordCache:
    """Test cache patching."""

    def test_upsert_replaces_in_place(self, staff):
        moved = Employee(id="2", name="Bob Roe", email="bob@corp.test", department="Sales")

        patched = RecordCache.upsert(staff, moved)

        assert [e.id for e in patched] == ["1", "2", "3"]
        assert patched[1].department == "Sales"
        assert staff[1].department == ""

    def test_upsert_prepends_new(self, staff):
        new = Employee(id="9", name="Zed", email="zed@corp.test")

        assert [e.id for e in RecordCache.upsert(staff, new)] == ["9", "1", "2", "3"]

    def test_remove(self, staff):
        assert [e.id for e in RecordCache.remove(staff, "2")] == ["1", "3"]

    def test_reset(self, staff):
        cache = RecordCache(employees=staff, settings=CompanySettings(company_name="Acme"))

        cache.reset()

        assert cache.employees == []
        assert cache.settings == CompanySettings()
        assert cache.profile is None
