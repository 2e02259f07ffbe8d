"""
Shared fixtures: an in-process fake of the HR REST API.
"""

import asyncio
import json
import secrets
from typing import Any, Dict, List, Optional, Set

import httpx
import pytest

from hr_portal.config import Settings
from hr_portal.container import build_rest_console
from hr_portal.adapters.memory_credential import MemoryCredentialAdapter


ADMIN_USER = {"id": "u-admin", "username": "admin", "role": "admin", "name": "Ada Admin"}

EMPLOYEE_USER = {
    "id": "u-alice",
    "username": "alice",
    "role": "employee",
    "employee_id": "1",
    "name": "Alice Doe",
    "permissions": {"attendance_view": True, "leave_apply": True, "profile_view": True},
}


class FakeHRApi:
    """
    Fake of the REST API behind http://hr.test/api.

    Tracks every request in 'calls' as "METHOD /path". Paths listed in
    'held' block until release() is called.
    """

    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {
            "admin": {"password": "secret", "user": dict(ADMIN_USER)},
            "alice": {"password": "secret", "user": dict(EMPLOYEE_USER)},
        }
        self.tokens: Dict[str, str] = {}
        self.calls: List[str] = []
        self.held: Set[str] = set()
        self._gate: Optional[asyncio.Event] = None

        self.employees = [
            {"id": "1", "name": "Alice Doe", "email": "alice@corp.test", "role": "Engineer",
             "department": "Engineering", "status": "Active"},
            {"id": "2", "name": "Bob Roe", "email": "bob@corp.test", "role": "Analyst",
             "department": "Finance", "status": "Onboarding"},
        ]
        self.attendance = [
            {"id": "a1", "employee_id": "1", "employee_name": "Alice Doe",
             "date": "2024-05-01", "status": "Present"},
            {"id": "a2", "employee_id": "2", "employee_name": "Bob Roe",
             "date": "2024-05-01", "status": "Remote"},
        ]
        self.leave = [
            {"id": "l1", "employee_id": "1", "employee_name": "Alice Doe",
             "start_date": "2024-06-01", "end_date": "2024-06-03",
             "reason": "Trip", "status": "Pending"},
        ]
        self.settings = {"companyName": "Acme", "timezone": "UTC", "defaultWorkHours": "8"}

    # Test controls

    def token_for(self, username: str) -> str:
        token = secrets.token_hex(8)
        self.tokens[token] = username
        return token

    def expire_all(self) -> None:
        self.tokens.clear()

    def set_permissions(self, username: str, permissions: Dict[str, bool]) -> None:
        self.accounts[username]["user"]["permissions"] = dict(permissions)

    @property
    def gate(self) -> asyncio.Event:
        if self._gate is None:
            self._gate = asyncio.Event()
        return self._gate

    def release(self) -> None:
        self.gate.set()

    def count(self, call: str) -> int:
        return self.calls.count(call)

    # Transport

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        call = f"{request.method} {path}"
        self.calls.append(call)

        if call in self.held:
            await self.gate.wait()

        body = json.loads(request.content) if request.content else None
        record_id = request.url.params.get("id")

        if call == "POST /auth/login":
            return self._login(body)

        auth = request.headers.get("Authorization", "")
        username = self.tokens.get(auth[len("Bearer "):]) if auth.startswith("Bearer ") else None
        if username is None:
            return httpx.Response(401, json={"message": "Unauthorized"})
        user = self.accounts[username]["user"]

        if call == "GET /auth/me":
            return httpx.Response(200, json={"user": user})
        if call == "POST /auth/change-password":
            return self._change_password(username, body)

        if path.startswith("/employee/"):
            return self._employee_route(request.method, path, user, body, record_id)
        if user["role"] != "admin":
            return httpx.Response(403, json={"message": "Forbidden"})
        return self._admin_route(request.method, path, body, record_id)

    def _login(self, body: Optional[Dict[str, Any]]) -> httpx.Response:
        body = body or {}
        account = self.accounts.get(body.get("username"))
        if account is None or account["password"] != body.get("password"):
            return httpx.Response(401, json={"message": "Invalid credentials"})
        return httpx.Response(200, json={
            "token": self.token_for(body["username"]),
            "user": account["user"],
        })

    def _change_password(self, username: str, body: Dict[str, Any]) -> httpx.Response:
        account = self.accounts[username]
        if account["password"] != body.get("currentPassword"):
            return httpx.Response(400, json={"message": "Current password is incorrect"})
        account["password"] = body["newPassword"]
        return httpx.Response(200, json={"message": "Password updated"})

    def _collection(self, path: str) -> Optional[List[Dict[str, Any]]]:
        return {"/employees": self.employees, "/attendance": self.attendance, "/leave": self.leave}.get(path)

    def _admin_route(self, method, path, body, record_id) -> httpx.Response:
        if path == "/settings":
            if method == "PUT":
                self.settings = dict(body)
            return httpx.Response(200, json=self.settings)

        records = self._collection(path)
        if records is None:
            return httpx.Response(404, json={"message": "Not found"})

        if method == "GET":
            return httpx.Response(200, json=records)
        if method == "POST":
            if path == "/employees" and any(
                r.get("username") == body.get("username") for r in records
            ):
                return httpx.Response(409, json={"message": "Username already exists"})
            record = dict(body, id=secrets.token_hex(4))
            record.pop("password", None)
            records.insert(0, record)
            return httpx.Response(201, json=record)

        matches = [r for r in records if r["id"] == record_id]
        if not matches:
            return httpx.Response(404, json={"message": "Not found"})
        if method == "PUT":
            matches[0].update(body)
            return httpx.Response(200, json=matches[0])
        records.remove(matches[0])
        return httpx.Response(204)

    def _employee_route(self, method, path, user, body, record_id) -> httpx.Response:
        employee_id = user.get("employee_id")
        if path == "/employee/me":
            profile = next((e for e in self.employees if e["id"] == employee_id), None)
            return httpx.Response(200, json=profile)
        if path == "/employee/attendance":
            return httpx.Response(200, json=[a for a in self.attendance if a["employee_id"] == employee_id])
        if path == "/employee/leave":
            if method == "GET":
                return httpx.Response(200, json=[r for r in self.leave if r["employee_id"] == employee_id])
            if method == "POST":
                record = dict(body, id=secrets.token_hex(4), employee_id=employee_id, status="Pending")
                self.leave.insert(0, record)
                return httpx.Response(201, json=record)
            self.leave[:] = [r for r in self.leave if r["id"] != record_id]
            return httpx.Response(204)
        return httpx.Response(404, json={"message": "Not found"})


@pytest.fixture
def api():
    return FakeHRApi()


@pytest.fixture
def credentials():
    return MemoryCredentialAdapter()


@pytest.fixture
def settings():
    return Settings(_env_file=None, api_base="http://hr.test/api", credential_backend="memory")


@pytest.fixture
async def console(api, credentials, settings):
    console = build_rest_console(settings, credentials=credentials, transport=api.transport)
    yield console
    await console.aclose()
