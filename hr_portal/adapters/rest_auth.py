"""
REST Auth Adapter - Login, identity and password endpoints of the REST API.
"""

from dataclasses import dataclass
from typing import Dict, Any
from hr_portal.errors import RequestFailed
from hr_portal.http import AuthenticatedClient


@dataclass(frozen=True)
class LoginResult:
    """Token and user payload returned by POST /auth/login."""
    token: str
    user: Dict[str, Any]


class RestAuthAdapter:
    """
    REST authentication endpoints.

    - POST /auth/login {username, password} -> {token, user}
    - GET /auth/me -> {user}
    - POST /auth/change-password {currentPassword, newPassword}
    """

    def __init__(self, client: AuthenticatedClient):
        self._client = client

    async def login(self, username: str, password: str) -> LoginResult:
        """
        Exchange credentials for a token.

        Raises:
            RequestFailed: Bad credentials (server message, else "Login failed")
                or a response without a token
        """
        data = await self._client.call_anonymous(
            "/auth/login",
            json={"username": username, "password": password},
            failure_message="Login failed",
        )

        if not isinstance(data, dict) or not data.get("token"):
            raise RequestFailed("Login failed")

        return LoginResult(token=data["token"], user=data.get("user") or {})

    async def me(self) -> Dict[str, Any]:
        """
        Get the user behind the persisted token.

        Raises:
            Unauthorized: Token invalid or expired
            RequestFailed: Any other failure
        """
        data = await self._client.call("/auth/me")
        if not isinstance(data, dict):
            raise RequestFailed("Malformed identity response")
        return data.get("user") or {}

    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the signed-in user's password."""
        await self._client.call(
            "/auth/change-password",
            method="POST",
            json={"currentPassword": current_password, "newPassword": new_password},
        )
