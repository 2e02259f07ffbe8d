"""
Authenticated Request Client - Bearer-token JSON calls to the backend.

Every call carries the persisted token. A 401 tears the session down and
raises Unauthorized; other failures raise RequestFailed.
"""

import logging
from typing import Any, Callable, Dict, Optional
import httpx
from hr_portal.errors import Unauthorized, RequestFailed
from hr_portal.ports.credential_port import CredentialStorePort, TOKEN_KEY


logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Request failed"


class AuthenticatedClient:
    """
    Async JSON client that attaches the bearer credential.

    Uses httpx.AsyncClient. Pass 'transport' to run against an
    httpx.MockTransport in tests.

    Example:
        client = AuthenticatedClient(
            base_url="http://localhost:3000/api",
            credentials=MemoryCredentialAdapter(),
            on_unauthorized=resolver.teardown,
        )
        employees = await client.call("/employees")
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialStorePort,
        on_unauthorized: Optional[Callable[[], None]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL (paths are appended to it)
            credentials: Store holding the bearer token
            on_unauthorized: Session teardown, run on any 401
            timeout: Request timeout in seconds
            transport: Optional httpx transport
        """
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._on_unauthorized = on_unauthorized
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_unauthorized_handler(self, handler: Callable[[], None]) -> None:
        """Install the session teardown run on 401."""
        self._on_unauthorized = handler

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    @staticmethod
    def _headers(token: Optional[str]) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}" if token else "",
        }

    async def _send(
        self,
        method: str,
        path: str,
        headers: Dict[str, str],
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                self._url(path),
                headers=headers,
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, path, e)
            raise RequestFailed(DEFAULT_FAILURE_MESSAGE) from e

    @staticmethod
    def _failure(response: httpx.Response, default: str) -> RequestFailed:
        """Build RequestFailed from the server's 'message' field, if any."""
        message = None
        try:
            data = response.json()
            if isinstance(data, dict):
                message = data.get("message")
        except ValueError:
            pass
        return RequestFailed(message or default, status_code=response.status_code)

    @staticmethod
    def _payload(response: httpx.Response) -> Any:
        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RequestFailed("Malformed response", status_code=response.status_code) from e

    async def call(
        self,
        path: str,
        method: str = "GET",
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an authenticated call.

        Args:
            path: Path relative to base_url
            method: HTTP method
            json: JSON body
            params: Query parameters

        Returns:
            Parsed JSON payload, or None for 204

        Raises:
            Unauthorized: On 401 (session torn down unless the credential
                was replaced while the call was in flight)
            RequestFailed: On any other failure
        """
        token = self._credentials.retrieve(TOKEN_KEY)
        response = await self._send(method, path, self._headers(token), json=json, params=params)

        if response.status_code == 401:
            # A newer credential was stored while this call was in flight
            if self._credentials.retrieve(TOKEN_KEY) not in (token, None):
                logger.debug("%s %s returned 401 for a replaced credential", method, path)
                raise Unauthorized()

            logger.info("%s %s returned 401, tearing down session", method, path)
            if self._on_unauthorized is not None:
                self._on_unauthorized()
            raise Unauthorized()

        if not response.is_success:
            raise self._failure(response, DEFAULT_FAILURE_MESSAGE)

        return self._payload(response)

    async def call_anonymous(
        self,
        path: str,
        json: Any = None,
        failure_message: str = DEFAULT_FAILURE_MESSAGE,
    ) -> Any:
        """
        POST without credentials. A 401 here is an ordinary failure.

        Used for login, where 401 means wrong username or password.

        Raises:
            RequestFailed: On any non-success status
        """
        headers = {"Content-Type": "application/json"}
        response = await self._send("POST", path, headers, json=json)

        if not response.is_success:
            raise self._failure(response, failure_message)

        return self._payload(response)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AuthenticatedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
