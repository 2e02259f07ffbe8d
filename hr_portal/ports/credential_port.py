"""
Credential Store Port - Interface for client-local credential storage.

Holds the persisted bearer token and the login-mode hint, the analogue of
browser local storage.

Implementations:
- MemoryCredentialAdapter: In-process (testing)
- FileCredentialAdapter: JSON file on disk
- RedisCredentialAdapter: Redis, for consoles sharing one login
"""

from abc import ABC, abstractmethod
from typing import Optional


TOKEN_KEY = "token"
LOGIN_MODE_KEY = "loginMode"


class CredentialStorePort(ABC):
    """Port: Persist and retrieve client-local credentials."""

    @abstractmethod
    def store(self, key: str, value: str) -> None:
        """
        Store a value.

        Args:
            key: Storage key (e.g., "token")
            value: Value to persist
        """
        pass

    @abstractmethod
    def retrieve(self, key: str) -> Optional[str]:
        """
        Retrieve a value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if not found
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a value.

        Args:
            key: Storage key

        Returns:
            True if deleted, False if not found
        """
        pass
