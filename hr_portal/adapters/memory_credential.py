"""
Memory Credential Adapter - In-memory credential storage (testing only).
"""

from typing import Optional, Dict
from hr_portal.ports.credential_port import CredentialStorePort


class MemoryCredentialAdapter(CredentialStorePort):
    """
    In-memory credential storage.

    WARNING: Only for testing. Values are lost on restart.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        """
        Initialize in-memory storage.

        Args:
            initial: Optional values to start with (e.g., a resumable token)
        """
        self._values: Dict[str, str] = dict(initial or {})

    def store(self, key: str, value: str) -> None:
        self._values[key] = value

    def retrieve(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def delete(self, key: str) -> bool:
        if key not in self._values:
            return False
        del self._values[key]
        return True
