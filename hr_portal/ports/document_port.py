"""
Document Store Ports - Interfaces for a hosted document database.

Implementations:
- MemoryDocumentStore: In-process store (testing, local development)
- DocumentProfileAdapter: ProfileStorePort over the 'users' collection
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional


class DocumentStorePort(ABC):
    """
    Port: Collections of JSON documents keyed by id.

    Documents are returned as dicts with their id under 'id'.
    Failures raise RequestFailed.
    """

    @abstractmethod
    async def list(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Query a collection.

        Args:
            collection: Collection name
            where: Equality filters (field -> value)
            order_by: Field to sort by
            descending: Sort direction

        Returns:
            Matching documents
        """
        pass

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get one document, or None if missing."""
        pass

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Add a document with a generated id. Returns the stored document."""
        pass

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create or replace a document. Returns the stored document."""
        pass

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge fields into an existing document.

        Raises:
            RequestFailed: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Missing documents are ignored."""
        pass


class ProfileStorePort(ABC):
    """Port: Console profiles keyed by provider identity."""

    @abstractmethod
    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        """
        Get the profile for a provider identity.

        Returns:
            Profile fields (role, permissions, employee_id, username), or None
        """
        pass

    @abstractmethod
    async def create_profile(self, uid: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create the profile for a provider identity.

        Returns:
            Stored profile
        """
        pass
