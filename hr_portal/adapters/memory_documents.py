"""
Memory Document Store - In-memory document database (testing only).
"""

import copy
import secrets
from typing import Dict, Any, List, Optional, Set
from hr_portal.errors import RequestFailed
from hr_portal.ports.document_port import DocumentStorePort


class MemoryDocumentStore(DocumentStorePort):
    """
    In-memory document store.

    Documents are deep-copied on the way in and out, so callers never share
    state with the store. deny() makes every access to a collection fail the
    way a security-rules rejection does.

    WARNING: Only for testing and local development.
    """

    def __init__(self):
        """Initialize in-memory storage."""
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._denied: Set[str] = set()

    def deny(self, collection: str) -> None:
        """Reject all further access to a collection."""
        self._denied.add(collection)

    def allow(self, collection: str) -> None:
        """Lift a deny()."""
        self._denied.discard(collection)

    def _docs(self, collection: str) -> Dict[str, Dict[str, Any]]:
        if collection in self._denied:
            raise RequestFailed("Missing or insufficient permissions.", status_code=403)
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _out(doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(data)
        doc["id"] = doc_id
        return doc

    async def list(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        docs = [
            self._out(doc_id, data)
            for doc_id, data in self._docs(collection).items()
            if all(data.get(k) == v for k, v in (where or {}).items())
        ]

        if order_by:
            docs.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by) or ""), reverse=descending)

        return docs

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        data = self._docs(collection).get(doc_id)
        if data is None:
            return None
        return self._out(doc_id, data)

    async def add(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        doc_id = secrets.token_hex(10)
        return await self.set(collection, doc_id, data)

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        stored = copy.deepcopy(data)
        stored.pop("id", None)
        self._docs(collection)[doc_id] = stored
        return self._out(doc_id, stored)

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        docs = self._docs(collection)
        if doc_id not in docs:
            raise RequestFailed(f"No document to update: {collection}/{doc_id}", status_code=404)

        changes = copy.deepcopy(data)
        changes.pop("id", None)
        docs[doc_id].update(changes)
        return self._out(doc_id, docs[doc_id])

    async def delete(self, collection: str, doc_id: str) -> None:
        self._docs(collection).pop(doc_id, None)
