"""
Adapters - Implementations of ports.

REST binding:
- RestAuthAdapter: /auth/login, /auth/me, /auth/change-password
- RestRecordsAdapter: RecordsPort over the REST API

Managed binding:
- DocumentRecordsAdapter: RecordsPort over a document store
- DocumentProfileAdapter: Profiles in users/{uid}
- MemoryDocumentStore: In-memory document store (testing)
- MemoryIdentityProvider: In-memory identity provider (testing)
- IdTokenAdapter: ID token claims via PyJWT

Client-local credential storage:
- MemoryCredentialAdapter: In-memory (testing)
- FileCredentialAdapter: JSON file
- RedisCredentialAdapter: Redis
"""

# REST binding
from hr_portal.adapters.rest_auth import RestAuthAdapter, LoginResult
from hr_portal.adapters.rest_records import RestRecordsAdapter

# Managed binding
from hr_portal.adapters.document_records import DocumentRecordsAdapter, DocumentProfileAdapter
from hr_portal.adapters.memory_documents import MemoryDocumentStore
from hr_portal.adapters.memory_identity import MemoryIdentityProvider
from hr_portal.adapters.id_token import IdTokenAdapter

# Credential storage
from hr_portal.adapters.memory_credential import MemoryCredentialAdapter
from hr_portal.adapters.file_credential import FileCredentialAdapter
from hr_portal.adapters.redis_credential import RedisCredentialAdapter

__all__ = [
    # REST binding
    "RestAuthAdapter",
    "LoginResult",
    "RestRecordsAdapter",
    # Managed binding
    "DocumentRecordsAdapter",
    "DocumentProfileAdapter",
    "MemoryDocumentStore",
    "MemoryIdentityProvider",
    "IdTokenAdapter",
    # Credential storage
    "MemoryCredentialAdapter",
    "FileCredentialAdapter",
    "RedisCredentialAdapter",
]
