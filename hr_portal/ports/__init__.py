"""
Ports - Interfaces for credentials, records, identity and documents.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from hr_portal.ports.subscription import Subscription
from hr_portal.ports.credential_port import CredentialStorePort, TOKEN_KEY, LOGIN_MODE_KEY
from hr_portal.ports.records_port import RecordsPort
from hr_portal.ports.identity_port import IdentityProviderPort, ProviderUser, AuthStateListener
from hr_portal.ports.document_port import DocumentStorePort, ProfileStorePort

__all__ = [
    "Subscription",
    # Client-local storage
    "CredentialStorePort",
    "TOKEN_KEY",
    "LOGIN_MODE_KEY",
    # Backend records
    "RecordsPort",
    # Managed backend
    "IdentityProviderPort",
    "ProviderUser",
    "AuthStateListener",
    "DocumentStorePort",
    "ProfileStorePort",
]
