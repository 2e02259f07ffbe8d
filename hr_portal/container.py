"""
Container - Assemble consoles from settings.

REST binding:
    console = build_rest_console()

Managed binding (identity provider + document store):
    console = build_managed_console(provider, documents)
"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from hr_portal.config import Settings, get_settings
from hr_portal.http import AuthenticatedClient
from hr_portal.ports.credential_port import CredentialStorePort
from hr_portal.ports.document_port import DocumentStorePort
from hr_portal.ports.identity_port import IdentityProviderPort
from hr_portal.adapters.memory_credential import MemoryCredentialAdapter
from hr_portal.adapters.file_credential import FileCredentialAdapter
from hr_portal.adapters.redis_credential import RedisCredentialAdapter
from hr_portal.adapters.rest_auth import RestAuthAdapter
from hr_portal.adapters.rest_records import RestRecordsAdapter
from hr_portal.adapters.document_records import DocumentRecordsAdapter, DocumentProfileAdapter
from hr_portal.adapters.id_token import IdTokenAdapter
from hr_portal.sdk.store import SessionStore
from hr_portal.sdk.resolver import TokenSessionResolver, ProviderSessionResolver
from hr_portal.sdk.client import HRConsole


logger = logging.getLogger(__name__)


def build_credential_store(settings: Optional[Settings] = None) -> CredentialStorePort:
    """Credential store selected by settings.credential_backend."""
    settings = settings or get_settings()

    if settings.credential_backend == "memory":
        return MemoryCredentialAdapter()
    if settings.credential_backend == "redis":
        return RedisCredentialAdapter(redis_url=settings.redis_url, prefix=settings.redis_prefix)
    return FileCredentialAdapter(Path(settings.credential_path).expanduser())


def build_rest_console(
    settings: Optional[Settings] = None,
    credentials: Optional[CredentialStorePort] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> HRConsole:
    """
    Console bound to the REST API.

    Args:
        settings: Settings (get_settings() if omitted)
        credentials: Credential store (from settings if omitted)
        transport: Optional httpx transport (tests)
    """
    settings = settings or get_settings()
    credentials = credentials or build_credential_store(settings)

    client = AuthenticatedClient(
        base_url=settings.api_base,
        credentials=credentials,
        timeout=settings.request_timeout,
        transport=transport,
    )
    store = SessionStore()
    resolver = TokenSessionResolver(RestAuthAdapter(client), store, credentials)
    client.set_unauthorized_handler(resolver.teardown)

    logger.debug("REST console bound to %s", settings.api_base)
    return HRConsole(resolver, RestRecordsAdapter(client), http=client)


def build_managed_console(
    provider: IdentityProviderPort,
    documents: DocumentStorePort,
    settings: Optional[Settings] = None,
    credentials: Optional[CredentialStorePort] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> HRConsole:
    """
    Console bound to an identity provider and a document store.

    Employee creation goes through settings.provisioning_url when set.
    """
    settings = settings or get_settings()
    credentials = credentials or build_credential_store(settings)
    store = SessionStore()

    resolver = ProviderSessionResolver(
        provider,
        DocumentProfileAdapter(documents),
        store,
        credentials,
        tokens=IdTokenAdapter(secret=settings.id_token_secret),
    )

    provisioning = None
    if settings.provisioning_url:
        provisioning = AuthenticatedClient(
            base_url=settings.provisioning_url,
            credentials=credentials,
            on_unauthorized=resolver.teardown,
            timeout=settings.request_timeout,
            transport=transport,
        )

    resolver.start()
    return HRConsole(
        resolver,
        DocumentRecordsAdapter(documents, provisioning=provisioning),
        http=provisioning,
    )
