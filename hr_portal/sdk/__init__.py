"""
SDK - Session coordination for the HR console.
"""

from hr_portal.sdk.store import SessionStore
from hr_portal.sdk.resolver import SessionResolver, TokenSessionResolver, ProviderSessionResolver
from hr_portal.sdk.router import ViewRouter, visible_views
from hr_portal.sdk.loaders import DataLoader, RecordCache
from hr_portal.sdk.client import HRConsole

__all__ = [
    "SessionStore",
    "SessionResolver",
    "TokenSessionResolver",
    "ProviderSessionResolver",
    "ViewRouter",
    "visible_views",
    "DataLoader",
    "RecordCache",
    "HRConsole",
]
