"""
Console Configuration (Settings)

Typed configuration read from HR_* environment variables (or a .env file)
with pydantic-settings. get_settings() returns a process-wide instance.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


CREDENTIAL_BACKENDS = ("memory", "file", "redis")


class Settings(BaseSettings):
    """
    Console settings.

    Attributes:
        api_base: REST API base URL
        request_timeout: Per-request timeout in seconds
        credential_backend: memory|file|redis
        credential_path: JSON file used by the file backend
        redis_url: Redis connection string for the redis backend
        redis_prefix: Key prefix for the redis backend
        provisioning_url: Admin side-channel for account creation (managed backend)
        id_token_secret: Verify ID token signatures with this secret (optional)
        log_level: Root log level for configure_logging()
    """

    api_base: str = "http://localhost:3000/api"
    request_timeout: float = 10.0

    credential_backend: str = "file"
    credential_path: str = "~/.hr_portal/credentials.json"
    redis_url: str = "redis://localhost:6379/0"
    redis_prefix: str = "hr:credential:"

    provisioning_url: Optional[str] = None
    id_token_secret: Optional[str] = None

    log_level: str = "INFO"

    @field_validator("credential_backend")
    @classmethod
    def credential_backend_valid(cls, v: str) -> str:
        backend = v.strip().lower()
        if backend not in CREDENTIAL_BACKENDS:
            raise ValueError(f"credential_backend must be one of {', '.join(CREDENTIAL_BACKENDS)}")
        return backend

    @field_validator("request_timeout")
    @classmethod
    def request_timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be > 0")
        return v

    model_config = SettingsConfigDict(
        env_prefix="HR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If an HR_* variable is invalid
    """
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Send hr_portal logs to stderr at the configured level."""
    level = (level or get_settings().log_level).upper()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger("hr_portal")
    root.setLevel(level)
    root.handlers = [handler]
