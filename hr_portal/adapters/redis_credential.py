"""
Redis Credential Adapter - Redis-backed credential storage.
"""

from typing import Optional
import redis
from hr_portal.ports.credential_port import CredentialStorePort


class RedisCredentialAdapter(CredentialStorePort):
    """
    Redis-backed credential storage.

    Lets several console processes share one login. Values are plain
    strings under '<prefix><key>', optionally expiring after 'ttl' seconds.
    """

    def __init__(
        self,
        redis_client=None,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "hr:credential:",
        ttl: Optional[int] = None,
    ):
        """
        Initialize Redis credential adapter.

        Args:
            redis_client: Redis client instance (redis.Redis)
            redis_url: URL used when no client is given
            prefix: Key prefix
            ttl: Optional expiry in seconds for stored values
        """
        self._redis = redis_client
        self._redis_url = redis_url
        self._prefix = prefix
        self._ttl = ttl

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            self._redis = redis.Redis.from_url(self._redis_url, decode_responses=True)
        return self._redis

    def _key(self, key: str) -> str:
        """Generate Redis key for a credential."""
        return f"{self._prefix}{key}"

    def store(self, key: str, value: str) -> None:
        client = self._get_redis()
        if self._ttl:
            client.setex(self._key(key), self._ttl, value)
        else:
            client.set(self._key(key), value)

    def retrieve(self, key: str) -> Optional[str]:
        value = self._get_redis().get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def delete(self, key: str) -> bool:
        return bool(self._get_redis().delete(self._key(key)))
