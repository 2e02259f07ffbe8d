"""
Integration tests for credential adapters.

Redis tests are skipped when no server is reachable on localhost:6379.
"""

import os
import stat
import pytest
import redis
from hr_portal.adapters import (
    MemoryCredentialAdapter,
    FileCredentialAdapter,
    RedisCredentialAdapter,
)
from hr_portal.ports.credential_port import TOKEN_KEY, LOGIN_MODE_KEY


class TestMemoryCredentialAdapter:
    """Test in-memory credential storage."""

    def test_store_retrieve_delete(self):
        adapter = MemoryCredentialAdapter()

        adapter.store(TOKEN_KEY, "tok-1")
        assert adapter.retrieve(TOKEN_KEY) == "tok-1"

        assert adapter.delete(TOKEN_KEY) is True
        assert adapter.retrieve(TOKEN_KEY) is None
        assert adapter.delete(TOKEN_KEY) is False


class TestFileCredentialAdapter:
    """Test JSON-file credential storage."""

    def test_survives_restart(self, tmp_path):
        """A new adapter on the same file sees the stored token."""
        path = tmp_path / "nested" / "credentials.json"

        FileCredentialAdapter(path).store(TOKEN_KEY, "tok-1")
        FileCredentialAdapter(path).store(LOGIN_MODE_KEY, "employee")

        reopened = FileCredentialAdapter(path)
        assert reopened.retrieve(TOKEN_KEY) == "tok-1"
        assert reopened.retrieve(LOGIN_MODE_KEY) == "employee"

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file modes only")
    def test_file_is_private(self, tmp_path):
        path = tmp_path / "credentials.json"

        FileCredentialAdapter(path).store(TOKEN_KEY, "tok-1")

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_delete(self, tmp_path):
        adapter = FileCredentialAdapter(tmp_path / "credentials.json")
        adapter.store(TOKEN_KEY, "tok-1")

        assert adapter.delete(TOKEN_KEY) is True
        assert adapter.retrieve(TOKEN_KEY) is None
        assert adapter.delete(TOKEN_KEY) is False

    def test_missing_file(self, tmp_path):
        adapter = FileCredentialAdapter(tmp_path / "absent.json")

        assert adapter.retrieve(TOKEN_KEY) is None

    def test_corrupt_file_treated_as_empty(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("{not json", encoding="utf-8")
        adapter = FileCredentialAdapter(path)

        assert adapter.retrieve(TOKEN_KEY) is None

        adapter.store(TOKEN_KEY, "tok-2")
        assert adapter.retrieve(TOKEN_KEY) == "tok-2"


@pytest.fixture
def redis_adapter():
    """Create Redis credential adapter (skip if Redis unavailable)."""
    client = redis.Redis(host="localhost", port=6379, decode_responses=True)
    try:
        client.ping()
    except redis.exceptions.ConnectionError:
        pytest.skip("Redis not available")

    yield RedisCredentialAdapter(redis_client=client, prefix="test:credential:")

    for key in client.scan_iter("test:credential:*"):
        client.delete(key)


class TestRedisCredentialAdapter:
    """Test Redis credential storage."""

    def test_store_retrieve_delete(self, redis_adapter):
        redis_adapter.store(TOKEN_KEY, "tok-1")
        assert redis_adapter.retrieve(TOKEN_KEY) == "tok-1"

        assert redis_adapter.delete(TOKEN_KEY) is True
        assert redis_adapter.retrieve(TOKEN_KEY) is None

    def test_ttl(self):
        """Stored values expire when a ttl is set."""
        client = redis.Redis(host="localhost", port=6379, decode_responses=True)
        try:
            client.ping()
        except redis.exceptions.ConnectionError:
            pytest.skip("Redis not available")

        adapter = RedisCredentialAdapter(redis_client=client, prefix="test:credential:", ttl=60)
        adapter.store(TOKEN_KEY, "tok-1")

        assert 0 < client.ttl("test:credential:token") <= 60
        adapter.delete(TOKEN_KEY)
