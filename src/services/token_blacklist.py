"""Revocation set for signed-out access tokens.

Revoked tokens are kept only until their natural expiry. The in-memory store is
local to one process; deployments running several API instances should use the
Redis store so a sign-out is honoured by every instance.
"""

import hashlib
import heapq
import logging
import threading
from datetime import UTC, datetime

import redis

from src.config import get_settings

logger = logging.getLogger(__name__)


def _seconds_until(expires_at: datetime) -> float:
    return (expires_at - datetime.now(UTC)).total_seconds()


class RevocationStore:
    """Interface for a set of revoked tokens with per-entry expiry."""

    def add(self, token: str, expires_at: datetime) -> None:
        raise NotImplementedError

    def contains(self, token: str) -> bool:
        raise NotImplementedError

    def discard(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryRevocationStore(RevocationStore):
    """Thread-safe process-local revocation set.

    Entries are indexed by expiry in a min-heap. Expired entries are purged
    under the lock on every access, so the set holds at most the tokens that
    are still valid.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, datetime] = {}
        self._expiries: list[tuple[datetime, str]] = []

    def _purge_expired(self) -> None:
        # Caller holds the lock. Heap items left behind by discard or re-add
        # no longer match the live entry and are dropped without touching it.
        now = datetime.now(UTC)
        while self._expiries and self._expiries[0][0] <= now:
            expires_at, token = heapq.heappop(self._expiries)
            if self._entries.get(token) == expires_at:
                del self._entries[token]

    def add(self, token: str, expires_at: datetime) -> None:
        if _seconds_until(expires_at) <= 0:
            return

        with self._lock:
            self._purge_expired()
            self._entries[token] = expires_at
            heapq.heappush(self._expiries, (expires_at, token))
        logger.debug(f"Revoked token until {expires_at.isoformat()}")

    def contains(self, token: str) -> bool:
        with self._lock:
            self._purge_expired()
            return token in self._entries

    def discard(self, token: str) -> None:
        with self._lock:
            self._entries.pop(token, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._expiries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)


class RedisRevocationStore(RevocationStore):
    """Revocation set shared between instances, stored as expiring Redis keys."""

    KEY_PREFIX = "revoked:"

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    def _key(self, token: str) -> str:
        return self.KEY_PREFIX + hashlib.sha256(token.encode("utf-8")).hexdigest()

    def add(self, token: str, expires_at: datetime) -> None:
        ttl = int(_seconds_until(expires_at)) + 1
        if ttl <= 1:
            return
        self._redis.set(self._key(token), "1", ex=ttl)

    def contains(self, token: str) -> bool:
        return bool(self._redis.exists(self._key(token)))

    def discard(self, token: str) -> None:
        self._redis.delete(self._key(token))

    def clear(self) -> None:
        for key in self._redis.scan_iter(match=f"{self.KEY_PREFIX}*"):
            self._redis.delete(key)


_store: RevocationStore | None = None
_store_lock = threading.Lock()


def get_revocation_store() -> RevocationStore:
    """Get the process-wide revocation store configured by REVOCATION_BACKEND."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                settings = get_settings()
                if settings.revocation_backend == "redis":
                    _store = RedisRevocationStore(redis.from_url(settings.redis_url))
                else:
                    _store = InMemoryRevocationStore()
    return _store
