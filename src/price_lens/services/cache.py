"""TTL cache for short-lived blobs such as synthesized audio."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Key-value store whose entries expire."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Entry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local cache; expired entries are dropped on read and on write."""

    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, _Entry] = field(default_factory=dict, init=False)

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        now = self.clock()
        for stale in [k for k, e in self._entries.items() if now >= e.expires_at]:
            del self._entries[stale]
        self._entries[key] = _Entry(value, now + timedelta(seconds=ttl_seconds))

    def __len__(self) -> int:
        return len(self._entries)
