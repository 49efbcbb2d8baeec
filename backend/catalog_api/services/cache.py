"""Time-windowed response cache shared by the catalog endpoints."""
from __future__ import annotations

from collections import OrderedDict
from threading import Lock
import time
from typing import Any, Callable, Hashable, TypeVar

T = TypeVar("T")


class ResponseCache:
    """Thread-safe TTL cache keyed by operation name and arguments."""

    def __init__(
        self,
        *,
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._lock = Lock()

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._entries)

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def get(self, key: Hashable) -> tuple[bool, Any]:
        """Return ``(hit, value)`` for ``key``."""

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return False, None
            return True, value

    def set(self, key: Hashable, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._evict_expired()
            self._entries[key] = (self._clock() + self._ttl, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def get_or_set(self, key: Hashable, factory: Callable[[], T]) -> T:
        """Return the cached value for ``key`` or compute and store it.

        Exceptions raised by ``factory`` propagate and nothing is stored.
        """

        if not self.enabled:
            return factory()
        hit, value = self.get(key)
        if hit:
            return value
        value = factory()
        self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
