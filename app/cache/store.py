"""In-memory key-value store with per-entry expiry.

A single TTLCache instance is created at startup and injected into every
component that caches (authenticator, Wikipedia client, description resolver,
pipeline). Entries live at most for the lifetime of the process.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """Thread-safe dictionary with a time-to-live on every entry.

    Expired entries are evicted lazily on read. The periodic cache-clear job
    empties the whole store via clear().

    Attributes:
        name: Label used in log records
    """

    def __init__(self, name: str = "default", clock: Optional[Callable[[], float]] = None) -> None:
        """Initialize an empty store.

        Args:
            name: Label for logging
            clock: Monotonic clock returning seconds (defaults to time.monotonic)
        """
        self.name = name
        self._clock = clock or time.monotonic
        self._store: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store a value for ttl_seconds.

        Raises:
            ValueError: If ttl_seconds is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got: {ttl_seconds}")

        with self._lock:
            self._store[key] = (self._clock() + ttl_seconds, value)

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> int:
        """Remove every entry and return how many were removed."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
            return count

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for expires_at, _ in self._store.values() if now < expires_at)
