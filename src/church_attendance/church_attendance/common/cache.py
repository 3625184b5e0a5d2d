from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

_MISSING = object()


class TTLCache:
    """Small in-memory cache with a fixed time-to-live.

    Keys are tuples whose first element is the month table name, so every
    entry belonging to a month can be dropped with ``invalidate(month)``.
    """

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[Tuple[Hashable, ...], Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: Tuple[Hashable, ...], default: Any = None) -> Any:
        with self._lock:
            item = self._entries.get(key, _MISSING)
            if item is _MISSING:
                return default
            expires_at, value = item
            if self._clock() >= expires_at:
                del self._entries[key]
                return default
            return value

    def set(self, key: Tuple[Hashable, ...], value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self._ttl, value)

    def get_or_load(self, key: Tuple[Hashable, ...], loader: Callable[[], Any]) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            value = loader()
            self.set(key, value)
        return value

    def invalidate(self, month: Optional[str] = None) -> None:
        """Drop every entry for ``month`` (or everything when ``month`` is None)."""
        with self._lock:
            if month is None:
                self._entries.clear()
                return
            for key in [k for k in self._entries if k and k[0] == month]:
                del self._entries[key]

    def clear(self) -> None:
        self.invalidate(None)

    def __len__(self) -> int:
        return len(self._entries)
