from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple


class InMemoryTokenCache:
    """
    Thread-safe `TokenCache` with a time-to-live and a size bound.

    Entries older than `ttl_seconds` are dropped on access. When the cache
    is full the least recently written entry is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._ttl = ttl_seconds
        self._max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        # handle -> (expires_at, token)
        self._entries: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()

    def get(self, handle: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(handle)
            if entry is None:
                return None
            expires_at, token = entry
            if expires_at <= self._clock():
                del self._entries[handle]
                return None
            return token

    def put(self, handle: str, token: str) -> None:
        with self._lock:
            self._entries.pop(handle, None)
            self._entries[handle] = (self._clock() + self._ttl, token)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)

    def evict(self, handle: str) -> None:
        with self._lock:
            self._entries.pop(handle, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
