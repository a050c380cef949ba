from __future__ import annotations

import threading
import weakref


class KeyedLocks:
    """
    Lazily created mutexes, one per key.

    Used to serialise work belonging to the same chat user while letting
    different users proceed in parallel. A lock lives only while somebody
    holds a reference to it, so idle users do not accumulate entries.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def for_key(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
