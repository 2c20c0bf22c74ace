"""
Sliding Window Store

A small time-windowed list of (key, timestamp) records. Each instance is
owned by whoever creates it and guards itself with its own lock, so the
prune / lookup / record sequence is atomic per store.
"""

from typing import List, NamedTuple
import threading

from roomcue.core.clock import now_ms


class WindowEntry(NamedTuple):
    key: str
    timestamp: float


class SlidingWindowStore:
    """
    Records keys with timestamps and forgets them after `window_ms`.

    An entry recorded at t is live while now - t < window_ms.
    """

    def __init__(self, window_ms: float):
        self.window_ms = window_ms
        self._entries: List[WindowEntry] = []
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        self._entries = [e for e in self._entries if now - e.timestamp < self.window_ms]

    def check_and_record(self, key: str, now: float = None, record_if_found: bool = False) -> bool:
        """
        Prune, look up `key`, and record it.

        The key is always recorded when it was not found; when it was found it
        is recorded again only if `record_if_found` is set.

        Returns:
            True if `key` was already present inside the window
        """
        if now is None:
            now = now_ms()
        with self._lock:
            self._prune(now)
            found = any(e.key == key for e in self._entries)
            if not found or record_if_found:
                self._entries.append(WindowEntry(key, now))
            return found

    def contains(self, key: str, now: float = None) -> bool:
        """Whether `key` is inside the window, without recording it."""
        if now is None:
            now = now_ms()
        with self._lock:
            self._prune(now)
            return any(e.key == key for e in self._entries)

    def entries(self, now: float = None) -> List[WindowEntry]:
        """Snapshot of the live entries, oldest first."""
        if now is None:
            now = now_ms()
        with self._lock:
            self._prune(now)
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
