from __future__ import annotations

import threading


class AvailabilityCell:
    """
    Guarded link availability flag.

    Writer: the link state notification handler (watcher thread).
    Reader: the availability probe, from the polling loop.
    """

    def __init__(self, available: bool = True):
        self._lock = threading.Lock()
        self._available = bool(available)

    def get(self) -> bool:
        with self._lock:
            return self._available

    def set(self, available: bool) -> bool:
        """
        Store a new value. Returns True when the value changed.
        """
        with self._lock:
            changed = self._available != bool(available)
            self._available = bool(available)
            return changed
