from __future__ import annotations

import threading
from typing import Callable, Optional

import psutil
from loguru import logger

from netmon.probes.throughput.interfaces import looks_like_loopback


def link_available() -> bool:
    """
    True when at least one non loopback interface is up.
    """
    for name, st in psutil.net_if_stats().items():
        if looks_like_loopback(name, st):
            continue
        if st.isup:
            return True
    return False


class LinkWatcher:
    """
    Link state change notifier.

    A daemon thread re-reads link availability every poll_seconds and calls
    the handler only when it flips. The first reading becomes the watcher's
    reference and fires nothing.
    """

    def __init__(
        self,
        read_state: Callable[[], bool] = link_available,
        poll_seconds: float = 1.0,
    ):
        self._read_state = read_state
        self.poll_seconds = float(poll_seconds)
        self._handler: Optional[Callable[[bool], None]] = None
        self._on_error: Optional[Callable[[Exception], None]] = None
        self._last: Optional[bool] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def subscribe(
        self,
        handler: Callable[[bool], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        """
        handler gets every flip. on_error gets every failed poll, the
        watcher keeps polling afterwards.
        """
        self._handler = handler
        self._on_error = on_error

    def poll_once(self) -> Optional[bool]:
        """
        Read the link once. Returns the new state when it changed, else None.
        """
        current = bool(self._read_state())
        previous, self._last = self._last, current

        if previous is None or previous == current:
            return None

        if self._handler is not None:
            self._handler(current)
        return current

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="netmon-link-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.poll_seconds + 1.0)
        self._thread = None

    def poll_safely(self) -> Optional[bool]:
        """
        poll_once() for the watcher thread. A failure goes to on_error and
        the poll reports no change.
        """
        try:
            return self.poll_once()
        except Exception as exc:
            if self._on_error is None:
                logger.exception("link state poll failed")
            else:
                logger.debug("link state poll failed: {!r}", exc)
                self._on_error(exc)
            return None

    def _run(self) -> None:
        while not self._stop.is_set():
            self.poll_safely()
            self._stop.wait(self.poll_seconds)
