from __future__ import annotations

from typing import Optional

from netmon.core.models import AvailabilityRecord
from netmon.core.probe_base import Probe, ProbeContext, SampleOutcome
from netmon.core.state import AvailabilityCell

from .watcher import LinkWatcher


class AvailabilityProbe:
    """
    Link availability probe.

    State is pushed by link state notifications into an AvailabilityCell.
    The cell starts as Available and only a notification changes it, so a
    link that is already down at startup is reported on the first flip the
    watcher sees.

    sample() reads the cell. When the link is down it reports it and stops
    the rest of the cycle, later probes would measure nothing useful.
    """

    name = "availability"

    def __init__(self, ctx: ProbeContext, watcher: Optional[LinkWatcher] = None):
        self._sink = ctx.sink
        self._watcher = watcher or ctx.source("link_watcher") or LinkWatcher()
        self._cell = AvailabilityCell(available=True)

    @property
    def available(self) -> bool:
        return self._cell.get()

    def initialize(self) -> None:
        self._cell.set(True)
        self._watcher.subscribe(self.on_availability_changed, on_error=self.on_watch_error)
        self._watcher.start()

    def on_availability_changed(self, available: bool) -> None:
        """
        Notification handler. Runs on the watcher thread.
        """
        self._cell.set(available)
        self._sink.emit(AvailabilityRecord(available=available, changed=True))

    def on_watch_error(self, exc: Exception) -> None:
        """
        A failed link state read. The last known state stays in the cell.
        """
        self._sink.error(f"Unable to read link state: {exc}")

    def sample(self) -> SampleOutcome:
        if not self._cell.get():
            return SampleOutcome(record=AvailabilityRecord(available=False), proceed=False)
        return SampleOutcome(record=None, proceed=True)

    def close(self) -> None:
        self._watcher.stop()


def build_probe(ctx: ProbeContext) -> Probe:
    return AvailabilityProbe(ctx)
