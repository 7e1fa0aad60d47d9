from __future__ import annotations

from typing import Optional

from .models import CounterSet


class CounterDeltaTracker:
    """
    Turns cumulative interface counters into per interval deltas.

    Main concepts:
      baseline
        The most recent cumulative reading, never a delta.

      first sample
        There is no prior interval, so the first update reports zero
        instead of the lifetime total since boot.

    Negative deltas are reported as is. They appear when an interface
    resets its counters between cycles.

    Only the polling loop touches this object, so it holds no lock.
    """

    def __init__(self) -> None:
        self._baseline: Optional[CounterSet] = None

    @property
    def baseline(self) -> Optional[CounterSet]:
        return self._baseline

    @property
    def has_baseline(self) -> bool:
        return self._baseline is not None

    def reset(self) -> None:
        self._baseline = None

    def update(self, current: CounterSet) -> CounterSet:
        if self._baseline is None:
            self._baseline = current
            return CounterSet.zero()

        delta = current - self._baseline

        # Re-anchor on the absolute reading so skipped cycles do not drift.
        self._baseline = current
        return delta
