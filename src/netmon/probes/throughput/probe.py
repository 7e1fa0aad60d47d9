from __future__ import annotations

from typing import Callable, Iterable, Optional

from netmon.core.models import CounterRecord
from netmon.core.probe_base import Probe, ProbeContext, SampleOutcome
from netmon.core.tracker import CounterDeltaTracker

from .interfaces import InterfaceInfo, read_interfaces, sum_counters


class ThroughputProbe:
    """
    Bytes in, bytes out and packets lost on qualifying interfaces.

    Each cycle sums the cumulative counters over qualifying interfaces and
    feeds the total to a CounterDeltaTracker. Interfaces appearing or
    vanishing between cycles simply change the sum.

    The first cycle after initialize() reports zero.
    """

    name = "throughput"

    def __init__(
        self,
        ctx: ProbeContext,
        read: Optional[Callable[[], Iterable[InterfaceInfo]]] = None,
    ):
        self._read = read or ctx.source("interfaces") or read_interfaces
        self.tracker = CounterDeltaTracker()

    def initialize(self) -> None:
        self.tracker.reset()

    def sample(self) -> SampleOutcome:
        current = sum_counters(self._read())
        delta = self.tracker.update(current)
        return SampleOutcome(record=CounterRecord(delta=delta), proceed=True)


def build_probe(ctx: ProbeContext) -> Probe:
    return ThroughputProbe(ctx)
