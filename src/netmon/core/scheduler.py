from __future__ import annotations

import time
from typing import Any, Callable, List, Optional, Sequence

from loguru import logger

from .probe_base import Probe


class CycleRunner:
    """
    Drives probes on a fixed interval.

    Each cycle:
      1. Wait out the interval (the wait starts after the previous cycle
         finished, so cycles never overlap).
      2. Call sample() on every probe in order.
      3. Hand each record to the sink before the next probe runs.
      4. Stop the cycle early when a probe returns proceed=False.

    The next cycle always starts again from the first probe.
    """

    def __init__(
        self,
        probes: Sequence[Probe],
        interval: float,
        sink: Any,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.probes: List[Probe] = list(probes)
        self.interval = float(interval)
        self.sink = sink
        self._sleep = sleep
        self.cycles = 0

    def run_cycle(self) -> int:
        """
        Run one pass over the probe list. Returns how many probes ran.
        """
        executed = 0
        for probe in self.probes:
            outcome = probe.sample()
            executed += 1

            self.sink.emit(outcome.record)

            if not outcome.proceed:
                logger.debug("probe {} stopped cycle {}", probe.name, self.cycles)
                break

        self.cycles += 1
        return executed

    def run(self, max_cycles: Optional[int] = None) -> None:
        """
        Run forever, or max_cycles times when given.
        """
        while max_cycles is None or self.cycles < max_cycles:
            self._sleep(self.interval)
            self.run_cycle()
