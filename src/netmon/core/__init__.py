"""
Core modules that must remain signal neutral.

Keep OS calls and signal specific parsing out of this package.
"""

from .models import CounterSet, AvailabilityRecord, LatencyRecord, CounterRecord, PingStatus
from .tracker import CounterDeltaTracker
from .state import AvailabilityCell
from .scheduler import CycleRunner
from .sink import LogSink

__all__ = [
    "CounterSet",
    "AvailabilityRecord",
    "LatencyRecord",
    "CounterRecord",
    "PingStatus",
    "CounterDeltaTracker",
    "AvailabilityCell",
    "CycleRunner",
    "LogSink",
]
