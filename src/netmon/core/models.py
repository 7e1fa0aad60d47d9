from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

BYTE_SUFFIXES: List[str] = [" B", " kB", " MB", " GB", " TB", " PB"]
BYTES_PER_KILOBYTE = 1024


def format_bytes(count: int, precision: int = 2) -> str:
    """
    Human scale byte count with binary prefixes.

    Divides by 1024 while the value is at least 1024, then rounds.
    Negative deltas are never scaled and print in bytes.
      0          -> "0 B"
      1536       -> "1.5 kB"
      1073741824 -> "1 GB"
    """
    value = float(count)
    i = 0
    while value >= BYTES_PER_KILOBYTE and i < len(BYTE_SUFFIXES) - 1:
        value /= BYTES_PER_KILOBYTE
        i += 1

    text = f"{round(value, precision):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text + BYTE_SUFFIXES[i]


@dataclass(frozen=True)
class CounterSet:
    """
    Cumulative Counter Set, or a delta between two of them.

    Fields:
      bytes_in, bytes_out
        Bytes received and sent, summed over qualifying interfaces.

      packets_lost
        Inbound packets discarded plus inbound packets with errors.

    Deltas are plain signed differences. A counter reset shows up as a
    negative component and is passed through unchanged.
    """

    bytes_in: int = 0
    bytes_out: int = 0
    packets_lost: int = 0

    @classmethod
    def zero(cls) -> "CounterSet":
        return cls(0, 0, 0)

    def __add__(self, other: "CounterSet") -> "CounterSet":
        return CounterSet(
            bytes_in=self.bytes_in + other.bytes_in,
            bytes_out=self.bytes_out + other.bytes_out,
            packets_lost=self.packets_lost + other.packets_lost,
        )

    def __sub__(self, other: "CounterSet") -> "CounterSet":
        return CounterSet(
            bytes_in=self.bytes_in - other.bytes_in,
            bytes_out=self.bytes_out - other.bytes_out,
            packets_lost=self.packets_lost - other.packets_lost,
        )


class PingStatus(enum.Enum):
    SUCCESS = "success"
    TIMED_OUT = "timed_out"
    OTHER = "other"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class AvailabilityRecord:
    """
    Link availability.

    changed=True means the record comes from a link state notification,
    changed=False means the polling cycle observed the link down.
    """

    kind: ClassVar[str] = "availability"

    available: bool
    changed: bool = False
    ts: float = field(default_factory=time.time)

    def message(self) -> str:
        if self.changed:
            state = "Available" if self.available else "Unavailable"
            return f"Network changed. ({state})"
        if self.available:
            return "Network available."
        return "Network unavailable."


@dataclass(frozen=True)
class LatencyRecord:
    """
    Outcome of one echo request.

    rtt_ms is whole milliseconds, None when no time was measured.
    detail holds the raw status name for OTHER and the error text for
    TRANSPORT_ERROR.
    """

    kind: ClassVar[str] = "latency"

    address: str
    status: PingStatus
    rtt_ms: Optional[int] = None
    detail: str = ""
    ts: float = field(default_factory=time.time)

    def message(self) -> str:
        if self.status is PingStatus.TRANSPORT_ERROR:
            return f"Unable to ping {self.address}: {self.detail}"
        if self.status is PingStatus.TIMED_OUT:
            return f"Ping to {self.address} timed out."
        if self.status is PingStatus.SUCCESS:
            return f"Ping to {self.address} returned in {self.rtt_ms} ms."
        return f"Ping to {self.address} had status '{self.detail}' after {self.rtt_ms} ms."


@dataclass(frozen=True)
class CounterRecord:
    """Interface traffic and loss for one interval."""

    kind: ClassVar[str] = "throughput"

    delta: CounterSet
    ts: float = field(default_factory=time.time)

    @property
    def bytes_in(self) -> int:
        return self.delta.bytes_in

    @property
    def bytes_out(self) -> int:
        return self.delta.bytes_out

    @property
    def packets_lost(self) -> int:
        return self.delta.packets_lost

    def message(self) -> str:
        return (
            f"Bytes in: {format_bytes(self.bytes_in)}, "
            f"bytes out: {format_bytes(self.bytes_out)}, "
            f"packets lost: {self.packets_lost}."
        )
