from __future__ import annotations

from typing import Any, Callable, Optional

from loguru import logger

from netmon.core.models import LatencyRecord, PingStatus
from netmon.core.probe_base import Probe, ProbeContext, SampleOutcome

from .pinger import IcmpPinger, resolve_host

PING_TIMEOUT_MS = 1000


class LatencyProbe:
    """
    Round trip time to the configured endpoint.

    initialize() resolves the endpoint host once. Failing to resolve is
    fatal: ResolutionError propagates and the process exits.

    sample() sends one bounded echo request. Every outcome, including a
    failure to send, is a record and the cycle always continues. Losing
    ping is informative, it does not invalidate the traffic counters.
    """

    name = "latency"

    def __init__(
        self,
        ctx: ProbeContext,
        pinger: Optional[Any] = None,
        resolver: Optional[Callable[[str], str]] = None,
    ):
        self._sink = ctx.sink
        self.host = ctx.config.host
        self._pinger = pinger or ctx.source("pinger") or IcmpPinger()
        self._resolve = resolver or ctx.source("resolver") or resolve_host
        self.address: Optional[str] = None

    def initialize(self) -> None:
        self.address = self._resolve(self.host)
        self._sink.message(f"Resolved '{self.host}' to '{self.address}'")

    def sample(self) -> SampleOutcome:
        if self.address is None:
            raise RuntimeError("latency probe used before initialize()")

        try:
            result = self._pinger.echo(self.address, PING_TIMEOUT_MS)
        except Exception as exc:
            logger.debug("echo to {} failed: {!r}", self.address, exc)
            record = LatencyRecord(
                address=self.address,
                status=PingStatus.TRANSPORT_ERROR,
                detail=str(exc) or type(exc).__name__,
            )
            return SampleOutcome(record=record, proceed=True)

        record = LatencyRecord(
            address=self.address,
            status=result.status,
            rtt_ms=result.rtt_ms,
            detail=result.detail,
        )
        return SampleOutcome(record=record, proceed=True)


def build_probe(ctx: ProbeContext) -> Probe:
    return LatencyProbe(ctx)
