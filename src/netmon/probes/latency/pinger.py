from __future__ import annotations

import ipaddress
import os
import socket
import time
from dataclasses import dataclass
from typing import Optional

from icmplib import ICMPError, ICMPRequest, ICMPv4Socket, ICMPv6Socket, TimeoutExceeded
from loguru import logger

from netmon.core.exceptions import ResolutionError
from netmon.core.models import PingStatus

# Raw ICMP sockets when running as root, datagram sockets otherwise (no root needed).
# Windows has no geteuid and only supports the privileged path.
PRIVILEGED = os.geteuid() == 0 if hasattr(os, "geteuid") else True

ECHO_REPLY_TYPES = {4: 0, 6: 129}


@dataclass(frozen=True)
class EchoResult:
    """
    One echo request outcome.

    rtt_ms is whole milliseconds. For OTHER it is the time until the
    non echo reply arrived, detail names what came back.
    """

    status: PingStatus
    rtt_ms: Optional[int] = None
    detail: str = ""


def resolve_host(host: str) -> str:
    """
    Resolve host to its first address. IP literals come back unchanged.
    """
    try:
        infos = socket.getaddrinfo(host, None)
    except (socket.gaierror, UnicodeError) as exc:
        raise ResolutionError(f"Unable to resolve '{host}'.") from exc

    if not infos:
        raise ResolutionError(f"Unable to resolve '{host}'.")

    return str(infos[0][4][0])


def _elapsed_ms(start: float) -> int:
    return int(round((time.perf_counter() - start) * 1000.0))


class IcmpPinger:
    """
    Single echo request per call through icmplib.

    Socket level failures (permission, unreachable network on send) are
    raised to the caller. Timeouts and ICMP error replies are results.
    """

    def __init__(self, privileged: bool = PRIVILEGED):
        self.privileged = privileged
        self._sequence = 0

    def echo(self, address: str, timeout_ms: int) -> EchoResult:
        family = ipaddress.ip_address(address.split("%", 1)[0]).version
        socket_cls = ICMPv6Socket if family == 6 else ICMPv4Socket

        self._sequence = (self._sequence + 1) & 0xFFFF
        request = ICMPRequest(
            destination=address,
            id=os.getpid() & 0xFFFF,
            sequence=self._sequence,
        )

        start = time.perf_counter()
        with socket_cls(privileged=self.privileged) as sock:
            sock.send(request)
            try:
                reply = sock.receive(request, timeout_ms / 1000.0)
                reply.raise_for_status()
            except TimeoutExceeded:
                return EchoResult(status=PingStatus.TIMED_OUT)
            except ICMPError as exc:
                logger.debug("echo to {} answered with {}", address, exc)
                return EchoResult(
                    status=PingStatus.OTHER,
                    rtt_ms=_elapsed_ms(start),
                    detail=type(exc).__name__,
                )

        rtt_ms = int(round((reply.time - request.time) * 1000.0))
        if reply.type != ECHO_REPLY_TYPES[family]:
            return EchoResult(
                status=PingStatus.OTHER,
                rtt_ms=rtt_ms,
                detail=f"type {reply.type} code {reply.code}",
            )
        return EchoResult(status=PingStatus.SUCCESS, rtt_ms=rtt_ms)
