from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

import psutil

from netmon.core.models import CounterSet


@dataclass(frozen=True)
class InterfaceInfo:
    """
    One network interface as seen by the statistics source.

    dns_enabled / dynamic_dns_enabled
      Whether static or dynamic name resolution is configured on the
      interface. psutil has no such switch, so read_interfaces() treats an
      interface with a routable address as resolving names.
    """

    name: str
    is_up: bool
    is_loopback: bool = False
    is_point_to_point: bool = False
    dns_enabled: bool = False
    dynamic_dns_enabled: bool = False
    bytes_in: int = 0
    bytes_out: int = 0
    packets_lost: int = 0

    def counters(self) -> CounterSet:
        return CounterSet(
            bytes_in=self.bytes_in,
            bytes_out=self.bytes_out,
            packets_lost=self.packets_lost,
        )


def is_qualifying(iface: InterfaceInfo) -> bool:
    """
    Interfaces that carry internet traffic: up, not point to point, not
    loopback, with static or dynamic name resolution.
    """
    return (
        iface.is_up
        and not iface.is_point_to_point
        and not iface.is_loopback
        and (iface.dns_enabled or iface.dynamic_dns_enabled)
    )


def sum_counters(interfaces: Iterable[InterfaceInfo]) -> CounterSet:
    """
    Aggregate cumulative counters over qualifying interfaces.
    No qualifying interface gives an all zero set.
    """
    total = CounterSet.zero()
    for iface in interfaces:
        if is_qualifying(iface):
            total = total + iface.counters()
    return total


def _flags(stats: Any) -> List[str]:
    # psutil exposes flags from 5.9.6 on, and only on POSIX.
    raw = getattr(stats, "flags", "") or ""
    return [f.strip() for f in raw.split(",") if f.strip()]


def looks_like_loopback(name: str, stats: Any) -> bool:
    if "loopback" in _flags(stats):
        return True
    lname = name.lower()
    return lname == "lo" or lname.startswith("lo0") or "loopback" in lname


def looks_like_point_to_point(name: str, stats: Any) -> bool:
    if "pointopoint" in _flags(stats):
        return True
    return name.lower().startswith("ppp")


def _has_routable_address(addrs: List[Any]) -> bool:
    for addr in addrs:
        if addr.family not in (socket.AF_INET, socket.AF_INET6):
            continue
        try:
            ip = ipaddress.ip_address(addr.address.split("%", 1)[0])
        except ValueError:
            continue
        if not (ip.is_link_local or ip.is_loopback or ip.is_unspecified):
            return True
    return False


def read_interfaces() -> List[InterfaceInfo]:
    """
    Snapshot every interface the OS knows, with lifetime counters.
    """
    stats: Dict[str, Any] = psutil.net_if_stats()
    addrs: Dict[str, List[Any]] = psutil.net_if_addrs()
    io: Dict[str, Any] = psutil.net_io_counters(pernic=True)

    interfaces: List[InterfaceInfo] = []
    for name, st in stats.items():
        counters = io.get(name)
        resolves = _has_routable_address(addrs.get(name, []))

        interfaces.append(
            InterfaceInfo(
                name=name,
                is_up=bool(st.isup),
                is_loopback=looks_like_loopback(name, st),
                is_point_to_point=looks_like_point_to_point(name, st),
                dns_enabled=resolves,
                dynamic_dns_enabled=False,
                bytes_in=int(counters.bytes_recv) if counters else 0,
                bytes_out=int(counters.bytes_sent) if counters else 0,
                packets_lost=int(counters.dropin + counters.errin) if counters else 0,
            )
        )
    return interfaces
