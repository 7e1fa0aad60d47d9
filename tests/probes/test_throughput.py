import socket
from collections import namedtuple

import pytest

from netmon.core.models import CounterSet
from netmon.probes.throughput import interfaces as ifaces
from netmon.probes.throughput.interfaces import InterfaceInfo, is_qualifying, sum_counters
from netmon.probes.throughput.probe import ThroughputProbe, build_probe


def _iface(name="eth0", bytes_in=0, bytes_out=0, packets_lost=0, **kw):
    options = dict(is_up=True, dns_enabled=True)
    options.update(kw)
    return InterfaceInfo(
        name=name,
        bytes_in=bytes_in,
        bytes_out=bytes_out,
        packets_lost=packets_lost,
        **options,
    )


@pytest.mark.parametrize(
    "iface, expected",
    [
        (_iface(), True),
        (_iface(dns_enabled=False, dynamic_dns_enabled=True), True),
        (_iface(is_up=False), False),
        (_iface(is_loopback=True), False),
        (_iface(is_point_to_point=True), False),
        (_iface(dns_enabled=False), False),
    ],
)
def test_qualifying_filter(iface, expected):
    assert is_qualifying(iface) is expected


def test_sum_skips_non_qualifying():
    total = sum_counters(
        [
            _iface("eth0", 100, 10, 1),
            _iface("wlan0", 50, 5, 2),
            _iface("lo", 9999, 9999, 0, is_loopback=True),
            _iface("ppp0", 7777, 7777, 7, is_point_to_point=True),
        ]
    )
    assert total == CounterSet(150, 15, 3)


def test_no_interfaces_sum_to_zero():
    assert sum_counters([]) == CounterSet.zero()


def _scripted(readings):
    it = iter(readings)
    return lambda: next(it)


def test_first_cycle_reports_zero_not_lifetime_total(ctx):
    probe = ThroughputProbe(ctx, read=_scripted([[_iface(bytes_in=10**12, bytes_out=10**11, packets_lost=42)]]))
    probe.initialize()

    outcome = probe.sample()

    assert outcome.proceed is True
    assert outcome.record.delta == CounterSet.zero()
    assert outcome.record.message() == "Bytes in: 0 B, bytes out: 0 B, packets lost: 0."


def test_second_cycle_reports_difference(ctx):
    probe = ThroughputProbe(ctx, read=_scripted([[_iface(bytes_in=1000)], [_iface(bytes_in=1500)]]))
    probe.initialize()

    probe.sample()
    outcome = probe.sample()

    assert outcome.record.bytes_in == 500


def test_new_interface_is_folded_into_sum(ctx):
    readings = [
        [_iface("eth0", 1000, 100, 0)],
        [_iface("eth0", 1200, 150, 0), _iface("wlan0", 300, 30, 1)],
    ]
    probe = ThroughputProbe(ctx, read=_scripted(readings))
    probe.initialize()
    probe.sample()

    assert probe.sample().record.delta == CounterSet(500, 80, 1)


def test_counter_reset_passes_negative_delta(ctx):
    probe = ThroughputProbe(ctx, read=_scripted([[_iface(bytes_in=5000)], [_iface(bytes_in=1000)]]))
    probe.initialize()
    probe.sample()

    assert probe.sample().record.bytes_in == -4000


def test_reinitialize_rebaselines(ctx):
    probe = ThroughputProbe(ctx, read=_scripted([[_iface(bytes_in=10)], [_iface(bytes_in=90)]]))
    probe.initialize()
    probe.sample()
    probe.initialize()

    assert probe.sample().record.delta == CounterSet.zero()


def test_build_probe_uses_context_source(ctx):
    probe = build_probe(ctx)
    probe.initialize()
    assert probe.sample().record.delta == CounterSet.zero()


Stats = namedtuple("Stats", "isup flags")
Addr = namedtuple("Addr", "family address netmask broadcast ptp")
Io = namedtuple("Io", "bytes_sent bytes_recv packets_sent packets_recv errin errout dropin dropout")


def test_read_interfaces_from_psutil(monkeypatch):
    monkeypatch.setattr(
        ifaces.psutil,
        "net_if_stats",
        lambda: {
            "lo": Stats(True, "up,loopback,running"),
            "eth0": Stats(True, "up,broadcast,running,multicast"),
            "ppp0": Stats(True, "up,pointopoint,running"),
            "eth1": Stats(True, "up,broadcast"),
        },
    )
    monkeypatch.setattr(
        ifaces.psutil,
        "net_if_addrs",
        lambda: {
            "lo": [Addr(socket.AF_INET, "127.0.0.1", None, None, None)],
            "eth0": [Addr(socket.AF_INET, "192.168.1.20", None, None, None)],
            "ppp0": [Addr(socket.AF_INET, "10.64.0.2", None, None, None)],
            "eth1": [Addr(socket.AF_INET6, "fe80::1%eth1", None, None, None)],
        },
    )
    monkeypatch.setattr(
        ifaces.psutil,
        "net_io_counters",
        lambda pernic: {
            "lo": Io(5, 5, 1, 1, 0, 0, 0, 0),
            "eth0": Io(2000, 3000, 10, 20, 1, 0, 2, 0),
            "ppp0": Io(7, 7, 1, 1, 0, 0, 0, 0),
        },
    )

    by_name = {i.name: i for i in ifaces.read_interfaces()}

    assert by_name["lo"].is_loopback
    assert by_name["ppp0"].is_point_to_point
    assert by_name["eth0"].dns_enabled
    assert not by_name["eth1"].dns_enabled
    assert by_name["eth1"].bytes_in == 0
    assert by_name["eth0"].counters() == CounterSet(bytes_in=3000, bytes_out=2000, packets_lost=3)
    assert sum_counters(by_name.values()) == CounterSet(3000, 2000, 3)


def test_flags_fall_back_to_interface_name():
    NoFlags = namedtuple("NoFlags", "isup")
    assert ifaces.looks_like_loopback("lo", NoFlags(True))
    assert ifaces.looks_like_point_to_point("ppp1", NoFlags(True))
    assert not ifaces.looks_like_loopback("eth0", NoFlags(True))
