from collections import deque

import pytest

from netmon.core.config import AgentConfig
from netmon.core.probe_base import ProbeContext
from netmon.core.models import PingStatus
from netmon.probes.latency.pinger import EchoResult


class FakeSink:
    """Collects everything the agent would have logged."""

    def __init__(self):
        self.records = []
        self.messages = []
        self.errors = []

    def message(self, text):
        self.messages.append(text)

    def error(self, text):
        self.errors.append(text)

    def emit(self, record):
        if record is None:
            return
        self.records.append(record)
        self.messages.append(record.message())

    def close(self):
        pass


class FakePinger:
    """
    script: list of EchoResult or Exception instances returned/raised in order.
    When the script runs out every call times out.
    """

    def __init__(self, script=None):
        self.script = deque(script or [])
        self.calls = []

    def echo(self, address, timeout_ms):
        self.calls.append((address, timeout_ms))
        if not self.script:
            return EchoResult(status=PingStatus.TIMED_OUT)
        item = self.script.popleft()
        if isinstance(item, Exception):
            raise item
        return item


class FakeWatcher:
    """Link watcher whose notifications are fired by the test."""

    def __init__(self):
        self.handler = None
        self.started = False
        self.stopped = False

    def subscribe(self, handler, on_error=None):
        self.handler = handler
        self.on_error = on_error

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def fire(self, available):
        self.handler(available)

    def fail(self, exc):
        self.on_error(exc)


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def config(tmp_path):
    return AgentConfig(
        endpoint="http://example.com",
        interval_ms=100,
        log_file=str(tmp_path / "netmon.log"),
    )


@pytest.fixture
def pinger():
    return FakePinger()


@pytest.fixture
def watcher():
    return FakeWatcher()


@pytest.fixture
def ctx(sink, config, pinger, watcher):
    return ProbeContext(
        sink=sink,
        config=config,
        sources={
            "pinger": pinger,
            "resolver": lambda host: "93.184.216.34",
            "link_watcher": watcher,
            "interfaces": lambda: [],
        },
    )


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "netmon.log"
