from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol


@dataclass
class ProbeContext:
    """
    Shared runtime objects handed to each probe factory.

    sink
      LogSink that records go to. Probes only write to it directly for
      events outside the polling cycle (link state notifications) and for
      startup messages.

    config
      AgentConfig with the endpoint and interval.

    sources
      Signal Source adapters keyed by name ("pinger", "resolver",
      "interfaces", "link_watcher"). Missing keys mean the probe builds
      its real OS adapter. Tests put fakes here.
    """

    sink: Any
    config: Any
    sources: dict = field(default_factory=dict)

    def source(self, name: str, default: Any = None) -> Any:
        return self.sources.get(name, default)


@dataclass(frozen=True)
class SampleOutcome:
    """
    Result of one Probe.sample() call.

    record
      Immutable record for the sink, or None when there is nothing to say.

    proceed
      True lets the cycle continue with the next probe. False stops the
      rest of this cycle only.
    """

    record: Optional[Any] = None
    proceed: bool = True


class Probe(Protocol):
    """
    Required interface for a probe.

    A probe samples exactly one signal kind per cycle. Probes are loaded by
    the registry from import paths and driven by the CycleRunner in the
    order they were registered.
    """

    name: str

    def initialize(self) -> None:
        """
        Called once before the first cycle. Raising here is fatal.
        """
        ...

    def sample(self) -> SampleOutcome:
        """
        Called once per cycle. Must not raise for transient failures.
        """
        ...

    def close(self) -> None:
        """
        Release OS resources such as watcher threads.
        """
        ...
