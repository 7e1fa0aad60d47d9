from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Dict, List

from .exceptions import ProbeLoadError
from .probe_base import Probe, ProbeContext

DEFAULT_PROBES: List[str] = [
    "netmon.probes.availability.probe:build_probe",
    "netmon.probes.latency.probe:build_probe",
    "netmon.probes.throughput.probe:build_probe",
]


@dataclass
class LoadedProbe:
    """
    Wrapper for a loaded probe instance.
    """
    name: str
    instance: Probe


class ProbeRegistry:
    """
    Holds loaded probe instances in registration order.

    Order matters: the scheduler runs probes in exactly this order and an
    earlier probe can stop the rest of the cycle.

    Import string format:
      "some.module.path:factory_function"

    The factory is called with the ProbeContext.
    """

    def __init__(self):
        self._probes: Dict[str, LoadedProbe] = {}

    def register(self, probe: Probe) -> None:
        if probe.name in self._probes:
            raise ProbeLoadError(f"duplicate probe name {probe.name}")
        self._probes[probe.name] = LoadedProbe(name=probe.name, instance=probe)

    def list(self) -> List[str]:
        return list(self._probes.keys())

    def probes(self) -> List[Probe]:
        return [p.instance for p in self._probes.values()]

    def load_from_import_paths(self, import_paths: List[str], ctx: ProbeContext) -> None:
        for path in import_paths:
            try:
                module_path, factory_name = path.split(":")
                module = importlib.import_module(module_path)
                factory = getattr(module, factory_name)
            except (ValueError, ImportError, AttributeError) as exc:
                raise ProbeLoadError(f"cannot load probe {path!r}: {exc}") from exc
            self.register(factory(ctx))

    def initialize_all(self) -> None:
        for probe in self.probes():
            probe.initialize()

    def close_all(self) -> None:
        for probe in self.probes():
            close = getattr(probe, "close", None)
            if close is not None:
                close()
