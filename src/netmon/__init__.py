"""
netmon

Single host network health agent.

Core ideas
1. Probes sample one signal kind each (availability, latency, throughput)
2. Probes return immutable records, never free text
3. Core scheduler drives probes in a fixed order without knowing the signal kind
"""

__all__ = ["core", "probes", "cli"]
