"""
Probes are pluggable modules loaded by the registry at startup.

Each probe package must expose a build_probe factory in its probe module.
"""

__all__ = [
    "availability",
    "latency",
    "throughput",
]
