from __future__ import annotations

import locale
import sys
from typing import Callable, List, Optional

from loguru import logger

from netmon.core.config import DEFAULT_LOG_FILE, parse_args
from netmon.core.exceptions import ConfigError, NetMonError
from netmon.core.probe_base import ProbeContext
from netmon.core.registry import DEFAULT_PROBES, ProbeRegistry
from netmon.core.scheduler import CycleRunner
from netmon.core.sink import LogSink, setup_logging

BANNER = "-" * 50
EXIT_INTERRUPTED = 130


def _log_file_hint(argv: List[str]) -> str:
    """
    Log path from argv without validating anything else, so argument
    errors land in the same log as a normal run.
    """
    for i, arg in enumerate(argv):
        if arg == "--log-file" and i + 1 < len(argv):
            return argv[i + 1]
        if arg.startswith("--log-file="):
            return arg.split("=", 1)[1]
    return DEFAULT_LOG_FILE


def _use_system_locale() -> None:
    # Dates in the record log follow the user locale.
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as exc:
        logger.debug("keeping default locale for dates: {}", exc)


def _banner(sink: LogSink) -> None:
    sink.message(BANNER)
    sink.message("Starting up NetMon...")
    sink.message(BANNER)


def main(
    argv: Optional[List[str]] = None,
    sources: Optional[dict] = None,
    max_cycles: Optional[int] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> int:
    """
    Validate arguments, start the probes and poll until killed.

    Exit codes:
      1  wrong argument count
      2  malformed endpoint or interval
      3  endpoint did not resolve, or any fatal error in the loop
    Returns 0 only when max_cycles is given and reached.

    sources and sleep replace the OS adapters and the interval wait.

    Example:
      netmon https://example.com 5000
      python -m netmon.cli.run_agent icmp://10.0.0.1 1000 --rotate-daily
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    _use_system_locale()
    setup_logging()

    try:
        config = parse_args(argv)
    except ConfigError as exc:
        sink = LogSink(_log_file_hint(argv))
        _banner(sink)
        sink.error(str(exc))
        sink.close()
        return exc.exit_code

    sink = LogSink(config.log_file, rotate_daily=config.rotate_daily)
    _banner(sink)

    ctx = ProbeContext(sink=sink, config=config, sources=sources or {})
    registry = ProbeRegistry()

    try:
        registry.load_from_import_paths(DEFAULT_PROBES, ctx)
        registry.initialize_all()

        kwargs = {"sleep": sleep} if sleep is not None else {}
        runner = CycleRunner(registry.probes(), config.interval_seconds, sink, **kwargs)
        runner.run(max_cycles=max_cycles)
        return 0
    except NetMonError as exc:
        sink.error(str(exc))
        return exc.exit_code
    except KeyboardInterrupt:
        sink.message("Stopped.")
        return EXIT_INTERRUPTED
    except Exception as exc:
        sink.error(f"Fatal error: {exc!r}")
        return NetMonError.exit_code
    finally:
        registry.close_all()
        sink.close()


if __name__ == "__main__":
    raise SystemExit(main())
