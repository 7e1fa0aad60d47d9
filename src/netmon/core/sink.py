from __future__ import annotations

import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, TextIO, Union

from loguru import logger

CHANNEL = "netmon"

FILE_FORMAT = "{extra[stamp]}  [{extra[tag]}] {message}"
CONSOLE_FORMAT = "[{extra[tag]}] {message}"


def _channel_filter(record: Any) -> bool:
    return record["extra"].get("channel") == CHANNEL


def setup_logging(level: str = "WARNING") -> None:
    """
    Replace loguru's default handler with a stderr handler for adapter
    diagnostics only. Records go through LogSink, never here.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        filter=lambda record: not _channel_filter(record),
        format="{time:HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
    )


def timestamp(now: Optional[datetime] = None) -> str:
    """
    Locale formatted date plus a fixed width time with microseconds.
    """
    now = now or datetime.now()
    return f"{now.strftime('%x')} {now.strftime('%H:%M:%S.%f')}"


class LogSink:
    """
    Append only record log.

    Two loguru handlers share the netmon channel:
      file
        UTF-8, appended, every physical line prefixed with the stamp and
        a one letter tag (M message, E error).

      console
        Same text without the stamp. True mirrors to the current
        sys.stdout, False disables it, a stream is used as is.

    Other loguru users are filtered out, so adapter debug output never
    lands in the record log.
    """

    def __init__(
        self,
        path: Union[str, Path],
        rotate_daily: bool = False,
        console: Union[bool, TextIO] = True,
    ):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._log = logger.bind(channel=CHANNEL)
        self._handler_ids: List[int] = []

        file_options: dict = {
            "format": FILE_FORMAT,
            "filter": _channel_filter,
            "level": "DEBUG",
            "encoding": "utf-8",
            "mode": "a",
            "colorize": False,
        }
        if rotate_daily:
            file_options["rotation"] = "00:00"

        self._handler_ids.append(logger.add(str(self.path), **file_options))

        if console is True:
            console = sys.stdout
        if console:
            self._handler_ids.append(
                logger.add(
                    console,
                    format=CONSOLE_FORMAT,
                    filter=_channel_filter,
                    level="DEBUG",
                    colorize=False,
                )
            )

    def message(self, text: str) -> None:
        self._write("M", "INFO", text)

    def error(self, text: str) -> None:
        self._write("E", "ERROR", text)

    def emit(self, record: Any) -> None:
        """
        Write one record. None means the probe had nothing to report.
        """
        if record is None:
            return
        self.message(record.message())

    def close(self) -> None:
        for handler_id in self._handler_ids:
            logger.remove(handler_id)
        self._handler_ids = []

    def _write(self, tag: str, level: str, text: str) -> None:
        stamp = timestamp()
        bound = self._log.bind(stamp=stamp, tag=tag)

        # One stamp per call, every physical line carries it.
        with self._lock:
            for line in str(text).split("\n"):
                bound.log(level, line)
