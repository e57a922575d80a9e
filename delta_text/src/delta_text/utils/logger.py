"""Package-wide leveled logger.

Lines look like ``2025-01-01 12:00:00.123 [WARNING ] [TAG] message``. They go
to stderr, except while an attached Textual app owns the terminal, and also to
``/tmp/delta_text_debug.log`` when ``DEBUG=1`` is set. ``LOG_LEVEL`` picks the
threshold (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    from delta_text.utils.logger import log
    log.debug(f"[DIFF] {len(script)} ops")
"""

from __future__ import annotations

import os
import sys
import traceback
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from textual.app import App

DEBUG_LOG_PATH = Path("/tmp/delta_text_debug.log")


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def parse(cls, name: str) -> LogLevel | None:
        name = name.strip().upper()
        if name == "WARN":
            name = "WARNING"
        return cls.__members__.get(name)


_TTY_COLORS = {
    LogLevel.DEBUG: "\033[90m",
    LogLevel.WARNING: "\033[93m",
    LogLevel.ERROR: "\033[91m",
    LogLevel.CRITICAL: "\033[95m",
}
_RESET = "\033[0m"


class Logger:
    """Leveled logger writing to stderr and, optionally, a debug file."""

    def __init__(self, level: LogLevel = LogLevel.INFO):
        self.level = level
        self._file: TextIO | None = None
        self.file_path: Path | None = None
        self._app: App | None = None

        if os.environ.get("DEBUG") == "1":
            self.level = LogLevel.DEBUG
            self.open_file(DEBUG_LOG_PATH)
        override = LogLevel.parse(os.environ.get("LOG_LEVEL", ""))
        if override is not None:
            self.level = override

    def open_file(self, path: Path, append: bool = True) -> bool:
        """Mirror log lines into ``path``. Returns False if the file cannot be opened."""
        self.close()
        try:
            self._file = open(path, "a" if append else "w", encoding="utf-8")
        except OSError as e:
            sys.stderr.write(f"delta-text: cannot open log file {path}: {e}\n")
            return False
        self.file_path = path
        return True

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self.file_path = None

    def attach_app(self, app: App) -> None:
        """Stop writing to stderr while ``app`` owns the terminal."""
        self._app = app

    def detach_app(self, app: App | None = None) -> None:
        if app is None or app is self._app:
            self._app = None

    def _can_write_stderr(self) -> bool:
        # Textual renders to the terminal; writing there would corrupt the screen
        if self._app is None:
            return True
        return bool(getattr(self._app, "is_headless", False))

    def log(self, level: LogLevel, *args: Any, sep: str = " ", exc_info: bool = False) -> None:
        if level < self.level:
            return
        line = self._format(level, sep.join(str(arg) for arg in args))
        if exc_info:
            line += "\n" + traceback.format_exc().rstrip()

        if self._file is not None:
            self._file.write(line + "\n")
            self._file.flush()
        if self._can_write_stderr():
            self._write_stderr(level, line)

    @staticmethod
    def _format(level: LogLevel, message: str) -> str:
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        return f"{stamp} [{level.name:8}] {message}"

    @staticmethod
    def _write_stderr(level: LogLevel, line: str) -> None:
        stream = sys.stderr
        if stream is None or stream.closed:
            return
        color = _TTY_COLORS.get(level)
        if color and stream.isatty():
            line = f"{color}{line}{_RESET}"
        stream.write(line + "\n")
        stream.flush()

    def debug(self, *args: Any, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def info(self, *args: Any, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def warning(self, *args: Any, **kwargs) -> None:
        self.log(LogLevel.WARNING, *args, **kwargs)

    def error(self, *args: Any, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def critical(self, *args: Any, **kwargs) -> None:
        self.log(LogLevel.CRITICAL, *args, **kwargs)

    def __call__(self, *args: Any, sep: str = " ") -> None:
        """Shorthand for info()."""
        self.info(*args, sep=sep)


log = Logger()
