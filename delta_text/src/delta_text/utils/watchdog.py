"""Watch single input files and report content changes.

Editors often save by writing a temporary file and renaming it over the
original, so the observer watches the file's directory and keeps only the
events whose source or destination is the watched file. Bursts of events are
collapsed into one callback after a short quiet period.
"""

from __future__ import annotations

import os
import threading
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .error_handling import log_watchdog_error
from .logger import log

_CONTENT_EVENTS = frozenset({"modified", "created", "moved"})


class _DebouncedFileHandler(FileSystemEventHandler):
    """Calls back once per burst of events that touch a single file."""

    def __init__(self, file_path: str, callback: Callable[[], None], debounce_ms: int = 100) -> None:
        self._file_path = os.path.abspath(file_path)
        self._callback = callback
        self._delay = max(0, int(debounce_ms)) / 1000.0
        self._pending: threading.Timer | None = None
        self._lock = threading.Lock()

    def _fire(self) -> None:
        with self._lock:
            self._pending = None
        try:
            self._callback()
        except (RuntimeError, OSError) as e:
            log_watchdog_error(self._file_path, "running change callback", e)

    def _restart_timer(self) -> None:
        timer = threading.Timer(self._delay, self._fire)
        timer.daemon = True
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = None

    def _is_watched(self, path) -> bool:
        return bool(path) and os.path.abspath(os.fsdecode(path)) == self._file_path

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in _CONTENT_EVENTS:
            return
        if not (self._is_watched(event.src_path) or self._is_watched(getattr(event, "dest_path", ""))):
            return
        log.debug(f"[WATCHDOG] {event.event_type} {self._file_path}")
        self._restart_timer()


def watch_file(
    file_path: str, on_change: Callable[[], None], *, debounce_ms: int = 100
) -> Callable[[], None]:
    """Start watching ``file_path`` and return an idempotent stop function.

    ``on_change`` runs on a timer thread, not on the caller's thread.
    """
    abs_path = os.path.abspath(file_path)
    handler = _DebouncedFileHandler(abs_path, on_change, debounce_ms=debounce_ms)
    observer = Observer()
    observer.schedule(handler, os.path.dirname(abs_path) or ".", recursive=False)
    observer.start()
    log.debug(f"[WATCHDOG] Watching {abs_path}")

    stopped = threading.Event()

    def stop() -> None:
        if stopped.is_set():
            return
        stopped.set()
        handler.cancel()
        try:
            observer.stop()
            observer.join(timeout=0.5)
        except RuntimeError as e:
            log_watchdog_error(abs_path, "stopping observer", e)

    return stop
