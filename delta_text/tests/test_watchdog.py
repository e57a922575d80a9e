"""Tests for single-file watching."""

import threading
import time
from unittest.mock import Mock

from watchdog.events import FileCreatedEvent, FileDeletedEvent, FileModifiedEvent, FileMovedEvent

from delta_text.utils.watchdog import _DebouncedFileHandler, watch_file


class TestDebouncedFileHandler:
    """Event filtering and debouncing without a real observer."""

    def test_events_for_other_files_are_ignored(self, tmp_path):
        callback = Mock()
        handler = _DebouncedFileHandler(str(tmp_path / "watched.txt"), callback, debounce_ms=10)

        handler.on_any_event(FileModifiedEvent(str(tmp_path / "other.txt")))
        time.sleep(0.05)

        callback.assert_not_called()

    def test_deleted_events_are_ignored(self, tmp_path):
        callback = Mock()
        path = str(tmp_path / "watched.txt")
        handler = _DebouncedFileHandler(path, callback, debounce_ms=10)

        handler.on_any_event(FileDeletedEvent(path))
        time.sleep(0.05)

        callback.assert_not_called()

    def test_burst_of_events_fires_once(self, tmp_path):
        callback = Mock()
        path = str(tmp_path / "watched.txt")
        handler = _DebouncedFileHandler(path, callback, debounce_ms=50)

        handler.on_any_event(FileModifiedEvent(path))
        handler.on_any_event(FileCreatedEvent(path))
        handler.on_any_event(FileModifiedEvent(path))
        time.sleep(0.2)

        callback.assert_called_once()

    def test_rename_onto_file_counts(self, tmp_path):
        callback = Mock()
        path = str(tmp_path / "watched.txt")
        handler = _DebouncedFileHandler(path, callback, debounce_ms=10)

        handler.on_any_event(FileMovedEvent(str(tmp_path / "watched.txt.swp"), path))
        time.sleep(0.1)

        callback.assert_called_once()

    def test_cancel_drops_pending_callback(self, tmp_path):
        callback = Mock()
        path = str(tmp_path / "watched.txt")
        handler = _DebouncedFileHandler(path, callback, debounce_ms=50)

        handler.on_any_event(FileModifiedEvent(path))
        handler.cancel()
        time.sleep(0.1)

        callback.assert_not_called()


class TestWatchFile:

    def test_change_on_disk_triggers_callback(self, tmp_path):
        target = tmp_path / "watched.txt"
        target.write_text("before")
        changed = threading.Event()

        stop = watch_file(str(target), changed.set, debounce_ms=20)
        try:
            time.sleep(0.1)
            target.write_text("after")
            assert changed.wait(timeout=5)
        finally:
            stop()

    def test_stop_is_idempotent(self, tmp_path):
        target = tmp_path / "watched.txt"
        target.write_text("content")

        stop = watch_file(str(target), Mock())
        stop()
        stop()
