"""Uniform error log lines.

Every failure is reported as ``[TAG] Failed <what>: <ErrorType>: <message>``
so that the debug log can be grepped by subsystem.
"""

from typing import Any

from .logger import LogLevel, log


def _report(tag: str, what: str, exception: BaseException, level: LogLevel = LogLevel.ERROR) -> None:
    log.log(level, f"[{tag}] Failed {what}: {type(exception).__name__}: {exception}")


def log_file_error(file_path: str, operation: str, exception: Exception) -> None:
    """Report a failed file operation such as "reading" or "inspecting"."""
    _report("IO", f"{operation} {file_path}", exception)


def log_computation_error(first_len: int, second_len: int, exception: Exception) -> None:
    """Report a diff computation that could not finish, with both input sizes."""
    _report("DIFF", f"computing diff ({first_len} vs {second_len} chars)", exception)


def log_scheduler_error(operation: str, exception: Exception) -> None:
    _report("SCHED", operation, exception)


def log_validation_error(field: str, value: Any, exception: Exception) -> None:
    """Report rejected user input; a warning, since the caller re-raises."""
    _report("VALIDATION", f"validating {field}='{value}'", exception, LogLevel.WARNING)


def log_ui_error(component: str, action: str, exception: Exception) -> None:
    _report("UI", f"{action} on {component}", exception)


def log_watchdog_error(path: str, operation: str, exception: Exception) -> None:
    _report("WATCHDOG", f"{operation} for {path}", exception)
