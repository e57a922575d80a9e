"""Input validation for command-line file arguments."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from .error_handling import log_validation_error

MAX_PATH_LENGTH = 4096

# Text and source formats accepted as comparison input
ACCEPTED_EXTENSIONS = frozenset({
    ".txt", ".md", ".json", ".sql",
    ".html", ".css", ".js", ".jsx", ".ts", ".tsx",
    ".py", ".java", ".c", ".cpp", ".h", ".rb", ".php",
})


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def validate_file_path(
    path: str,
    name: str = "File",
    must_exist: bool = True,
    allowed_extensions: Iterable[str] | None = None,
) -> str:
    """Validate a file path and return it as a normalized absolute path.

    Args:
        path: The file path to validate
        name: Human-readable name for error messages
        must_exist: Whether the file must already exist
        allowed_extensions: Lower-case suffixes (with the dot) the file may have,
            or None to accept any suffix

    Returns:
        Normalized absolute path

    Raises:
        ValidationError: If validation fails
    """
    if not path or not path.strip():
        raise ValidationError(f"{name} cannot be empty")

    path = path.strip()

    if '\x00' in path:
        raise ValidationError(f"{name} contains invalid characters")

    try:
        resolved_path = Path(path).expanduser().resolve()
        abs_path = str(resolved_path)
    except (OSError, ValueError, RuntimeError) as e:
        raise ValidationError(f"{name} is not a valid path: {e}") from e

    if len(abs_path) > MAX_PATH_LENGTH:
        raise ValidationError(f"{name} is too long (max {MAX_PATH_LENGTH} characters)")

    if allowed_extensions is not None:
        allowed = frozenset(allowed_extensions)
        suffix = resolved_path.suffix.lower()
        if suffix not in allowed:
            shown = suffix or "(none)"
            raise ValidationError(
                f"{name} has an unsupported extension {shown}; expected one of {', '.join(sorted(allowed))}"
            )

    if must_exist:
        if not resolved_path.exists():
            raise ValidationError(f"{name} does not exist: {abs_path}")

        if not resolved_path.is_file():
            raise ValidationError(f"{name} is not a regular file: {abs_path}")

        if not os.access(abs_path, os.R_OK):
            raise ValidationError(f"{name} is not readable: {abs_path}")

    return abs_path


def validate_input_paths(
    first: str | None,
    second: str | None,
    allowed_extensions: Iterable[str] | None = ACCEPTED_EXTENSIONS,
) -> tuple[str | None, str | None]:
    """Validate the optional first/second input paths.

    Missing paths stay None (the inputs can be typed in the UI instead).
    Pass ``allowed_extensions=None`` to accept files of any type.
    """
    validated = []
    for label, value in (("First file", first), ("Second file", second)):
        if value is None:
            validated.append(None)
            continue
        try:
            validated.append(validate_file_path(value, label, allowed_extensions=allowed_extensions))
        except ValidationError as e:
            log_validation_error(label, value, e)
            raise
    return validated[0], validated[1]
