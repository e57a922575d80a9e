from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from typing import Iterable

from .config import config
from .error_handling import log_file_error
from .logger import log


class FileLoadError(Exception):
    """A file could not be loaded as comparison input."""

    pass


@dataclass
class FileReadResult:
    """Decoded content of one input file."""
    path: str
    content: str = ""
    encoding: str = ""

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


DEFAULT_ENCODINGS: tuple[str, ...] = (
    "utf-8",
    "utf-8-sig",
    "cp1252",
    "latin-1",
)


def decode_bytes(data: bytes, encodings: Iterable[str] = DEFAULT_ENCODINGS, lossy: bool = True) -> tuple[str, str]:
    """Decode ``data`` with the first encoding that accepts it.

    Returns ``(text, encoding)``. When nothing decodes cleanly and ``lossy``
    is set, the last encoding is applied with undecodable bytes dropped and
    the reported encoding gets a ``+ignore`` suffix.

    Raises:
        UnicodeDecodeError: If no encoding fits and ``lossy`` is False
    """
    encodings = tuple(encodings)
    if not encodings:
        raise ValueError("at least one encoding is required")

    failure: UnicodeDecodeError | None = None
    for encoding in encodings:
        if encoding == "utf-8" and data.startswith(codecs.BOM_UTF8) and "utf-8-sig" in encodings:
            continue
        try:
            return data.decode(encoding), encoding
        except UnicodeDecodeError as e:
            failure = e
    if not lossy:
        raise failure
    return data.decode(encodings[-1], errors="ignore"), f"{encodings[-1]}+ignore"


def read_text(path: str, encodings: Iterable[str] = DEFAULT_ENCODINGS, lossy: bool = True) -> tuple[str, str]:
    """Read a whole file and decode it with :func:`decode_bytes`.

    Raises:
        OSError: If the file cannot be opened or read
        UnicodeDecodeError: If no encoding fits and ``lossy`` is False
    """
    with open(path, "rb") as f:
        data = f.read()
    text, encoding = decode_bytes(data, encodings, lossy)
    if encoding.endswith("+ignore"):
        log.warning(f"[IO] Dropped undecodable bytes from {path}")
    return text, encoding


def load_input_file(file_path: str, max_bytes: int | None = None) -> FileReadResult:
    """Load one comparison input, enforcing the size limit.

    Args:
        file_path: Path to the file to read
        max_bytes: Size limit in bytes (defaults to ``config.max_file_bytes``)

    Returns:
        FileReadResult with the decoded content and the encoding used

    Raises:
        FileLoadError: If the path is empty, missing, too large or unreadable
    """
    if not file_path:
        raise FileLoadError("No file path provided")

    limit = config.max_file_bytes if max_bytes is None else max_bytes
    try:
        size = os.path.getsize(file_path)
    except OSError as e:
        log_file_error(file_path, "inspecting", e)
        raise FileLoadError(f"Cannot access {file_path}: {e}") from e

    if size > limit:
        raise FileLoadError(
            f"{os.path.basename(file_path)} is too large ({size} bytes); files must be smaller than {limit} bytes"
        )

    try:
        content, encoding = read_text(file_path)
    except (OSError, UnicodeDecodeError) as e:
        log_file_error(file_path, "reading", e)
        raise FileLoadError(f"Error reading {file_path}: {e}") from e

    log.debug(f"[IO] Loaded {file_path} ({size} bytes, {encoding})")
    return FileReadResult(path=file_path, content=content, encoding=encoding)
