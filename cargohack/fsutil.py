"""File helpers that report the path on failure."""

from __future__ import annotations

import os
from pathlib import Path


class FileError(OSError):
    """A file could not be read or written."""


def write(path: str | os.PathLike, contents: str | bytes) -> None:
    """Write ``contents`` as the entire contents of the file at ``path``."""
    data = contents.encode("utf-8") if isinstance(contents, str) else bytes(contents)
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        raise FileError(f"failed to write to file `{path}`: {exc}") from exc


def read_to_string(path: str | os.PathLike) -> str:
    """Read the entire contents of a UTF-8 file into a string."""
    try:
        return Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileError(f"failed to read from file `{path}`: {exc}") from exc