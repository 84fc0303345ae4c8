"""Detection of the Rust compiler minor version."""

from __future__ import annotations

import os
import subprocess


class VersionError(RuntimeError):
    """The toolchain version could not be determined."""


def _parse_version(text: str) -> tuple[int, int, int | None]:
    parts = text.strip().split(".")
    if len(parts) not in (2, 3):
        raise VersionError(f"invalid version format: {text!r}")
    try:
        numbers = [int(part) for part in parts]
    except ValueError as exc:
        raise VersionError(f"invalid version format: {text!r}") from exc
    patch = numbers[2] if len(numbers) == 3 else None
    return numbers[0], numbers[1], patch


def parse_minor_version(output: str, command: str) -> int:
    """Return the minor version from ``--version --verbose`` output of ``command``."""
    prefix = "release: "
    release = next(
        (line[len(prefix):] for line in output.splitlines() if line.startswith(prefix)),
        None,
    )
    if release is None:
        raise VersionError(
            f"could not find rustc release from output of {command}: {output}"
        )
    version = release.split("-", 1)[0]
    major, minor, patch = _parse_version(version)
    if major != 1 or patch is None:
        raise VersionError(f"unexpected output from {command}: {output}")
    return minor


def minor_version(cargo: str | os.PathLike) -> int:
    """Run ``cargo --version --verbose`` and return the minor version it reports."""
    argv = [os.fspath(cargo), "--version", "--verbose"]
    command = "`" + " ".join(argv) + "`"
    try:
        result = subprocess.run(argv, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise VersionError(f"could not execute process {command}: {exc}") from exc
    if result.returncode != 0:
        raise VersionError(
            f"process didn't exit successfully: {command} "
            f"(exit status: {result.returncode})\n{result.stderr}"
        )
    return parse_minor_version(result.stdout, command)