"""Atomic file writes and directory creation.

Purpose
-------
Implement the :class:`~lib_unit_dropin.application.ports.AtomicFileWriter` and
:class:`~lib_unit_dropin.application.ports.DirectoryCreator` ports. Fragments
are written to a temporary file in the destination directory, flushed,
fsync'd and renamed over the target, so readers see either the old file or the
complete new one.

Contents
--------
* :func:`write_string_atomic` – temp file + fsync + :func:`os.replace`.
* :func:`mkdir_p` – ``mkdir -p`` tolerant of existing directories.
* :class:`AtomicFileWriter` / :class:`DirectoryCreator` – port adapters.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import suppress
from pathlib import Path

from ...observability import log_debug


def write_string_atomic(path: str | os.PathLike[str], content: str, *, mode: int = 0o644) -> None:
    """Replace *path* with *content* without exposing a partial file.

    The parent directory must exist. Content is written verbatim as UTF-8; no
    newline is appended. The file gets *mode* masked by the process umask.
    Any leftover temporary file is removed on failure and the original
    exception propagates.
    """

    target = Path(path)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=str(target.parent),
            prefix=f".#{target.name}",
            delete=False,
        ) as handle:
            tmp_path = Path(handle.name)
            handle.write(content)
            handle.flush()
            os.fchmod(handle.fileno(), mode & ~_current_umask())
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
        tmp_path = None
    finally:
        if tmp_path is not None:
            with suppress(FileNotFoundError):
                tmp_path.unlink()
    log_debug("file_written_atomic", path=str(target), size=len(content))


def _current_umask() -> int:
    """Return the process umask; it can only be read by setting it."""

    previous = os.umask(0)
    os.umask(previous)
    return previous


def mkdir_p(path: str | os.PathLike[str], mode: int = 0o755) -> None:
    """Create *path* and missing parents; an existing directory is not an error."""

    Path(path).mkdir(mode=mode, parents=True, exist_ok=True)


class AtomicFileWriter:
    """Write fragments with :func:`write_string_atomic`."""

    def __init__(self, *, mode: int = 0o644) -> None:
        self.mode = mode

    def write(self, path: str, content: str) -> None:
        write_string_atomic(path, content, mode=self.mode)


class DirectoryCreator:
    """Create override directories with :func:`mkdir_p`."""

    def ensure(self, path: str, mode: int = 0o755) -> None:
        mkdir_p(path, mode)
