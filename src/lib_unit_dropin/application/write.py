"""Drop-in fragment writing.

Purpose
-------
Materialize an override fragment at the location computed by
:func:`lib_unit_dropin.domain.fragments.drop_in_file`: create the override
directory, then replace the fragment file atomically.

Contents
--------
* :class:`DropInWriter` – ``write_drop_in`` and ``write_drop_in_format``.
"""

from __future__ import annotations

import os
from typing import Any

from ..domain.fragments import drop_in_file
from .ports import AtomicFileWriter, DiagnosticSink, DirectoryCreator

#: Mode used when creating override directories.
DROPIN_DIR_MODE = 0o755


class DropInWriter:
    """Persist drop-in fragments through the directory and file-writer ports."""

    def __init__(
        self,
        *,
        directories: DirectoryCreator,
        writer: AtomicFileWriter,
        sink: DiagnosticSink,
    ) -> None:
        self.directories = directories
        self.writer = writer
        self.sink = sink

    def write_drop_in(
        self,
        directory: str | os.PathLike[str],
        unit: str,
        level: int,
        name: str,
        data: str,
    ) -> str:
        """Write *data* as fragment ``(unit, level, name)`` below *directory*.

        Why
        ----
        Tools that adjust unit settings (``systemctl set-property``-style
        helpers) need a stable file per logical key that later writes replace.

        What
        ----
        Computes the paths, ensures the override directory exists (an existing
        directory is fine), and writes *data* verbatim through the atomic
        writer.

        Returns
        -------
        str
            Path of the written fragment.

        Raises
        ------
        InvalidName
            When *name* cannot be turned into a filename.
        OSError
            When the directory cannot be created or the file cannot be
            written. No partial fragment is left behind.
        """

        paths = drop_in_file(directory, unit, level, name)
        self.directories.ensure(paths.directory, DROPIN_DIR_MODE)
        self.writer.write(paths.file, data)
        self.sink.debug("dropin_written", unit=unit, path=paths.file, level=level, size=len(data))
        return paths.file

    def write_drop_in_format(
        self,
        directory: str | os.PathLike[str],
        unit: str,
        level: int,
        name: str,
        format: str,
        *args: Any,
    ) -> str:
        """Render ``format % args`` and write it with :meth:`write_drop_in`.

        >>> class _Sink:
        ...     def debug(self, message, **fields): pass
        >>> class _Memory:
        ...     files = {}
        ...     def ensure(self, path, mode=0o755): pass
        ...     def write(self, path, content): self.files[path] = content
        >>> memory = _Memory()
        >>> writer = DropInWriter(directories=memory, writer=memory, sink=_Sink())
        >>> path = writer.write_drop_in_format("/run/systemd/system", "a.service", 50, "CPU", "[Service]\\nCPUWeight=%d\\n", 20)
        >>> path, memory.files[path]
        ('/run/systemd/system/a.service.d/50-CPU.conf', '[Service]\\nCPUWeight=20\\n')
        """

        data = format % args
        return self.write_drop_in(directory, unit, level, name, data)
