"""Composition root for ``lib_unit_dropin``.

Purpose
-------
Provide the entry points that wire the filesystem adapters and the logging
diagnostic sink into the application services, and export only stable,
consumer-ready APIs.

Contents
--------
* :data:`_RESOLVER` / :data:`_WRITER` – default service instances.
* :func:`write_drop_in` / :func:`write_drop_in_format` – create fragments.
* :func:`find_dropin_paths` – general drop-in discovery.
* :func:`find_unit_dropin_paths` – discovery with the usual ``.d``/``.conf``
  suffixes and the default search path.

System Role
-----------
This module connects adapters (symlink chaser, atomic writer, fragment
lister, lookup paths) with the application layer. It is the canonical place
to swap an adapter; callers needing a different wiring can construct
:class:`DropInResolver` or :class:`DropInWriter` themselves.
"""

from __future__ import annotations

import os
from typing import Any, Iterable, Sequence

from .adapters.conf_files.default import DefaultConfigFileLister
from .adapters.fs.atomic import AtomicFileWriter, DirectoryCreator
from .adapters.fs.chase import SymlinkChaser
from .adapters.lookup_paths.default import DefaultLookupPaths, build_unit_path_cache
from .application.ports import UnitPathCache
from .application.resolve import DropInResolver, DropInSearchResult
from .application.write import DropInWriter
from .domain.errors import (
    DropInError,
    InvalidLevel,
    InvalidName,
    InvalidUnitName,
    ListingError,
    TemplateDerivationError,
)
from .domain.fragments import DropInPaths, drop_in_file
from .observability import LoggingDiagnosticSink

DROPIN_DIR_SUFFIX = ".d"
DROPIN_FILE_SUFFIX = ".conf"

_SINK = LoggingDiagnosticSink()
_RESOLVER = DropInResolver(canonicalizer=SymlinkChaser(), lister=DefaultConfigFileLister(), sink=_SINK)
_WRITER = DropInWriter(directories=DirectoryCreator(), writer=AtomicFileWriter(), sink=_SINK)


def write_drop_in(
    directory: str | os.PathLike[str],
    unit: str,
    level: int,
    name: str,
    data: str,
) -> str:
    """Write *data* to ``<directory>/<unit>.d/<level>-<name>.conf`` atomically.

    Returns the fragment path. See :meth:`DropInWriter.write_drop_in`.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from pathlib import Path
    >>> tmp = TemporaryDirectory()
    >>> path = write_drop_in(tmp.name, "demo.service", 10, "env", "[Service]\\nEnvironment=A=1\\n")
    >>> Path(path).relative_to(tmp.name).as_posix()
    'demo.service.d/10-env.conf'
    >>> Path(path).read_text()
    '[Service]\\nEnvironment=A=1\\n'
    >>> tmp.cleanup()
    """

    return _WRITER.write_drop_in(directory, unit, level, name, data)


def write_drop_in_format(
    directory: str | os.PathLike[str],
    unit: str,
    level: int,
    name: str,
    format: str,
    *args: Any,
) -> str:
    """Render ``format % args`` and write it like :func:`write_drop_in`."""

    return _WRITER.write_drop_in_format(directory, unit, level, name, format, *args)


def find_dropin_paths(
    original_root: str | None,
    lookup_paths: Sequence[str],
    unit_path_cache: UnitPathCache | None,
    dir_suffix: str,
    file_suffix: str | None,
    names: Iterable[str],
) -> DropInSearchResult:
    """Return ``(files, found)`` for the override directories of *names*.

    See :meth:`DropInResolver.find_dropin_paths` for the full contract.
    """

    return _RESOLVER.find_dropin_paths(original_root, lookup_paths, unit_path_cache, dir_suffix, file_suffix, names)


def find_unit_dropin_paths(
    names: str | Iterable[str],
    lookup_paths: Sequence[str] | None = None,
    *,
    root: str | None = None,
    cache: UnitPathCache | None = None,
    scope: str = "system",
) -> DropInSearchResult:
    """Return the ``.conf`` fragments of the ``.d`` directories for *names*.

    Why
    ----
    Most callers want the conventional suffixes and the default search path
    of a scope; this keeps them from repeating both.

    Parameters
    ----------
    names:
        A unit name or the names of a unit and its aliases.
    lookup_paths:
        Search directories; defaults to :class:`DefaultLookupPaths` for
        *scope*, prefixed with *root*.
    root:
        Directory confining symlink resolution (image inspection).
    cache:
        Optional result of :func:`build_unit_path_cache`.
    """

    if isinstance(names, str):
        names = [names]
    if lookup_paths is None:
        lookup_paths = DefaultLookupPaths(scope=scope, root=root).search_path()
    return find_dropin_paths(root, lookup_paths, cache, DROPIN_DIR_SUFFIX, DROPIN_FILE_SUFFIX, names)


__all__ = [
    "DROPIN_DIR_SUFFIX",
    "DROPIN_FILE_SUFFIX",
    "DropInError",
    "DropInPaths",
    "DropInResolver",
    "DropInSearchResult",
    "DropInWriter",
    "DefaultLookupPaths",
    "InvalidLevel",
    "InvalidName",
    "InvalidUnitName",
    "ListingError",
    "TemplateDerivationError",
    "build_unit_path_cache",
    "drop_in_file",
    "find_dropin_paths",
    "find_unit_dropin_paths",
    "write_drop_in",
    "write_drop_in_format",
]
