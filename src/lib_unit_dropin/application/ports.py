"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so drop-in
discovery and writing can be orchestrated without depending on concrete
filesystem implementations.

Contents
--------
* :class:`PathCanonicalizer` – resolves symlinks, optionally below a root.
* :class:`AtomicFileWriter` – persists text without exposing partial files.
* :class:`DirectoryCreator` – idempotent ``mkdir -p``.
* :class:`ConfigFileLister` – merges fragment files of several directories.
* :class:`UnitPathCache` – read-only set of known unit search paths.
* :class:`DiagnosticSink` – debug/warning/error channels.
* :class:`LookupPaths` – ordered unit search directories.

System Role
-----------
These protocols enforce Dependency Inversion. Each adapter implements one
protocol; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PathCanonicalizer(Protocol):
    """Resolve a path to its canonical absolute form.

    Why
    ----
    Drop-in directories are frequently symlinked; discovery must record the
    real directory and must distinguish "absent" from "broken".

    Errors are reported as :class:`OSError` subclasses whose ``errno`` tells
    ``ENOENT`` and ``ENAMETOOLONG`` apart from other failures.
    """

    def resolve(self, path: str, root: str | None = None) -> str:
        """Return the canonical form of *path*, resolving symlinks below *root*."""


@runtime_checkable
class AtomicFileWriter(Protocol):
    """Write a string so readers never observe a partially written file."""

    def write(self, path: str, content: str) -> None:
        """Replace *path* with *content* atomically."""


@runtime_checkable
class DirectoryCreator(Protocol):
    """Create a directory and its parents, succeeding if it already exists."""

    def ensure(self, path: str, mode: int = 0o755) -> None:
        """Make sure *path* exists as a directory."""


@runtime_checkable
class ConfigFileLister(Protocol):
    """Merge matching files of several directories into one ordered list.

    Why
    ----
    Fragments with the same basename in several directories override each
    other; the lister applies that rule and produces a deterministic order.
    """

    def list(self, suffix: str | None, directories: Sequence[str]) -> list[str]:
        """Return deduplicated, sorted paths of files ending in *suffix*."""


@runtime_checkable
class UnitPathCache(Protocol):
    """Pure lookup capability over known unit search paths."""

    def __contains__(self, path: object) -> bool:
        """Return ``True`` when *path* is known to exist."""


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receive diagnostics emitted during discovery and writing."""

    def debug(self, message: str, **fields: Any) -> None:
        """Record a low-importance event."""

    def warning(self, message: str, **fields: Any) -> None:
        """Record a recoverable problem."""

    def error(self, message: str, **fields: Any) -> None:
        """Record a failure that aborts the current operation."""


@runtime_checkable
class LookupPaths(Protocol):
    """Provide the ordered unit search path, highest priority first."""

    def search_path(self) -> Iterable[str]:
        """Yield the lookup directories for the configured scope."""
