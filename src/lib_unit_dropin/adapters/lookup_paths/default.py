"""Unit search path resolution.

Purpose
-------
Implement the :class:`lib_unit_dropin.application.ports.LookupPaths` protocol
by encapsulating the directory conventions of the system, per-user and global
user scopes. The adapter is the only component that knows where unit files
and their drop-ins live by default.

Contents
--------
* :data:`SCOPES` – supported scope identifiers.
* :class:`DefaultLookupPaths` – ordered search path for one scope.
* :func:`build_unit_path_cache` – snapshot of existing search entries used to
  skip impossible drop-in candidates.

System Role
-----------
Feeds :func:`lib_unit_dropin.core.find_unit_dropin_paths` and the CLI. It
respects ``SYSTEMD_UNIT_PATH`` and the XDG variables so deployments and tests
can redirect every lookup, and prefixes defaults with an optional root for
offline image inspection.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Iterable, Iterator

from ...observability import log_debug

SCOPES: Final[tuple[str, ...]] = ("system", "user", "global")

_SYSTEM_DIRS: Final[tuple[str, ...]] = (
    "/etc/systemd/system.control",
    "/run/systemd/system.control",
    "/run/systemd/transient",
    "/etc/systemd/system",
    "/run/systemd/system",
    "/usr/local/lib/systemd/system",
    "/usr/lib/systemd/system",
)

_GLOBAL_DIRS: Final[tuple[str, ...]] = (
    "/etc/systemd/user",
    "/run/systemd/user",
    "/usr/local/lib/systemd/user",
    "/usr/lib/systemd/user",
)


class DefaultLookupPaths:
    """Resolve the ordered unit search path for a scope.

    Why
    ----
    Keep directory conventions in one adapter so drop-in discovery stays
    independent of where units live.
    """

    def __init__(
        self,
        *,
        scope: str = "system",
        root: str | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        """Store the context required to compute the search path.

        Parameters
        ----------
        scope:
            ``"system"``, ``"user"`` (the calling user's manager) or
            ``"global"`` (user units shared by all users).
        root:
            Optional directory prefixed to every default entry. Entries coming
            from ``SYSTEMD_UNIT_PATH`` are prefixed as well.
        env:
            Optional environment mapping overriding ``os.environ`` values
            (useful for deterministic tests).

        Raises
        ------
        ValueError
            When *scope* is unknown.
        """

        if scope not in SCOPES:
            raise ValueError(f"Unsupported lookup scope: {scope}")
        self.scope = scope
        self.root = root or None
        self.env = {**os.environ, **(env or {})}

    def search_path(self) -> list[str]:
        """Return lookup directories, highest priority first, without duplicates.

        ``SYSTEMD_UNIT_PATH`` replaces the defaults; when it ends with ``:`` the
        defaults are appended after its entries.

        Examples
        --------
        >>> DefaultLookupPaths(env={"SYSTEMD_UNIT_PATH": "/srv/units"}).search_path()
        ['/srv/units']
        >>> DefaultLookupPaths(root="/img", env={"SYSTEMD_UNIT_PATH": "/srv/units:"}).search_path()[:2]
        ['/img/srv/units', '/img/etc/systemd/system.control']
        """

        override = self.env.get("SYSTEMD_UNIT_PATH")
        entries: list[str] = []
        if override is not None:
            entries.extend(part for part in override.split(":") if part)
            if override.endswith(":"):
                entries.extend(self._defaults())
        else:
            entries.extend(self._defaults())

        paths = _unique(self._prefix_root(entry) for entry in entries)
        log_debug("lookup_paths_resolved", unit=None, path=None, scope=self.scope, count=len(paths))
        return paths

    def _defaults(self) -> Iterator[str]:
        if self.scope == "system":
            yield from _SYSTEM_DIRS
        elif self.scope == "global":
            yield from _GLOBAL_DIRS
        else:
            yield from self._user_dirs()

    def _user_dirs(self) -> Iterator[str]:
        """Yield per-user search directories following the XDG base directory spec."""

        home = Path(self.env.get("HOME") or Path.home())
        config_home = self.env.get("XDG_CONFIG_HOME") or str(home / ".config")
        data_home = self.env.get("XDG_DATA_HOME") or str(home / ".local" / "share")
        runtime_dir = self.env.get("XDG_RUNTIME_DIR")
        config_dirs = _split_dirs(self.env.get("XDG_CONFIG_DIRS"), "/etc/xdg")
        data_dirs = _split_dirs(self.env.get("XDG_DATA_DIRS"), "/usr/local/share:/usr/share")

        yield f"{config_home}/systemd/user.control"
        if runtime_dir:
            yield f"{runtime_dir}/systemd/user.control"
            yield f"{runtime_dir}/systemd/transient"
        yield f"{config_home}/systemd/user"
        for directory in config_dirs:
            yield f"{directory}/systemd/user"
        yield "/etc/systemd/user"
        if runtime_dir:
            yield f"{runtime_dir}/systemd/user"
        yield "/run/systemd/user"
        yield f"{data_home}/systemd/user"
        for directory in data_dirs:
            yield f"{directory}/systemd/user"
        yield "/usr/local/lib/systemd/user"
        yield "/usr/lib/systemd/user"

    def _prefix_root(self, entry: str) -> str:
        if not self.root:
            return entry
        return os.path.join(self.root, entry.lstrip("/"))


def build_unit_path_cache(lookup_paths: Iterable[str]) -> frozenset[str]:
    """Snapshot every lookup directory and the entries directly inside it.

    Why
    ----
    A scan over many units probes ``<dir>/<unit>.d`` for every combination.
    Reading each lookup directory once up front lets discovery skip
    candidates that cannot exist without issuing a filesystem call per
    candidate.

    Returns
    -------
    frozenset[str]
        Immutable set, safe to share between resolution passes.
    """

    cache: set[str] = set()
    for directory in lookup_paths:
        try:
            with os.scandir(directory) as iterator:
                names = [entry.name for entry in iterator]
        except FileNotFoundError:
            continue
        except OSError as exc:
            log_debug("unit_path_cache_skipped", unit=None, path=directory, error=str(exc))
            continue
        cache.add(directory)
        cache.update(f"{directory}/{name}" for name in names)
    return frozenset(cache)


def _split_dirs(value: str | None, default: str) -> list[str]:
    return [part for part in (value or default).split(":") if part]


def _unique(entries: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for entry in entries:
        if entry in seen:
            continue
        seen.add(entry)
        ordered.append(entry)
    return ordered
