"""Configuration fragment listing.

Purpose
-------
Implement the :class:`lib_unit_dropin.application.ports.ConfigFileLister`
protocol. Several override directories may carry a fragment with the same
basename; the directory listed first wins and the others are shadowed. The
merged result is ordered by basename so the numeric level prefix of generated
fragments controls precedence.

Contents
--------
* :func:`conf_files_list` – merge fragment files of several directories.
* :func:`hidden_or_backup_file` – filter for dotfiles and package leftovers.
* :class:`DefaultConfigFileLister` – port adapter.

System Role
-----------
Called by :class:`lib_unit_dropin.application.resolve.DropInResolver` once all
candidate directories for a unit are known.
"""

from __future__ import annotations

import os
import stat
from typing import Final, Sequence

from ...observability import log_debug

_IGNORED_NAMES: Final[frozenset[str]] = frozenset({"lost+found", "aquota.user", "aquota.group"})

#: Extensions left behind by editors and package managers.
_BACKUP_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        "rpmnew",
        "rpmsave",
        "rpmorig",
        "dpkg-old",
        "dpkg-new",
        "dpkg-tmp",
        "dpkg-dist",
        "dpkg-bak",
        "dpkg-backup",
        "dpkg-remove",
        "ucf-new",
        "ucf-old",
        "ucf-dist",
        "swp",
        "bak",
        "old",
        "new",
    }
)


def hidden_or_backup_file(name: str) -> bool:
    """Return ``True`` for names that never count as configuration fragments.

    Examples
    --------
    >>> hidden_or_backup_file(".hidden.conf"), hidden_or_backup_file("10-a.conf~")
    (True, True)
    >>> hidden_or_backup_file("10-a.conf.dpkg-old"), hidden_or_backup_file("10-a.conf")
    (True, False)
    """

    if name.startswith(".") or name in _IGNORED_NAMES or name.endswith("~"):
        return True
    _, dot, extension = name.rpartition(".")
    return bool(dot) and extension in _BACKUP_EXTENSIONS


def conf_files_list(
    suffix: str | None,
    directories: Sequence[str],
    *,
    filter_masked: bool = False,
) -> list[str]:
    """Return fragment files found in *directories*, deduplicated and sorted.

    Why
    ----
    Drop-ins in ``/etc`` must be able to shadow same-named vendor drop-ins in
    ``/usr/lib`` while fragments from all directories still apply together.

    Parameters
    ----------
    suffix:
        Required filename suffix (``".conf"``); ``None`` accepts every file.
    directories:
        Directories in priority order, highest first. Missing directories are
        skipped.
    filter_masked:
        When ``True``, an empty fragment or one linked to ``/dev/null`` masks
        its basename: it is omitted and same-named fragments in later
        directories are ignored.

    Returns
    -------
    list[str]
        Full paths sorted by basename.

    Raises
    ------
    OSError
        A directory exists but cannot be read (permissions, not a directory).

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from pathlib import Path
    >>> tmp = TemporaryDirectory()
    >>> high, low = Path(tmp.name, "etc"), Path(tmp.name, "lib")
    >>> for base in (high, low):
    ...     base.mkdir()
    ...     _ = (base / "50-a.conf").write_text(base.name)
    >>> _ = (low / "10-b.conf").write_text("b")
    >>> [str(Path(p).relative_to(tmp.name)) for p in conf_files_list(".conf", [str(high), str(low)])]
    ['lib/10-b.conf', 'etc/50-a.conf']
    >>> tmp.cleanup()
    """

    found: dict[str, str] = {}
    masked: set[str] = set()
    for directory in directories:
        try:
            with os.scandir(directory) as iterator:
                entries = list(iterator)
        except FileNotFoundError:
            continue
        for entry in entries:
            name = entry.name
            if suffix and not name.endswith(suffix):
                continue
            if hidden_or_backup_file(name):
                continue
            if name in found or name in masked:
                log_debug("conf_file_skipped", path=entry.path, reason="shadowed")
                continue
            if not (entry.is_symlink() or entry.is_file(follow_symlinks=False)):
                continue
            if filter_masked:
                try:
                    if _null_or_empty(entry.path):
                        masked.add(name)
                        log_debug("conf_file_skipped", path=entry.path, reason="masked")
                        continue
                except OSError as exc:
                    log_debug("conf_file_skipped", path=entry.path, reason="unreadable", error=str(exc))
                    continue
            found[name] = os.path.join(directory, name)
    return [found[name] for name in sorted(found)]


class DefaultConfigFileLister:
    """List fragments with :func:`conf_files_list`."""

    def __init__(self, *, filter_masked: bool = False) -> None:
        self.filter_masked = filter_masked

    def list(self, suffix: str | None, directories: Sequence[str]) -> list[str]:
        return conf_files_list(suffix, directories, filter_masked=self.filter_masked)


def _null_or_empty(path: str) -> bool:
    """Return ``True`` when *path* is an empty regular file or ``/dev/null``."""

    info = os.stat(path)
    if stat.S_ISCHR(info.st_mode):
        return info.st_rdev == os.stat(os.devnull).st_rdev
    return stat.S_ISREG(info.st_mode) and info.st_size == 0
