"""Symlink-safe path canonicalization.

Purpose
-------
Implement the :class:`lib_unit_dropin.application.ports.PathCanonicalizer`
port. Unlike :func:`os.path.realpath`, resolution can be confined to a root
directory (an image or chroot being inspected): absolute link targets are
re-rooted below it and ``..`` never climbs above it. Missing components are
reported instead of being carried through.

Contents
--------
* :func:`chase_symlinks` – component-wise resolution.
* :class:`SymlinkChaser` – port adapter delegating to :func:`chase_symlinks`.
"""

from __future__ import annotations

import errno
import os
import stat
from collections import deque
from typing import Final

#: Maximum number of symlinks followed before giving up with ``ELOOP``.
MAX_FOLLOW: Final[int] = 32


def chase_symlinks(path: str | os.PathLike[str], root: str | os.PathLike[str] | None = None) -> str:
    """Return the canonical absolute form of *path*, resolving every symlink.

    Parameters
    ----------
    path:
        Path to resolve. Relative paths are taken relative to the working
        directory. When *root* is given, *path* must already lie below it.
    root:
        Optional directory acting as ``/`` for symlink resolution. ``None``,
        ``""`` and ``"/"`` mean the real root.

    Returns
    -------
    str
        Canonical path, including the *root* prefix when one is used.

    Raises
    ------
    FileNotFoundError
        A path component does not exist.
    OSError
        ``ENAMETOOLONG``, ``ENOTDIR``, ``ELOOP`` (more than
        :data:`MAX_FOLLOW` links) or any other ``lstat``/``readlink`` failure.
    ValueError
        *path* is not located below *root*.

    Examples
    --------
    >>> chase_symlinks("/")
    '/'
    """

    root_dir = _normalize_root(root)
    buffer = os.fspath(path)
    if not os.path.isabs(buffer):
        buffer = os.path.join(os.getcwd(), buffer)

    components = _split(buffer)
    if root_dir:
        root_components = _split(root_dir)
        if components[: len(root_components)] != root_components:
            raise ValueError(f"Path {buffer!r} is not located below root {root_dir!r}")
        components = components[len(root_components) :]

    top = root_dir or ""
    done = top
    todo = deque(components)
    follows = 0
    while todo:
        part = todo.popleft()
        if part == ".":
            continue
        if part == "..":
            if done != top:
                done = os.path.dirname(done)
                if done == "/":
                    done = ""
            continue

        child = f"{done}/{part}"
        info = os.lstat(child)
        if not stat.S_ISLNK(info.st_mode):
            done = child
            continue

        follows += 1
        if follows > MAX_FOLLOW:
            raise OSError(errno.ELOOP, os.strerror(errno.ELOOP), os.fspath(path))
        target = os.readlink(child)
        if target.startswith("/"):
            done = top
        todo.extendleft(reversed(_split(target)))

    return done or "/"


class SymlinkChaser:
    """Canonicalize paths with :func:`chase_symlinks`."""

    def resolve(self, path: str, root: str | None = None) -> str:
        return chase_symlinks(path, root)


def _normalize_root(root: str | os.PathLike[str] | None) -> str | None:
    if root is None:
        return None
    value = os.fspath(root)
    if not value:
        return None
    absolute = os.path.normpath(os.path.abspath(value))
    if absolute == "/":
        return None
    return absolute


def _split(path: str) -> list[str]:
    return [part for part in path.split("/") if part]
