"""Drop-in fragment naming.

Purpose
-------
Compute where a named override fragment for a unit lives, without touching the
filesystem. The layout is fixed::

    <dir>/<unit>.d/<level>-<escaped name>.conf

Contents
--------
* :class:`DropInPaths` – the ``(directory, file)`` pair for one fragment.
* :func:`xescape` – reversible ``\\xHH`` escaping of unsafe characters.
* :func:`filename_is_valid` – single path component check.
* :func:`drop_in_file` – the path builder used by the writer and the CLI.
"""

from __future__ import annotations

import os
from typing import Final, NamedTuple

from .errors import InvalidLevel, InvalidName, InvalidUnitName

#: Longest filename component accepted by common POSIX filesystems.
NAME_MAX: Final[int] = 255

#: Characters escaped in fragment names on top of control and non-ASCII bytes.
FRAGMENT_UNSAFE_CHARS: Final[str] = "/."


class DropInPaths(NamedTuple):
    """Override directory and fragment file computed for one drop-in."""

    directory: str
    file: str


def xescape(text: str, bad: str) -> str:
    """Escape *text* so the result contains only printable ASCII outside *bad*.

    Every UTF-8 byte below ``0x20``, at or above ``0x7f``, a backslash, or a
    character listed in *bad* is replaced by ``\\xHH`` (lower-case hex). The
    backslash itself is escaped, so the mapping is injective.

    Examples
    --------
    >>> xescape("a/b.c", "/.")
    'a\\\\x2fb\\\\x2ec'
    >>> xescape("plain-name", "/.")
    'plain-name'
    """

    bad_bytes = set(bad.encode("utf-8"))
    parts: list[str] = []
    for byte in text.encode("utf-8"):
        if byte < 0x20 or byte >= 0x7F or byte == 0x5C or byte in bad_bytes:
            parts.append(f"\\x{byte:02x}")
        else:
            parts.append(chr(byte))
    return "".join(parts)


def filename_is_valid(name: str) -> bool:
    """Return ``True`` when *name* can be used as a single path component.

    >>> filename_is_valid("10-limits.conf"), filename_is_valid(".."), filename_is_valid("a/b")
    (True, False, False)
    """

    if not name or name in {".", ".."}:
        return False
    if "/" in name or "\0" in name:
        return False
    return len(name.encode("utf-8")) <= NAME_MAX


def drop_in_file(directory: str | os.PathLike[str], unit: str, level: int, name: str) -> DropInPaths:
    """Return the override directory and fragment path for ``(unit, level, name)``.

    Why
    ----
    Generated overrides must land at a predictable location so later writes
    with the same key replace earlier ones, and so that *level* orders
    fragments by name.

    Parameters
    ----------
    directory:
        Base directory, typically one of the unit lookup paths.
    unit:
        Unit name the override applies to.
    level:
        Non-negative priority rendered as an unpadded decimal prefix.
    name:
        Logical fragment key; escaped with :func:`xescape` before use.

    Returns
    -------
    DropInPaths
        ``directory`` is ``<dir>/<unit>.d``; ``file`` is
        ``<directory>/<level>-<escaped>.conf``.

    Raises
    ------
    InvalidName
        When the escaped *name* is not a valid filename component.
    InvalidLevel
        When *level* is negative.
    InvalidUnitName
        When *unit* is empty or contains a path separator.

    Examples
    --------
    >>> drop_in_file("/etc/systemd/system", "foo.service", 50, "limits")
    DropInPaths(directory='/etc/systemd/system/foo.service.d', file='/etc/systemd/system/foo.service.d/50-limits.conf')
    """

    if level < 0:
        raise InvalidLevel(f"Drop-in priority level must be non-negative, got {level}")
    if not unit or not filename_is_valid(f"{unit}.d"):
        raise InvalidUnitName(f"Invalid unit name for a drop-in directory: {unit!r}")

    escaped = xescape(name, FRAGMENT_UNSAFE_CHARS)
    if not filename_is_valid(escaped):
        raise InvalidName(f"Invalid drop-in fragment name: {name!r}")

    override_dir = os.path.join(os.fspath(directory), f"{unit}.d")
    return DropInPaths(override_dir, os.path.join(override_dir, f"{level}-{escaped}.conf"))
