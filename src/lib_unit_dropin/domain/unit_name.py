"""Unit naming rules.

Purpose
-------
Answer the two questions drop-in discovery asks about a unit name: *is this an
instance?* and *what is its template?* Full validation lives here too so the
CLI and tests can reject malformed names early.

Contents
--------
* :data:`UNIT_TYPES` – recognised unit type suffixes.
* :class:`UnitNameFlags` – which name shapes a validity check accepts.
* :func:`unit_name_is_valid` – shape-aware validation.
* :func:`is_instance` / :func:`is_template` – shape predicates.
* :func:`template_of` / :func:`instance_of` / :func:`unit_type_of` – accessors.

A unit name is ``<prefix>.<type>``. Instance names embed a parameter,
``<prefix>@<instance>.<type>``; the matching template leaves it empty,
``<prefix>@.<type>``.
"""

from __future__ import annotations

import string
from enum import IntFlag
from typing import Final

from .errors import InvalidUnitName

UNIT_NAME_MAX: Final[int] = 256

UNIT_TYPES: Final[frozenset[str]] = frozenset(
    {
        "service",
        "socket",
        "target",
        "device",
        "mount",
        "automount",
        "swap",
        "timer",
        "path",
        "slice",
        "scope",
    }
)

_VALID_CHARS: Final[frozenset[str]] = frozenset(string.ascii_letters + string.digits + ":-_.\\@")


class UnitNameFlags(IntFlag):
    """Accepted name shapes for :func:`unit_name_is_valid`."""

    PLAIN = 1
    INSTANCE = 2
    TEMPLATE = 4
    ANY = PLAIN | INSTANCE | TEMPLATE


def unit_name_is_valid(name: str, flags: UnitNameFlags = UnitNameFlags.ANY) -> bool:
    """Return ``True`` when *name* is a well-formed unit name of an accepted shape.

    Examples
    --------
    >>> unit_name_is_valid("foo@bar.service", UnitNameFlags.INSTANCE)
    True
    >>> unit_name_is_valid("foo@.service", UnitNameFlags.INSTANCE)
    False
    >>> unit_name_is_valid("foo.nonsense")
    False
    """

    if not flags or not name or len(name) >= UNIT_NAME_MAX:
        return False
    dot = name.rfind(".")
    if dot <= 0:
        return False
    if name[dot + 1 :] not in UNIT_TYPES:
        return False
    prefix = name[:dot]
    if any(char not in _VALID_CHARS for char in prefix):
        return False
    at = prefix.find("@")
    if at == 0:
        return False
    if at < 0:
        return bool(flags & UnitNameFlags.PLAIN)
    if flags & UnitNameFlags.INSTANCE and dot > at + 1:
        return True
    if flags & UnitNameFlags.TEMPLATE and dot == at + 1:
        return True
    return False


def is_instance(name: str) -> bool:
    """Return ``True`` for ``prefix@instance.type`` names."""

    return unit_name_is_valid(name, UnitNameFlags.INSTANCE)


def is_template(name: str) -> bool:
    """Return ``True`` for ``prefix@.type`` names."""

    return unit_name_is_valid(name, UnitNameFlags.TEMPLATE)


def template_of(name: str) -> str:
    """Return the template form of an instance (or template) unit name.

    Raises
    ------
    InvalidUnitName
        When *name* is neither an instance nor a template.

    Examples
    --------
    >>> template_of("getty@tty1.service")
    'getty@.service'
    """

    if not unit_name_is_valid(name, UnitNameFlags.INSTANCE | UnitNameFlags.TEMPLATE):
        raise InvalidUnitName(f"Not an instance or template unit name: {name!r}")
    at = name.index("@")
    dot = name.rindex(".")
    return name[: at + 1] + name[dot:]


def instance_of(name: str) -> str | None:
    """Return the instance part of *name*, ``""`` for templates, ``None`` for plain units."""

    if not unit_name_is_valid(name):
        raise InvalidUnitName(f"Invalid unit name: {name!r}")
    at = name.find("@")
    if at < 0:
        return None
    return name[at + 1 : name.rindex(".")]


def unit_type_of(name: str) -> str:
    """Return the type suffix of *name* (``"service"``, ``"socket"``, ...)."""

    if not unit_name_is_valid(name):
        raise InvalidUnitName(f"Invalid unit name: {name!r}")
    return name[name.rindex(".") + 1 :]
