from __future__ import annotations

import pytest

from lib_unit_dropin.domain.errors import InvalidUnitName
from lib_unit_dropin.domain.unit_name import (
    UNIT_NAME_MAX,
    UnitNameFlags,
    instance_of,
    is_instance,
    is_template,
    template_of,
    unit_name_is_valid,
    unit_type_of,
)


@pytest.mark.parametrize(
    ("name", "flags", "expected"),
    [
        ("foo.service", UnitNameFlags.PLAIN, True),
        ("foo.service", UnitNameFlags.INSTANCE, False),
        ("foo@bar.service", UnitNameFlags.INSTANCE, True),
        ("foo@bar.service", UnitNameFlags.TEMPLATE, False),
        ("foo@.service", UnitNameFlags.TEMPLATE, True),
        ("foo@.service", UnitNameFlags.PLAIN, False),
        ("dev-disk-by\\x2duuid-1234.device", UnitNameFlags.PLAIN, True),
        ("a.b.c.mount", UnitNameFlags.ANY, True),
        ("@bar.service", UnitNameFlags.ANY, False),
        ("foo", UnitNameFlags.ANY, False),
        (".service", UnitNameFlags.ANY, False),
        ("foo.unknown", UnitNameFlags.ANY, False),
        ("foo bar.service", UnitNameFlags.ANY, False),
        ("foo/bar.service", UnitNameFlags.ANY, False),
        ("", UnitNameFlags.ANY, False),
        ("foo.service", UnitNameFlags(0), False),
    ],
)
def test_unit_name_is_valid(name: str, flags: UnitNameFlags, expected: bool) -> None:
    assert unit_name_is_valid(name, flags) is expected


def test_unit_name_length_limit() -> None:
    suffix = ".service"
    longest = "a" * (UNIT_NAME_MAX - 1 - len(suffix)) + suffix
    assert unit_name_is_valid(longest)
    assert not unit_name_is_valid("a" + longest)


def test_shape_predicates() -> None:
    assert is_instance("getty@tty1.service")
    assert not is_instance("getty@.service")
    assert is_template("getty@.service")
    assert not is_template("getty.service")


def test_template_of_instance_and_template() -> None:
    assert template_of("getty@tty1.service") == "getty@.service"
    assert template_of("foo@bar@baz.socket") == "foo@.socket"
    assert template_of("getty@.service") == "getty@.service"
    assert not is_instance(template_of("systemd-fsck@dev-sda1.service"))


def test_template_of_rejects_plain_names() -> None:
    with pytest.raises(InvalidUnitName):
        template_of("getty.service")


def test_instance_and_type_accessors() -> None:
    assert instance_of("getty@tty1.service") == "tty1"
    assert instance_of("getty@.service") == ""
    assert instance_of("getty.service") is None
    assert unit_type_of("home.mount") == "mount"
    with pytest.raises(InvalidUnitName):
        unit_type_of("home.nonsense")
