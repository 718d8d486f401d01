from __future__ import annotations

from typing import Any

import pytest

from lib_unit_dropin.application.write import DROPIN_DIR_MODE, DropInWriter
from lib_unit_dropin.domain.errors import InvalidName


class MemoryFilesystem:
    """Record directory creation and file writes instead of touching disk."""

    def __init__(self, *, fail_mkdir: OSError | None = None) -> None:
        self.directories: list[tuple[str, int]] = []
        self.files: dict[str, str] = {}
        self.fail_mkdir = fail_mkdir

    def ensure(self, path: str, mode: int = 0o755) -> None:
        if self.fail_mkdir is not None:
            raise self.fail_mkdir
        self.directories.append((path, mode))

    def write(self, path: str, content: str) -> None:
        self.files[path] = content


class NullSink:
    def debug(self, message: str, **fields: Any) -> None:
        pass

    warning = debug
    error = debug


def make_writer(filesystem: MemoryFilesystem) -> DropInWriter:
    return DropInWriter(directories=filesystem, writer=filesystem, sink=NullSink())


def test_write_drop_in_creates_directory_then_file() -> None:
    filesystem = MemoryFilesystem()
    path = make_writer(filesystem).write_drop_in("/run/systemd/system", "a.service", 50, "Nice", "[Service]\nNice=5\n")
    assert path == "/run/systemd/system/a.service.d/50-Nice.conf"
    assert filesystem.directories == [("/run/systemd/system/a.service.d", DROPIN_DIR_MODE)]
    assert filesystem.files == {path: "[Service]\nNice=5\n"}


def test_write_drop_in_format_renders_printf_template() -> None:
    filesystem = MemoryFilesystem()
    path = make_writer(filesystem).write_drop_in_format("/run", "a.service", 10, "key", "%s=%d", "Key", 5)
    assert filesystem.files[path] == "Key=5"


def test_invalid_name_writes_nothing() -> None:
    filesystem = MemoryFilesystem()
    with pytest.raises(InvalidName):
        make_writer(filesystem).write_drop_in("/run", "a.service", 10, "", "data")
    assert filesystem.directories == []
    assert filesystem.files == {}


def test_directory_failure_propagates() -> None:
    filesystem = MemoryFilesystem(fail_mkdir=PermissionError(13, "Permission denied"))
    with pytest.raises(PermissionError):
        make_writer(filesystem).write_drop_in("/run", "a.service", 10, "x", "data")
    assert filesystem.files == {}
