"""Adapter contract tests for the default ports implementation.

Verify the default adapters keep satisfying the application-layer ports in
``src/lib_unit_dropin/application/ports.py`` and that the composition root
wires exactly those adapters.
"""

from __future__ import annotations

import pytest

from lib_unit_dropin import core
from lib_unit_dropin.adapters.conf_files.default import DefaultConfigFileLister
from lib_unit_dropin.adapters.fs.atomic import AtomicFileWriter, DirectoryCreator
from lib_unit_dropin.adapters.fs.chase import SymlinkChaser
from lib_unit_dropin.adapters.lookup_paths.default import DefaultLookupPaths
from lib_unit_dropin.application import ports
from lib_unit_dropin.observability import LoggingDiagnosticSink


@pytest.mark.parametrize(
    ("adapter", "port"),
    [
        (SymlinkChaser(), ports.PathCanonicalizer),
        (AtomicFileWriter(), ports.AtomicFileWriter),
        (DirectoryCreator(), ports.DirectoryCreator),
        (DefaultConfigFileLister(), ports.ConfigFileLister),
        (DefaultLookupPaths(), ports.LookupPaths),
        (LoggingDiagnosticSink(), ports.DiagnosticSink),
        (frozenset(), ports.UnitPathCache),
    ],
)
def test_adapter_satisfies_port(adapter: object, port: type) -> None:
    assert isinstance(adapter, port)


def test_composition_root_wiring() -> None:
    assert isinstance(core._RESOLVER.canonicalizer, SymlinkChaser)
    assert isinstance(core._RESOLVER.lister, DefaultConfigFileLister)
    assert core._RESOLVER.lister.filter_masked is False
    assert isinstance(core._WRITER.writer, AtomicFileWriter)
    assert isinstance(core._WRITER.directories, DirectoryCreator)
    assert core._RESOLVER.sink is core._WRITER.sink
