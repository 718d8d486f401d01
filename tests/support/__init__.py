"""Shared sandbox helpers for drop-in tests.

``create_unit_sandbox`` lays out a miniature unit search path below a
temporary directory so tests can declare which override directories and
fragments exist without repeating filesystem boilerplate.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

#: Layer names mapped to their location relative to the sandbox root, highest priority first.
LAYERS: dict[str, str] = {
    "etc": "etc/systemd/system",
    "run": "run/systemd/system",
    "lib": "usr/lib/systemd/system",
}


@dataclass
class UnitSandbox:
    """Temporary unit search path with helpers to populate it."""

    root: Path
    roots: dict[str, Path] = field(default_factory=dict)

    @property
    def lookup_paths(self) -> list[str]:
        """Search directories in priority order as plain strings."""

        return [str(self.roots[layer]) for layer in LAYERS]

    @property
    def env(self) -> dict[str, str]:
        """Environment pointing ``SYSTEMD_UNIT_PATH`` at the sandbox."""

        return {"SYSTEMD_UNIT_PATH": os.pathsep.join(self.lookup_paths)}

    def dropin_dir(self, layer: str, unit: str) -> Path:
        """Create and return ``<layer>/<unit>.d``."""

        directory = self.roots[layer] / f"{unit}.d"
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def write(self, layer: str, unit: str, fragment: str, content: str = "[Service]\n") -> Path:
        """Write *fragment* into the override directory of *unit* in *layer*."""

        path = self.dropin_dir(layer, unit) / fragment
        path.write_text(content, encoding="utf-8")
        return path


def create_unit_sandbox(tmp_path: Path) -> UnitSandbox:
    """Create the search directories below *tmp_path* and return the sandbox."""

    sandbox = UnitSandbox(root=tmp_path)
    for layer, relative in LAYERS.items():
        directory = tmp_path / relative
        directory.mkdir(parents=True, exist_ok=True)
        sandbox.roots[layer] = directory
    return sandbox
