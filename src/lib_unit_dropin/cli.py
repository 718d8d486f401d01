"""CLI adapter for ``lib_unit_dropin`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose drop-in discovery and writing on the command line so operators can
inspect which overrides apply to a unit, or create one, without writing
Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_lookup_paths` – prints the unit search path of a scope.
* :func:`cli_find` – lists the drop-in fragments applying to units.
* :func:`cli_path` – shows where a fragment would be written.
* :func:`cli_write` – writes a fragment.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: calls the composition root (:mod:`lib_unit_dropin.core`) and
never reaches into adapter internals beyond construction.
``lib_cli_exit_tools`` centralises the exit code strategy.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.lookup_paths.default import SCOPES
from .core import (
    DefaultLookupPaths,
    build_unit_path_cache,
    drop_in_file,
    find_unit_dropin_paths,
    write_drop_in,
)
from .domain.errors import DropInError
from .domain.unit_name import unit_name_is_valid

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DIST_NAME: Final[str] = "lib_unit_dropin"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Unit drop-in override inspector",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DIST_NAME,
    message="lib_unit_dropin version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DIST_NAME)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DIST_NAME} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DIST_NAME)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("lookup-paths", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--scope", type=click.Choice(SCOPES), default="system", show_default=True)
@click.option("--root", default=None, help="Prefix every default search directory with this root")
def cli_lookup_paths(scope: str, root: Optional[str]) -> None:
    """Print the unit search path, one directory per line, highest priority first."""

    for path in DefaultLookupPaths(scope=scope, root=root).search_path():
        click.echo(path)


@cli.command("find", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("units", nargs=-1, required=True)
@click.option("--scope", type=click.Choice(SCOPES), default="system", show_default=True)
@click.option("--root", default=None, help="Resolve symlinks and default paths below this root")
@click.option(
    "--lookup-path",
    "lookup_paths",
    multiple=True,
    help="Search directory (repeatable, highest priority first); replaces the scope defaults",
)
@click.option(
    "--cache/--no-cache",
    default=False,
    help="Snapshot the search directories first and probe only existing entries",
)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_find(
    units: Sequence[str],
    scope: str,
    root: Optional[str],
    lookup_paths: Sequence[str],
    cache: bool,
    indent: Optional[int],
) -> None:
    """List the drop-in fragments applying to UNITS (a unit and its aliases) as JSON.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["find", "--lookup-path", "/nonexistent", "a.service"])
    >>> json.loads(result.output)
    {'found': False, 'files': []}
    """

    for unit in units:
        if not unit_name_is_valid(unit):
            raise click.BadParameter(f"Invalid unit name: {unit}", param_hint="UNITS")
    paths = list(lookup_paths) if lookup_paths else DefaultLookupPaths(scope=scope, root=root).search_path()
    unit_path_cache = build_unit_path_cache(paths) if cache else None
    files, found = find_unit_dropin_paths(list(units), paths, root=root, cache=unit_path_cache)
    click.echo(json.dumps({"found": found, "files": files}, indent=indent))


@cli.command("path", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("directory", type=click.Path(path_type=Path, file_okay=False))
@click.argument("unit")
@click.option("--level", type=click.IntRange(min=0), default=50, show_default=True, help="Priority level")
@click.option("--name", required=True, help="Logical fragment name")
def cli_path(directory: Path, unit: str, level: int, name: str) -> None:
    """Show where the fragment NAME for UNIT below DIRECTORY would be written."""

    paths = _build_paths(directory, unit, level, name)
    click.echo(json.dumps({"directory": paths.directory, "file": paths.file}))


@cli.command("write", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("directory", type=click.Path(path_type=Path, file_okay=False))
@click.argument("unit")
@click.option("--level", type=click.IntRange(min=0), default=50, show_default=True, help="Priority level")
@click.option("--name", required=True, help="Logical fragment name")
@click.option("--data", default=None, help="Fragment content")
@click.option(
    "--source",
    type=click.Path(path_type=Path, exists=True, dir_okay=False, readable=True),
    default=None,
    help="Read fragment content from this file instead of --data",
)
def cli_write(
    directory: Path,
    unit: str,
    level: int,
    name: str,
    data: Optional[str],
    source: Optional[Path],
) -> None:
    """Write a drop-in fragment for UNIT below DIRECTORY and print its path."""

    if (data is None) == (source is None):
        raise click.UsageError("Pass exactly one of --data or --source")
    content = data if data is not None else source.read_text(encoding="utf-8")  # type: ignore[union-attr]
    _build_paths(directory, unit, level, name)
    click.echo(write_drop_in(directory, unit, level, name, content))


def _build_paths(directory: Path, unit: str, level: int, name: str):
    """Compute fragment paths, turning domain errors into usage errors."""

    try:
        return drop_in_file(directory, unit, level, name)
    except DropInError as exc:
        raise click.BadParameter(str(exc)) from exc


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DIST_NAME,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
