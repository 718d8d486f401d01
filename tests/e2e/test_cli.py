"""End-to-end CLI coverage for the commands exposed by lib_unit_dropin.

Each test drives the Click group through ``CliRunner`` against a sandboxed
unit search path, so the JSON contracts printed by ``find`` and ``path`` stay
stable.
"""

from __future__ import annotations

import json
from pathlib import Path

import lib_cli_exit_tools
from click.testing import CliRunner

from lib_unit_dropin import cli
from tests.support import UnitSandbox, create_unit_sandbox


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def _sandbox(tmp_path: Path) -> UnitSandbox:
    return create_unit_sandbox(tmp_path.resolve())


def test_cli_find_lists_fragments(tmp_path: Path) -> None:
    sandbox = _sandbox(tmp_path)
    fragment = sandbox.write("lib", "getty@.service", "10-autologin.conf")

    result = _runner().invoke(cli.cli, ["find", "getty@tty1.service"], env=sandbox.env)

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"found": True, "files": [str(fragment)]}


def test_cli_find_with_explicit_lookup_paths_and_cache(tmp_path: Path) -> None:
    sandbox = _sandbox(tmp_path)
    sandbox.write("etc", "demo.service", "10-a.conf")
    args = ["find", "--cache", "--indent", "2", "--lookup-path", str(sandbox.roots["etc"]), "demo.service"]

    result = _runner().invoke(cli.cli, args)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["found"] is True
    assert [Path(path).name for path in payload["files"]] == ["10-a.conf"]


def test_cli_find_nothing(tmp_path: Path) -> None:
    sandbox = _sandbox(tmp_path)
    result = _runner().invoke(cli.cli, ["find", "demo.service"], env=sandbox.env)
    assert result.exit_code == 0
    assert json.loads(result.output) == {"found": False, "files": []}


def test_cli_find_rejects_invalid_unit_names(tmp_path: Path) -> None:
    sandbox = _sandbox(tmp_path)
    result = _runner().invoke(cli.cli, ["find", "not-a-unit"], env=sandbox.env)
    assert result.exit_code != 0
    assert "Invalid unit name" in result.output


def test_cli_lookup_paths_honours_unit_path(tmp_path: Path) -> None:
    sandbox = _sandbox(tmp_path)
    result = _runner().invoke(cli.cli, ["lookup-paths"], env=sandbox.env)
    assert result.exit_code == 0
    assert result.output.splitlines() == sandbox.lookup_paths


def test_cli_path_prints_both_paths(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["path", str(tmp_path), "demo.service", "--level", "10", "--name", "a.b"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload == {
        "directory": str(tmp_path / "demo.service.d"),
        "file": str(tmp_path / "demo.service.d" / "10-a\\x2eb.conf"),
    }


def test_cli_path_rejects_negative_level(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["path", str(tmp_path), "demo.service", "--level", "-1", "--name", "a"])
    assert result.exit_code != 0


def test_cli_write_with_data_and_source(tmp_path: Path) -> None:
    runner = _runner()
    result = runner.invoke(cli.cli, ["write", str(tmp_path), "demo.service", "--name", "env", "--data", "A=1"])
    assert result.exit_code == 0, result.output
    written = Path(result.output.strip())
    assert written == tmp_path / "demo.service.d" / "50-env.conf"
    assert written.read_text(encoding="utf-8") == "A=1"

    source = tmp_path / "source.conf"
    source.write_text("[Service]\nNice=5\n", encoding="utf-8")
    result = runner.invoke(
        cli.cli, ["write", str(tmp_path), "demo.service", "--level", "0", "--name", "nice", "--source", str(source)]
    )
    assert result.exit_code == 0, result.output
    assert (tmp_path / "demo.service.d" / "0-nice.conf").read_text(encoding="utf-8") == "[Service]\nNice=5\n"


def test_cli_write_requires_exactly_one_content_option(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["write", str(tmp_path), "demo.service", "--name", "env"])
    assert result.exit_code != 0
    assert "exactly one of --data or --source" in result.output
    assert not (tmp_path / "demo.service.d").exists()


def test_cli_write_rejects_invalid_fragment_name(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["write", str(tmp_path), "demo.service", "--name", "", "--data", "x"])
    assert result.exit_code != 0
    assert not (tmp_path / "demo.service.d").exists()


def test_cli_info_runs() -> None:
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "Info for" in result.output or "metadata unavailable" in result.output


def test_main_returns_exit_code_and_restores_traceback(tmp_path: Path) -> None:
    previous = lib_cli_exit_tools.config.traceback
    code = cli.main(["--traceback", "path", str(tmp_path), "demo.service", "--name", "x"])
    assert code == 0
    assert lib_cli_exit_tools.config.traceback == previous


def test_main_reports_usage_errors() -> None:
    assert cli.main(["find"]) != 0
