"""CLI tests for the hooks command line entry."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from cli.main import cli

PLUGIN_SOURCE = textwrap.dedent(
    """
    def double(value):
        return int(value) * 2


    def increment(value):
        return value + 1


    def shout(value, suffix):
        return str(value).upper() + suffix


    def announce(*args):
        print("announce:" + ",".join(args))


    def register(manager):
        manager.add_callback("calc", increment, priority=10)
        manager.add_callback("calc", double, priority=5)
        manager.add_callback("title", shout, accepted_args=2)
        manager.add_callback("boot", announce, accepted_args=3)
    """
)


@pytest.fixture()
def plugin_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / "cli_plugin_demo.py").write_text(PLUGIN_SOURCE, encoding="utf-8")
    (tmp_path / "cli_plugin_broken.py").write_text("VALUE = 1\n", encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "cli_plugin_demo"


def test_cli_help_output() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Hook Engine CLI" in result.output
    assert "dispatch" in result.output
    assert "inspect" in result.output


def test_cli_version_output() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "hooks, version 0.1.0" in result.output


def test_dispatch_filter(plugin_module: str) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["dispatch", plugin_module, "calc", "--filter", "--value", "3"])

    assert result.exit_code == 0
    assert "value=7" in result.output
    assert "invocations=1" in result.output


def test_dispatch_filter_with_extra_args(plugin_module: str) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["dispatch", plugin_module, "title", "!", "--filter", "--value", "hi"],
    )

    assert result.exit_code == 0
    assert "value='HI!'" in result.output


def test_dispatch_action(plugin_module: str) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["dispatch", plugin_module, "boot", "a", "b", "c", "d"])

    assert result.exit_code == 0
    assert "announce:a,b,c" in result.output
    assert "invocations=1" in result.output


def test_inspect_lists_callbacks_in_dispatch_order(plugin_module: str) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["inspect", plugin_module, "calc"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "calc"
    assert lines[1].split() == ["5", "1", "cli_plugin_demo.double"]
    assert lines[2].split() == ["10", "1", "cli_plugin_demo.increment"]


def test_inspect_all_hooks(plugin_module: str) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["inspect", plugin_module])

    assert result.exit_code == 0
    assert "boot" in result.output
    assert "calc" in result.output
    assert "title" in result.output


def test_dispatch_with_config(plugin_module: str) -> None:
    runner = CliRunner()

    with runner.isolated_filesystem():
        Path("hooks.toml").write_text('[logging]\nlevel = "ERROR"\n', encoding="utf-8")

        result = runner.invoke(
            cli,
            ["dispatch", plugin_module, "calc", "--filter", "--value", "1", "-c", "hooks.toml"],
        )

    assert result.exit_code == 0
    assert "value=3" in result.output


def test_invalid_config_reports_error(plugin_module: str) -> None:
    runner = CliRunner()

    with runner.isolated_filesystem():
        Path("bad.toml").write_text("[hooks]\ndefault_accepted_args = 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["dispatch", plugin_module, "calc", "-c", "bad.toml"])

    assert result.exit_code != 0
    assert "CONFIG_ERROR" in result.output


def test_module_without_register(plugin_module: str) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["dispatch", "cli_plugin_broken", "calc"])

    assert result.exit_code != 0
    assert "has no register(manager) function" in result.output


def test_unknown_module() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["inspect", "no_such_plugin_module_xyz"])

    assert result.exit_code != 0
    assert "Cannot import module" in result.output
