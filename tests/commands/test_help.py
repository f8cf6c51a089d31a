"""Tests for help text, --examples, and --version."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from boardctl import __version__
from boardctl.cli import cli


@pytest.mark.usefixtures("_isolated_root")
class TestHelp:
    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "board" in result.output
        assert "records" in result.output
        assert "card" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize(
        "args",
        [
            ["board", "--examples"],
            ["board", "move", "--examples"],
            ["records", "import", "--examples"],
            ["card", "--examples"],
        ],
    )
    def test_examples(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "Examples for" in result.output
        assert "boardctl" in result.output

    def test_help_does_not_open_store(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["board", "--help"])
        assert result.exit_code == 0
        assert not (tmp_path / ".boardctl").exists()

    def test_invalid_board_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "boardctl.toml").write_text(
            '[boards.x]\nstage_order = ["a"]\n', encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["board", "show"])
        assert result.exit_code == 1
        assert "Invalid board configuration" in result.stderr
