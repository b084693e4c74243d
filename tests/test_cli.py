from __future__ import annotations

import os
import runpy
import logging
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from taginfo.__version__ import __version__
from taginfo.cli import _configure_logging, cli, main
from taginfo.exceptions import TagInfoError
from taginfo.utils.console import reconfigure_console


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run each test in an empty directory and restore global state after."""
    monkeypatch.chdir(tmp_path)
    for var in ("TAGINFO_CONFIG", "NO_COLOR", "TAGINFO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    yield
    root = logging.getLogger("taginfo")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    reconfigure_console()


@pytest.mark.unit
class TestCliGroup:
    """Tests for the top-level click group."""

    def test_version(self) -> None:
        """Test --version prints the program name and version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"taginfo {__version__}"

    def test_help_lists_commands(self) -> None:
        """Test -h shows both subcommands."""
        result = CliRunner().invoke(cli, ["-h"])

        assert result.exit_code == 0
        assert "info" in result.output
        assert "latest" in result.output

    def test_no_color_sets_environment(self) -> None:
        """Test --no-color exports NO_COLOR for consoles and log output."""
        result = CliRunner().invoke(cli, ["--no-color", "latest", "--help"])

        assert result.exit_code == 0
        assert os.environ.get("NO_COLOR") == "1"

    def test_color_clears_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test --color removes an inherited NO_COLOR."""
        monkeypatch.setenv("NO_COLOR", "1")

        result = CliRunner().invoke(cli, ["--color", "latest", "--help"])

        assert result.exit_code == 0
        assert "NO_COLOR" not in os.environ

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """Test a broken configuration file exits with code 1."""
        config = tmp_path / "broken.toml"
        config.write_text("[taginfo]\ntimeout = 0\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["--config", str(config), "latest", "--help"])

        assert result.exit_code == 1
        assert "timeout" in result.stderr

    def test_config_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test TAGINFO_CONFIG selects the configuration file."""
        config = tmp_path / "env.toml"
        config.write_text("[taginfo]\nunknown = 1\n", encoding="utf-8")
        monkeypatch.setenv("TAGINFO_CONFIG", str(config))

        result = CliRunner().invoke(cli, ["latest", "--help"])

        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.stderr


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for _configure_logging."""

    @pytest.mark.parametrize(
        "verbose, level, detailed",
        [
            (0, logging.WARNING, False),
            (1, logging.INFO, False),
            (2, logging.DEBUG, True),
            (3, logging.DEBUG, True),
        ],
        ids=["quiet", "info", "debug", "debug-extra"],
    )
    def test_levels(self, verbose: int, level: int, detailed: bool) -> None:
        """Test each -v raises verbosity one step."""
        with patch("taginfo.cli.setup_logging") as mock_setup:
            _configure_logging(verbose)

        mock_setup.assert_called_once_with(level=level, verbose=detailed)


@pytest.mark.unit
class TestMain:
    """Tests for main() exit codes."""

    def test_success(self) -> None:
        """Test --version exits with 0."""
        with patch("sys.argv", ["taginfo", "--version"]):
            assert main() == 0

    def test_usage_error(self, capsys: pytest.CaptureFixture) -> None:
        """Test Click usage errors exit with 2."""
        with patch("sys.argv", ["taginfo", "--bogus"]):
            assert main() == 2

        assert "--bogus" in capsys.readouterr().err

    def test_config_error(self, tmp_path: Path) -> None:
        """Test configuration errors raised in the group exit with 1."""
        config = tmp_path / "bad.toml"
        config.write_text("[taginfo\n", encoding="utf-8")

        with patch("sys.argv", ["taginfo", "-c", str(config), "latest", "--help"]):
            assert main() == 1

    @pytest.mark.parametrize(
        "error, code",
        [
            (TagInfoError("boom"), 1),
            (KeyboardInterrupt(), 130),
            (click.exceptions.Abort(), 130),
            (RuntimeError("unexpected"), 1),
            (SystemExit(4), 4),
            (SystemExit("message"), 1),
        ],
        ids=["taginfo-error", "interrupt", "abort", "unexpected", "exit-int", "exit-str"],
    )
    def test_exception_mapping(self, error: BaseException, code: int) -> None:
        """Test exceptions escaping the group map to exit codes."""
        with patch("taginfo.cli.cli", side_effect=error):
            assert main() == code

    def test_taginfo_error_is_printed(self) -> None:
        """Test application errors are shown to the user."""
        with patch("taginfo.cli.cli", side_effect=TagInfoError("boom")), patch(
            "taginfo.cli.print_error"
        ) as mock_error:
            main()

        mock_error.assert_called_once_with("boom")


@pytest.mark.unit
class TestModuleEntryPoint:
    """Tests for ``python -m taginfo``."""

    def test_exits_with_main_result(self) -> None:
        """Test the module exits with the code main() returns."""
        with patch("taginfo.cli.main", return_value=3):
            with pytest.raises(SystemExit) as exc_info:
                runpy.run_module("taginfo", run_name="__main__")

        assert exc_info.value.code == 3
