"""
CLI integration tests for stylectl.

Runs the click command end to end against the fixture sources in
tests/data/cli.
"""

import json

import pytest

from stylectl import __version__
from stylectl.cli import cli
from stylectl.core.exceptions import ExitCode
from stylectl.core.presets import list_presets

pytestmark = pytest.mark.integration


@pytest.fixture
def jquery_args(cli_data):
    return ["--preset", "jquery", "--config", str(cli_data / "cli.json")]


class TestBasics:

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "--reporter" in result.output
        assert "checkstyle" in result.output
        for name in list_presets():
            assert name in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestChecking:
    """Exit status and rendered output."""

    def test_clean_file(self, runner, cli_data, jquery_args):
        result = runner.invoke(cli, [*jquery_args, str(cli_data / "success.py")])
        assert result.exit_code == ExitCode.SUCCESS
        assert "No code style errors found." in result.output

    def test_violations(self, runner, cli_data, jquery_args):
        result = runner.invoke(cli, [*jquery_args, str(cli_data / "error.py")])
        assert result.exit_code == ExitCode.STYLE_ERRORS
        assert "Illegal keyword: global at " in result.output
        assert "Line must be at most 40 characters" in result.output
        assert "2 code style errors found." in result.output
        # redirected output defaults to the plain text reporter
        assert "\x1b[" not in result.output

    def test_verbose_inline(self, runner, cli_data, jquery_args):
        result = runner.invoke(
            cli, [*jquery_args, "-v", "-r", "inline", str(cli_data / "error.py")]
        )
        assert result.exit_code == ExitCode.STYLE_ERRORS
        assert "line 4, col 1, disallowKeywords: Illegal keyword: global" in result.output

    def test_forced_colors(self, runner, cli_data, jquery_args):
        result = runner.invoke(cli, [*jquery_args, "--colors", str(cli_data / "error.py")])
        assert result.exit_code == ExitCode.STYLE_ERRORS
        assert "\x1b[" in result.output

    def test_json_reporter(self, runner, cli_data, jquery_args):
        result = runner.invoke(
            cli, [*jquery_args, "-r", "json", str(cli_data / "error.py")]
        )
        data = json.loads(result.output)
        assert data["error_count"] == 2
        assert [v["rule"] for v in data["files"][0]["violations"]] == [
            "disallowKeywords",
            "maximumLineLength",
        ]

    def test_max_errors(self, runner, cli_data, jquery_args):
        result = runner.invoke(cli, [*jquery_args, "-m", "1", str(cli_data / "error.py")])
        assert result.exit_code == ExitCode.STYLE_ERRORS
        assert "1 code style error found." in result.output
        assert "Increase `maxErrors`" in result.output

    def test_directory_argument(self, runner, isolated_cwd):
        src = isolated_cwd / "src"
        src.mkdir()
        (src / "a.py").write_text("x = 1;\n")
        (src / "b.py").write_text("y = 2\n")
        (isolated_cwd / ".stylectl.yaml").write_text("disallowSemicolons: true\n")
        result = runner.invoke(cli, ["-r", "unix", "src"])
        assert result.exit_code == ExitCode.STYLE_ERRORS
        assert "src/a.py:1:5: Illegal semicolon" in result.output
        assert "src/b.py" not in result.output

    def test_syntax_error_does_not_stop_others(self, runner, cli_data, jquery_args):
        result = runner.invoke(cli, [
            *jquery_args, "-r", "inline",
            str(cli_data / "syntax_error.py"), str(cli_data / "error.py"),
        ])
        assert result.exit_code == ExitCode.STYLE_ERRORS
        assert "Syntax error" in result.output
        assert "Illegal keyword: global" in result.output


class TestErrors:
    """Resolution failures exit with their own codes and one message."""

    def test_no_input_files(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == ExitCode.NO_INPUT_FILES
        assert "No input files specified. Try option --help for usage information." in result.output

    def test_missing_config(self, runner):
        result = runner.invoke(cli, ["-c", "nope.yaml", "a.py"])
        assert result.exit_code == ExitCode.CONFIG_NOT_FOUND
        assert "Configuration source nope.yaml was not found." in result.output

    def test_corrupted_config(self, runner, cli_data):
        result = runner.invoke(cli, ["-c", str(cli_data / "corrupted.json"), "a.py"])
        assert result.exit_code == ExitCode.CONFIG_CORRUPTED
        assert "Config source is corrupted -" in result.output

    def test_missing_preset(self, runner):
        result = runner.invoke(cli, ["-p", "nope", "a.py"])
        assert result.exit_code == ExitCode.PRESET_NOT_FOUND
        assert 'Preset "nope" does not exist' in result.output

    def test_missing_reporter(self, runner, cli_data):
        result = runner.invoke(cli, ["-r", "does not exist", str(cli_data / "error.py")])
        assert result.exit_code == ExitCode.REPORTER_NOT_FOUND
        assert 'Reporter "does not exist" does not exist.' in result.output

    def test_json_errors(self, runner):
        result = runner.invoke(cli, ["--json-errors", "-r", "nope", "a.py"])
        assert result.exit_code == ExitCode.REPORTER_NOT_FOUND
        data = json.loads(result.output)
        assert data["error"]["type"] == "ReporterNotFound"
        assert data["error"]["reporter"] == "nope"
