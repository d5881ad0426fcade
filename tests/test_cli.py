"""Tests for CLI functionality."""
import pytest
from pathlib import Path
from unittest.mock import patch
from click.testing import CliRunner

from commitguard.cli import main
from commitguard.config import DEFAULT_CONFIG_FILENAME, Config


@pytest.fixture
def cli_runner():
    """Fixture for testing CLI commands."""
    return CliRunner()


def test_valid_message_file(cli_runner, message_file):
    path = message_file("feat(auth): add passwordless sign-in\n")

    result = cli_runner.invoke(main, [str(path)])

    assert result.exit_code == 0
    assert "1 commit message(s) passed validation" in result.output


def test_invalid_message_file(cli_runner, message_file):
    path = message_file("update stuff\n")

    result = cli_runner.invoke(main, [str(path)])

    assert result.exit_code == 1
    assert "[MalformedHeader]" in result.output
    assert '"update stuff"' in result.output


def test_all_violations_reported(cli_runner, message_file):
    path = message_file("chore(Build): " + "a" * 79 + ".\n")

    result = cli_runner.invoke(main, [str(path)])

    assert result.exit_code == 1
    assert "[SubjectTooLong]" in result.output
    assert "[SubjectEndsWithPeriod]" in result.output
    assert "[ScopeNotKebabCase]" in result.output


def test_message_from_stdin(cli_runner):
    result = cli_runner.invoke(main, [], input="fix: handle empty input\n")
    assert result.exit_code == 0

    result = cli_runner.invoke(main, ["-"], input="feat!: drop python 3.8\n")
    assert result.exit_code == 1
    assert "[MissingBreakingDetail]" in result.output


def test_message_from_stdin_with_invalid_utf8(cli_runner):
    result = cli_runner.invoke(main, [], input=b"feat: caf\xff\n")

    assert result.exit_code == 0
    assert result.exception is None


def test_missing_message_file_is_usage_error(cli_runner, tmp_path):
    result = cli_runner.invoke(main, [str(tmp_path / "missing")])
    assert result.exit_code == 2


def test_unknown_option_is_usage_error(cli_runner):
    result = cli_runner.invoke(main, ["--no-such-option"])
    assert result.exit_code == 2


def test_file_and_range_together_is_usage_error(cli_runner, message_file):
    path = message_file("feat: x\n")
    result = cli_runner.invoke(main, [str(path), "--range", "HEAD"])
    assert result.exit_code == 2


def test_strict_fails_on_warnings(cli_runner, message_file):
    path = message_file("feat: " + "y" * 60 + "\n")

    assert cli_runner.invoke(main, [str(path)]).exit_code == 0

    result = cli_runner.invoke(main, ["--strict", str(path)])
    assert result.exit_code == 1
    assert "[SubjectLengthAdvisory]" in result.output


def test_quiet_output(cli_runner, message_file):
    path = message_file("feat: add thing\n")

    result = cli_runner.invoke(main, ["-q", str(path)])

    assert result.exit_code == 0
    assert result.output == ""


def test_cli_overrides(cli_runner, message_file):
    path = message_file("feat: add a subject of thirty characters\n")

    result = cli_runner.invoke(main, ["--max-subject-length", "20", str(path)])
    assert result.exit_code == 1
    assert "[SubjectTooLong]" in result.output

    result = cli_runner.invoke(main, ["--require-scope", str(path)])
    assert result.exit_code == 1
    assert "[ScopeRequired]" in result.output


def test_config_file_is_used(cli_runner, tmp_path, message_file):
    Config(allowed_types=("feat", "deps")).save(tmp_path)
    path = message_file("deps: bump click\n")

    result = cli_runner.invoke(main, ["--path", str(tmp_path), str(path)])

    assert result.exit_code == 0


def test_invalid_config_file_is_usage_error(cli_runner, tmp_path, message_file):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("invalid [ toml")
    path = message_file("feat: x\n")

    result = cli_runner.invoke(main, ["--path", str(tmp_path), str(path)])

    assert result.exit_code == 2
    assert "Error reading config file" in result.output


def test_config_section_not_a_table_is_usage_error(cli_runner, tmp_path, message_file):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("commitguard = 5\n")
    path = message_file("feat: x\n")

    result = cli_runner.invoke(main, ["--path", str(tmp_path), str(path)])

    assert result.exit_code == 2
    assert "must be a table" in result.output


def test_range(cli_runner, temp_git_repo):
    result = cli_runner.invoke(main, ["--path", temp_git_repo, "--range", "HEAD"])

    assert result.exit_code == 0
    assert "3 commit message(s) passed validation" in result.output


def test_range_with_bad_commit(cli_runner, temp_git_repo_with_bad_commit):
    result = cli_runner.invoke(
        main, ["--path", temp_git_repo_with_bad_commit, "--range", "HEAD"]
    )

    assert result.exit_code == 1
    assert "[MalformedHeader]" in result.output
    assert "skipped" in result.output
    assert "1 of 3 commit message(s) failed validation" in result.output


def test_range_unknown_revision(cli_runner, temp_git_repo):
    result = cli_runner.invoke(
        main, ["--path", temp_git_repo, "--range", "nope..HEAD"]
    )
    assert result.exit_code == 2


def test_log_file(cli_runner, tmp_path, message_file):
    path = message_file("update stuff\n")
    log_path = tmp_path / "logs" / "run.log"

    result = cli_runner.invoke(main, ["--log-file", str(log_path), str(path)])

    assert result.exit_code == 1
    assert log_path.exists()
    assert "[MalformedHeader]" in log_path.read_text()


def test_config_list(cli_runner, tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("[commitguard]\nmax_subject_length = 64\n")

    result = cli_runner.invoke(main, ["--path", str(tmp_path), "--config-list"])

    assert result.exit_code == 0
    assert "Current Configuration Settings" in result.output
    lines = {line.split()[0]: line.split()[-1] for line in result.output.splitlines()
             if line.startswith(("max_subject_length", "require_scope"))}
    assert lines == {"max_subject_length": "config", "require_scope": "default"}


def test_config_list_shows_environment_source(cli_runner, tmp_path, monkeypatch):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("[commitguard]\nmax_subject_length = 64\n")
    monkeypatch.setenv("COMMITGUARD_REQUIRE_SCOPE", "1")

    result = cli_runner.invoke(main, ["--path", str(tmp_path), "--config-list"])

    assert result.exit_code == 0
    lines = {line.split()[0]: line.split()[-1] for line in result.output.splitlines()
             if line.startswith(("max_subject_length", "require_scope", "allowed_scopes"))}
    assert lines == {
        "max_subject_length": "config",
        "require_scope": "env",
        "allowed_scopes": "default",
    }


def test_config_dir_flag_creates_config(cli_runner, tmp_path):
    """Test that --config-dir creates a config file if it doesn't exist."""
    with patch('pyperclip.copy') as mock_copy:
        with cli_runner.isolated_filesystem(temp_dir=tmp_path) as td:
            config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
            assert not config_path.exists()

            result = cli_runner.invoke(main, ['--config-dir'])

            assert result.exit_code == 0
            assert config_path.exists()
            assert "Created new config file with default values" in result.output

            config = Config.load(Path(td))
            assert config.max_subject_length == 72
            assert config.require_scope is False

            mock_copy.assert_called_once_with(str(config_path))
            assert "Path copied to clipboard!" in result.output


def test_config_dir_flag_existing_config(cli_runner, tmp_path):
    """Test that --config-dir doesn't overwrite existing config."""
    with patch('pyperclip.copy') as mock_copy:
        Config(max_subject_length=60).save(tmp_path)

        result = cli_runner.invoke(main, ['--config-dir', '--path', str(tmp_path)])

        assert result.exit_code == 0
        assert Config.load(tmp_path).max_subject_length == 60
        assert "Created new config file" not in result.output
        mock_copy.assert_called_once()


def test_version(cli_runner):
    result = cli_runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "commitguard" in result.output


def test_display_version_info_uses_given_console():
    from io import StringIO

    from rich.console import Console

    from commitguard import __version__
    from commitguard.version import display_version_info

    buffer = StringIO()
    display_version_info(Console(file=buffer, width=120))

    assert f"Current version: {__version__}" in buffer.getvalue()
