"""Tests for the kitstarter command.

Runs the click command end to end against the bundled template, with the
process runner and the prompter replaced by fakes.
"""

import logging

import pytest
from click.testing import CliRunner

from kitstarter import __version__
from kitstarter.cli import init_cmd
from kitstarter.cli.init_cmd import init
from kitstarter.utils.config import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILENAME


@pytest.fixture
def runner():
    """Provide a Click CLI runner for testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The command reconfigures root logging; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the command from an empty directory without KITSTARTER_CONFIG."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fakes(monkeypatch, make_runner, make_prompter):
    """Replace the subprocess runner and questionary prompter used by the command."""
    command_runner = make_runner()
    prompter = make_prompter(project_name="prompted-app")
    monkeypatch.setattr(init_cmd, "SubprocessRunner", lambda: command_runner)
    monkeypatch.setattr(init_cmd, "QuestionaryPrompter", lambda: prompter)
    return command_runner, prompter


class TestInitCommand:
    """Test project creation through the command line."""

    def test_creates_project(self, runner, workdir, fakes):
        command_runner, _ = fakes
        result = runner.invoke(init, ["widget-shop"])

        assert result.exit_code == 0, result.output
        assert "Welcome to kitstarter" in result.output
        assert "Project Widget Shop created successfully!" in result.output
        assert (workdir / "widget-shop" / "package.json").is_file()
        assert command_runner.commands()[:2] == ["pnpm --version", "pnpm install"]
        assert command_runner.commands()[-1] == "git commit -m Initial commit for widget-shop"

    def test_skip_flags(self, runner, workdir, fakes):
        command_runner, _ = fakes
        result = runner.invoke(init, ["widget-shop", "--skip-install", "--skip-git"])

        assert result.exit_code == 0, result.output
        assert command_runner.calls == []

    def test_prompts_for_missing_name(self, runner, workdir, fakes):
        _, prompter = fakes
        result = runner.invoke(init, ["--skip-install", "--skip-git"])

        assert result.exit_code == 0, result.output
        assert prompter.name_prompts == ["my-monorepo-with-sveltekit"]
        assert (workdir / "prompted-app").is_dir()

    def test_invalid_name_exits_with_error(self, runner, workdir, fakes):
        result = runner.invoke(init, ["node"])

        assert result.exit_code == 1
        assert "reserved name" in result.output
        assert list(workdir.iterdir()) == []

    def test_unknown_template(self, runner, workdir, fakes):
        result = runner.invoke(init, ["widget-shop", "-t", "nope"])

        assert result.exit_code == 1
        assert "Template 'nope' not found" in result.output

    def test_force_overwrites_without_prompt(self, runner, workdir, fakes):
        _, prompter = fakes
        (workdir / "widget-shop").mkdir()
        (workdir / "widget-shop" / "stale.txt").write_text("stale")

        result = runner.invoke(init, ["widget-shop", "--force", "--skip-install", "--skip-git"])

        assert result.exit_code == 0, result.output
        assert prompter.overwrite_prompts == []
        assert not (workdir / "widget-shop" / "stale.txt").exists()

    def test_existing_directory_declined(self, runner, workdir, fakes):
        _, prompter = fakes
        (workdir / "widget-shop").mkdir()

        result = runner.invoke(init, ["widget-shop"])

        assert result.exit_code == 1
        assert prompter.overwrite_prompts == ["widget-shop"]
        assert "Project creation cancelled." in result.output

    def test_no_legacy_identifiers(self, runner, workdir, fakes):
        result = runner.invoke(
            init, ["widget-shop", "--no-legacy-identifiers", "--skip-install", "--skip-git"]
        )

        assert result.exit_code == 0, result.output
        assert "@riffcraft/web" in (workdir / "widget-shop" / "package.json").read_text()

    def test_version(self, runner):
        result = runner.invoke(init, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner):
        result = runner.invoke(init, ["--help"])

        assert result.exit_code == 0
        assert "--skip-install" in result.output
        assert "--legacy-identifiers / --no-legacy-identifiers" in result.output

    def test_verbose_enables_debug_logging(self, runner, workdir, fakes):
        runner.invoke(init, ["widget-shop", "-v", "--skip-install", "--skip-git"])
        assert logging.getLogger().level == logging.DEBUG


class TestConfiguration:
    """Test configuration file handling."""

    def test_config_in_working_directory(self, runner, workdir, fakes):
        command_runner, _ = fakes
        (workdir / DEFAULT_CONFIG_FILENAME).write_text(
            "install:\n  enabled: false\ngit:\n  commit_message: 'feat: {project_title}'\n"
        )

        result = runner.invoke(init, ["widget-shop"])

        assert result.exit_code == 0, result.output
        assert command_runner.commands() == [
            "git init",
            "git add .",
            "git commit -m feat: Widget Shop",
        ]

    def test_flags_override_config(self, runner, workdir, fakes):
        command_runner, _ = fakes
        config = workdir / "custom.yml"
        config.write_text("install:\n  enabled: true\n")

        result = runner.invoke(
            init, ["widget-shop", "--config", str(config), "--skip-install", "--skip-git"]
        )

        assert result.exit_code == 0, result.output
        assert command_runner.calls == []

    def test_missing_config_file(self, runner, workdir, fakes):
        result = runner.invoke(init, ["widget-shop", "--config", "missing.yml"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output
        assert not (workdir / "widget-shop").exists()

    def test_invalid_config_value(self, runner, workdir, fakes):
        (workdir / DEFAULT_CONFIG_FILENAME).write_text("git:\n  enabled: maybe\n")

        result = runner.invoke(init, ["widget-shop"])

        assert result.exit_code == 1
        assert "git.enabled" in result.output

    def test_unformattable_commit_message_creates_nothing(self, runner, workdir, fakes):
        command_runner, _ = fakes
        (workdir / DEFAULT_CONFIG_FILENAME).write_text("git:\n  commit_message: 'feat: {name}'\n")

        result = runner.invoke(init, ["widget-shop"])

        assert result.exit_code == 1
        assert "git.commit_message" in result.output
        assert not (workdir / "widget-shop").exists()
        assert command_runner.calls == []
