"""
Pytest configuration and shared test utilities.

This module provides the fakes and fixtures shared by the CLI and utils tests:
a recording command runner, a scripted prompter, and a small template tree.
"""

import io
from pathlib import Path

import pytest
from rich.console import Console

from kitstarter.cli.styles import kitstarter_theme
from kitstarter.cli.templates import TemplateManager
from kitstarter.utils.commands import CommandResult

# ===================================================================
# Fakes
# ===================================================================


class RecordingRunner:
    """Command runner that records every call and returns canned exit codes.

    ``responses`` maps a command prefix (a space-joined argv prefix such as
    ``"pnpm install"``) to an exit code. The longest matching prefix wins;
    unmatched commands succeed. Failing commands report ``stderr`` when given,
    otherwise a generic message naming the executable.
    """

    def __init__(self, responses: dict[str, int] | None = None, stderr: str | None = None):
        self.responses = dict(responses or {})
        self.stderr = stderr
        self.calls: list[tuple[tuple[str, ...], Path | None]] = []

    def run(self, argv, cwd=None):
        self.calls.append((tuple(argv), cwd))

        command = " ".join(argv)
        matches = [prefix for prefix in self.responses if command.startswith(prefix)]
        exit_code = self.responses[max(matches, key=len)] if matches else 0

        if exit_code == 0:
            stderr = ""
        else:
            stderr = self.stderr if self.stderr is not None else f"{argv[0]}: simulated failure"
        return CommandResult(tuple(argv), exit_code, "", stderr)

    def commands(self) -> list[str]:
        """Return the recorded commands as space-joined strings."""
        return [" ".join(argv) for argv, _ in self.calls]


class FakePrompter:
    """Prompter returning scripted answers and remembering what was asked."""

    def __init__(self, project_name: str | None = None, overwrite: bool | None = False):
        self.project_name = project_name
        self.overwrite = overwrite
        self.name_prompts: list[str] = []
        self.overwrite_prompts: list[str] = []
        self.validator = None

    def ask_project_name(self, default, validate):
        self.name_prompts.append(default)
        self.validator = validate
        return self.project_name

    def confirm_overwrite(self, directory_name):
        self.overwrite_prompts.append(directory_name)
        return self.overwrite


# ===================================================================
# Fixtures
# ===================================================================


@pytest.fixture
def make_runner():
    """Provide the RecordingRunner class for tests that need canned failures."""
    return RecordingRunner


@pytest.fixture
def make_prompter():
    """Provide the FakePrompter class for tests that script answers."""
    return FakePrompter


@pytest.fixture
def quiet_console():
    """Provide a Rich console writing to a buffer instead of the terminal."""
    return Console(file=io.StringIO(), theme=kitstarter_theme, force_terminal=False, width=200)


@pytest.fixture
def template_root(tmp_path):
    """Create a small template root with one ``demo`` template.

    Layout::

        demo/
            package.json        tokens and legacy scope
            README.md           title token
            .gitignore          allow-listed hidden file
            .secret             hidden file, never substituted
            logo.png            binary extension
            node_modules/pkg/index.js
            src/app.ts          camel and pascal tokens
    """
    root = tmp_path / "templates"
    demo = root / "demo"
    (demo / "src").mkdir(parents=True)
    (demo / "node_modules" / "pkg").mkdir(parents=True)

    (demo / "package.json").write_text(
        '{\n  "name": "{{PROJECT_NAME}}",\n'
        '  "dependencies": { "@riffcraft/logger": "workspace:*" }\n}\n',
        encoding="utf-8",
    )
    (demo / "README.md").write_text("# {{PROJECT_NAME_TITLE}}\n\nBuilt by Riffcraft.\n")
    (demo / ".gitignore").write_text("node_modules\n{{PROJECT_NAME}}.log\n")
    (demo / ".secret").write_text("{{PROJECT_NAME}}\n")
    (demo / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n{{PROJECT_NAME}}")
    (demo / "node_modules" / "pkg" / "index.js").write_text("// {{PROJECT_NAME}}\n")
    (demo / "src" / "app.ts").write_text(
        "export const {{PROJECT_NAME_CAMEL}} = new {{PROJECT_NAME_PASCAL}}App();\n"
    )

    # Private entries are not templates
    (root / "_shared").mkdir()
    return root


@pytest.fixture
def template_manager(template_root):
    """Provide a TemplateManager over the ``template_root`` fixture."""
    return TemplateManager(template_root)
