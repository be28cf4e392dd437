"""Interactive prompts used by the bootstrapper.

The bootstrapper only depends on the :class:`Prompter` protocol; the CLI hands
it a :class:`QuestionaryPrompter`. Both prompts return None when the user
cancels (Ctrl+C or ESC), which the bootstrapper treats as an abort.
"""

from collections.abc import Callable
from typing import Protocol

import questionary

from .styles import custom_style, get_key_bindings

DEFAULT_PROJECT_NAME = "my-monorepo-with-sveltekit"


class Prompter(Protocol):
    """Source of interactive answers."""

    def ask_project_name(
        self, default: str, validate: Callable[[str], bool | str]
    ) -> str | None: ...

    def confirm_overwrite(self, directory_name: str) -> bool | None: ...


class QuestionaryPrompter:
    """Terminal prompts rendered with questionary in the CLI theme."""

    def ask_project_name(
        self, default: str, validate: Callable[[str], bool | str]
    ) -> str | None:
        """Ask for the project name, validating every keystroke."""
        return questionary.text(
            "What is your project name?",
            default=default,
            validate=validate,
            style=custom_style,
            key_bindings=get_key_bindings(),
        ).ask()

    def confirm_overwrite(self, directory_name: str) -> bool | None:
        """Ask whether an existing directory may be replaced. Defaults to no."""
        return questionary.confirm(
            f"Directory {directory_name} already exists. Overwrite?",
            default=False,
            style=custom_style,
        ).ask()
