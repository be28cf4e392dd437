"""Centralized color and style management for the kitstarter CLI.

Design Philosophy:
- Semantic color names (success, error, warning) rather than direct colors
- One theme shared by the Rich console and the questionary prompts
- Rich console markup helpers for inline styling
"""

import sys
from dataclasses import dataclass

from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from questionary import Style as QuestionaryStyle
from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# ============================================================================
# THEME CONFIGURATION
# ============================================================================


@dataclass
class ColorTheme:
    """Defines a complete color theme for the CLI.

    Separates colors into fixed standard colors (error, warning), configurable
    identity colors (primary, accent, ...) and neutral infrastructure colors.
    """

    # === FIXED STANDARD COLORS (UI Conventions) ===
    error: str = "#ff0000"
    warning: str = "#ffaa00"

    # === CONFIGURABLE THEME COLORS ===
    primary: str = "#ff3e00"  # Svelte orange
    success: str = "#4caf50"
    accent: str = "#40b3ff"
    command: str = "#40b3ff"
    path: str = "#a2ae9d"

    # === NEUTRAL COLORS ===
    text_primary: str = "#ffffff"
    text_secondary: str = "#888888"
    text_dim: str = "#666666"

    def __post_init__(self):
        """Calculate derived colors from theme colors."""
        self.header = self.primary


DEFAULT_THEME = ColorTheme()


def _build_rich_theme(theme: ColorTheme) -> Theme:
    """Build a Rich Theme from a ColorTheme."""
    return Theme(
        {
            # Status styles
            "success": f"bold {theme.success}",
            "error": f"bold {theme.error}",
            "warning": f"bold {theme.warning}",
            # Text styles
            "dim": theme.text_dim,
            # Component-specific styles
            "header": f"bold {theme.header}",
            "path": theme.path,
            "command": theme.command,
        }
    )


def _build_questionary_style(theme: ColorTheme) -> QuestionaryStyle:
    """Build a Questionary style from a ColorTheme."""
    return QuestionaryStyle(
        [
            ("qmark", f"fg:{theme.accent} bold"),
            ("question", "bold"),
            ("answer", f"fg:{theme.primary} bold"),
            ("pointer", f"fg:{theme.primary} bold"),
            ("highlighted", f"fg:{theme.primary} bold"),
            ("instruction", f"fg:{theme.text_dim} italic"),
            ("text", f"fg:{theme.text_secondary}"),
            ("default", f"fg:{theme.text_primary}"),
        ]
    )


# ============================================================================
# RICH THEME & QUESTIONARY STYLES
# ============================================================================

kitstarter_theme = _build_rich_theme(DEFAULT_THEME)
custom_style = _build_questionary_style(DEFAULT_THEME)

# On Windows, force UTF-8 capable output for the ✓/✗/⚠️ glyphs
if sys.platform == "win32":
    console = Console(theme=kitstarter_theme, force_terminal=True, legacy_windows=False)
else:
    console = Console(theme=kitstarter_theme)


def get_key_bindings() -> KeyBindings:
    """Get custom key bindings for questionary prompts.

    Adds ESC key support to abort prompts (same behavior as Ctrl+C).
    """
    bindings = KeyBindings()

    @bindings.add(Keys.Escape)
    def _(event):
        """Handle ESC key - abort the prompt like Ctrl+C."""
        event.app.exit(exception=KeyboardInterrupt)

    return bindings


# ============================================================================
# STYLE HELPERS
# ============================================================================


class Messages:
    """Pre-formatted message helpers for common patterns.

    The text is escaped, so paths, tool output and user input containing
    square brackets print literally instead of being parsed as markup.
    """

    @staticmethod
    def success(text: str) -> str:
        """Format a success message with checkmark."""
        return f"[success]✓ {escape(text)}[/success]"

    @staticmethod
    def error(text: str) -> str:
        """Format an error message with X mark."""
        return f"[error]✗ {escape(text)}[/error]"

    @staticmethod
    def warning(text: str) -> str:
        """Format a warning message with warning symbol."""
        return f"[warning]⚠️  {escape(text)}[/warning]"

    @staticmethod
    def command(text: str) -> str:
        """Format a command string."""
        return f"[command]{escape(text)}[/command]"

    @staticmethod
    def path(text: str) -> str:
        """Format a file path."""
        return f"[path]{escape(text)}[/path]"


__all__ = [
    "ColorTheme",
    "DEFAULT_THEME",
    "kitstarter_theme",
    "console",
    "custom_style",
    "get_key_bindings",
    "Messages",
]
