"""
Component Logger Framework

Provides colored logging for scaffolder components with:
- Unified API for all components (bootstrap, templates, commands, cli)
- Rich terminal output with component-specific colors
- Colors taken from ``logging.logging_colors`` in the configuration

Usage:
    logger = get_logger("bootstrap")
    logger.key_info("Creating project")
    logger.info("Copying template")
    logger.debug("Detailed trace")
    logger.warning("Something to note")
    logger.error("Something went wrong")
    logger.timing("Substitution took 0.2 seconds")

    # Custom loggers with explicit parameters
    logger = get_logger(name="custom_component", color="blue")
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from kitstarter.utils.config import DEFAULT_CONFIG, ConfigBuilder

# Component loggers handed out so far, recolored when the configuration loads
_component_loggers: dict[str, "ComponentLogger"] = {}


class ComponentLogger:
    """
    Rich-formatted logger for scaffolder components with color coding and message hierarchy.

    Message Types:
    - key_info: Important operational information
    - info: Normal operational messages
    - debug: Detailed tracing information
    - warning: Warning messages
    - error: Error messages
    - timing: Timing information
    """

    def __init__(self, base_logger: logging.Logger, component_name: str, color: str = "white"):
        """
        Initialize component logger.

        Args:
            base_logger: Underlying Python logger
            component_name: Name of the component (e.g., 'bootstrap', 'templates')
            color: Rich color name for this component
        """
        self.base_logger = base_logger
        self.component_name = component_name
        self.color = color

    def _format_message(self, message: str, style: str, emoji: str = "") -> str:
        """Format message with Rich markup and emoji prefix.

        The message is escaped so paths and tool output print literally.
        """
        prefix = f"{emoji}{self.component_name.title()}: "
        if style:
            return f"[{style}]{prefix}{escape(message)}[/{style}]"
        return f"{prefix}{escape(message)}"

    def key_info(self, message: str) -> None:
        """Important operational information."""
        style = f"bold {self.color}" if self.color != "white" else "bold white"
        self.base_logger.info(self._format_message(message, style))

    def info(self, message: str) -> None:
        """Info message."""
        self.base_logger.info(self._format_message(message, self.color))

    def debug(self, message: str) -> None:
        """Debug message - detailed technical info."""
        style = f"dim {self.color}" if self.color != "white" else "dim white"
        self.base_logger.debug(self._format_message(message, style, "🔍 "))

    def warning(self, message: str) -> None:
        """Warning message."""
        self.base_logger.warning(self._format_message(message, "bold yellow", "⚠️  "))

    def error(self, message: str, exc_info: bool = False) -> None:
        """Error message.

        Args:
            message: Error message
            exc_info: Whether to include exception traceback
        """
        self.base_logger.error(self._format_message(message, "bold red", "❌ "), exc_info=exc_info)

    def timing(self, message: str) -> None:
        """Timing information."""
        self.base_logger.info(self._format_message(message, "bold white", "🕒 "))


def _resolve_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved
    return logging.INFO


def _component_color(component_name: str, config: ConfigBuilder | None) -> str:
    if config is not None:
        color = config.get(f"logging.logging_colors.{component_name}")
    else:
        color = DEFAULT_CONFIG["logging"]["logging_colors"].get(component_name)
    return color or "white"


def configure_logging(
    config: ConfigBuilder | None = None, level: int | str | None = None, *, force: bool = False
) -> None:
    """Configure Rich logging for the root logger.

    Called once by the CLI after the configuration is loaded. Later calls are
    no-ops unless ``force`` is set, so :func:`get_logger` can call it lazily.
    With a configuration, component loggers created before it was loaded
    take their colors from ``logging.logging_colors``.

    Args:
        config: Configuration to read ``logging.*`` settings from (defaults if None)
        level: Explicit level overriding ``logging.level`` (e.g. from ``--verbose``)
        force: Replace an existing RichHandler
    """
    root_logger = logging.getLogger()

    existing = [h for h in root_logger.handlers if isinstance(h, RichHandler)]
    if existing and not force:
        return

    for handler in existing:
        root_logger.removeHandler(handler)

    if config is not None:
        configured_level = config.get("logging.level", "INFO")
        rich_tracebacks = bool(config.get("logging.rich_tracebacks", True))
        show_full_paths = bool(config.get("logging.show_full_paths", False))
        for component_name, component_logger in _component_loggers.items():
            component_logger.color = _component_color(component_name, config)
    else:
        configured_level = DEFAULT_CONFIG["logging"]["level"]
        rich_tracebacks = True
        show_full_paths = False

    root_logger.setLevel(_resolve_level(level if level is not None else configured_level))

    # Diagnostics go to stderr so they never mix with generated output on stdout
    console = Console(stderr=True)

    handler = RichHandler(
        console=console,
        rich_tracebacks=rich_tracebacks,
        markup=True,
        show_path=show_full_paths,
        show_time=True,
        show_level=True,
        tracebacks_show_locals=False,
    )
    root_logger.addHandler(handler)


def get_logger(
    component_name: str | None = None,
    *,
    config: ConfigBuilder | None = None,
    name: str | None = None,
    color: str | None = None,
) -> ComponentLogger:
    """
    Get a component logger.

    Component loggers are shared: asking twice for the same component returns
    the same instance, which :func:`configure_logging` recolors.

    Args:
        component_name: Component name (e.g., 'bootstrap', 'templates')
        config: Configuration supplying ``logging.logging_colors`` (defaults if None)
        name: Direct logger name, bypasses color lookup (keyword-only)
        color: Direct color specification (keyword-only)

    Returns:
        ComponentLogger instance

    Examples:
        logger = get_logger("templates")
        logger.info("Substituting variables")

        logger = get_logger(name="test_logger", color="blue")
    """
    configure_logging()

    if name is not None:
        return ComponentLogger(logging.getLogger(name), name, color or "white")

    if component_name is None:
        raise ValueError(
            "Component name is required. Usage: get_logger('component_name') or "
            "get_logger(name='custom_name', color='blue')"
        )

    component_logger = _component_loggers.get(component_name)
    if component_logger is None:
        component_logger = ComponentLogger(
            logging.getLogger(f"kitstarter.{component_name}"), component_name
        )
        component_logger.color = _component_color(component_name, config)
        _component_loggers[component_name] = component_logger
    elif config is not None:
        component_logger.color = _component_color(component_name, config)

    if color is not None:
        component_logger.color = color
    return component_logger
