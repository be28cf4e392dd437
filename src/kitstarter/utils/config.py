"""
Configuration System

YAML configuration for the scaffolder. Features:
- Optional single-file YAML loading, deep-merged over built-in defaults
- Environment variable resolution (``${VAR}``, ``${VAR:-default}``, ``$VAR``)
- Dot-notation access (``builder.get("install.package_manager")``)
- No process-wide cache: the CLI builds one instance and passes it down

Resolution order for the configuration file, first match wins:
1. explicit path (``--config``)
2. ``KITSTARTER_CONFIG`` environment variable
3. ``kitstarter.yml`` in the current working directory
4. built-in defaults only
"""

import copy
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from kitstarter.errors import ConfigurationError

# Standard logging (not get_logger) to avoid a circular import with logger.py
logger = logging.getLogger("CONFIG")

CONFIG_ENV_VAR = "KITSTARTER_CONFIG"
DEFAULT_CONFIG_FILENAME = "kitstarter.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "template": "sveltekit-monorepo",
    "substitution": {
        "rewrite_legacy_identifiers": True,
    },
    "install": {
        "enabled": True,
        "package_manager": "pnpm",
        "fallback_package_manager": "npm",
    },
    "git": {
        "enabled": True,
        "commit_message": "Initial commit for {project_name}",
    },
    "logging": {
        "level": "INFO",
        "rich_tracebacks": True,
        "show_full_paths": False,
        "logging_colors": {
            "bootstrap": "cyan",
            "templates": "magenta",
            "commands": "blue",
            "cli": "white",
        },
    },
}

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(.*?))?\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config_path(config_arg: str | Path | None = None) -> Path | None:
    """Find the configuration file to load, if any.

    Args:
        config_arg: Explicit path from ``--config`` (optional)

    Returns:
        Path of the file to load, or None when only defaults apply

    Raises:
        ConfigurationError: If an explicitly requested file does not exist
    """
    if config_arg:
        path = Path(config_arg).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        return path

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(
                f"{CONFIG_ENV_VAR} points to a missing configuration file: {path}"
            )
        return path

    cwd_config = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_config.is_file():
        return cwd_config

    return None


class ConfigBuilder:
    """
    Configuration builder: defaults plus an optional user YAML file.

    Attributes:
        config_path: File the user values came from, or None
        raw_config: Merged configuration with environment variables resolved
    """

    def __init__(self, config_path: str | Path | None = None, *, overrides: dict | None = None):
        """
        Initialize configuration builder.

        Args:
            config_path: Path to a YAML file. None means defaults only.
            overrides: Values merged last, above the file (used by tests and the CLI)

        Raises:
            ConfigurationError: If the file is unreadable, not YAML, or not a mapping
        """
        self.config_path = Path(config_path) if config_path else None

        user_config: dict[str, Any] = {}
        if self.config_path is not None:
            user_config = self._load_yaml_file(self.config_path)

        merged = _deep_merge(DEFAULT_CONFIG, user_config)
        if overrides:
            merged = _deep_merge(merged, overrides)

        self.raw_config = self._resolve_env_vars(merged)

    @classmethod
    def from_sources(cls, config_arg: str | Path | None = None) -> "ConfigBuilder":
        """Build from the first configuration file found by :func:`resolve_config_path`."""
        return cls(resolve_config_path(config_arg))

    def _load_yaml_file(self, file_path: Path) -> dict[str, Any]:
        """Load and validate a YAML configuration file."""
        try:
            with open(file_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML configuration {file_path}: {e}") from e

        if config is None:
            logger.warning(f"Configuration file is empty: {file_path}")
            return {}

        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a dictionary/mapping: {file_path}"
            )

        logger.debug(f"Loaded configuration from {file_path}")
        return config

    def _resolve_env_vars(self, data: Any) -> Any:
        """Recursively resolve environment variables in configuration data."""
        if isinstance(data, dict):
            return {key: self._resolve_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._resolve_env_vars(item) for item in data]
        elif isinstance(data, str):

            def replace_env_var(match):
                if match.group(1):
                    var_name = match.group(1)
                    default_value = match.group(2)
                else:
                    var_name = match.group(3)
                    default_value = None

                env_value = os.environ.get(var_name)
                if env_value is None:
                    if default_value is not None:
                        return default_value
                    logger.debug(f"Environment variable '{var_name}' not found, keeping original value")
                    return match.group(0)
                return env_value

            return _ENV_VAR_PATTERN.sub(replace_env_var, data)
        else:
            return data

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation path."""
        if not path:
            raise ValueError("Configuration path cannot be empty or None")

        value = self.raw_config
        try:
            for key in path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default


def _as_bool(value: Any, path: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "yes", "1", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "no", "0", "off"}:
        return False
    raise ConfigurationError(f"'{path}' must be a boolean, got {value!r}")


@dataclass
class ScaffoldSettings:
    """Resolved settings for one scaffolder run.

    Built from a :class:`ConfigBuilder`; the CLI then applies its flags on top
    with :func:`dataclasses.replace`.
    """

    template: str = "sveltekit-monorepo"
    rewrite_legacy_identifiers: bool = True
    install_dependencies: bool = True
    package_manager: str = "pnpm"
    fallback_package_manager: str = "npm"
    init_git: bool = True
    commit_message: str = "Initial commit for {project_name}"

    def __post_init__(self):
        """Validate values that would otherwise fail halfway through a run.

        Raises:
            ConfigurationError: On an empty package manager or a commit message
                that does not format with ``{project_name}`` and ``{project_title}``
        """
        if not self.package_manager.strip():
            raise ConfigurationError("'install.package_manager' must not be empty")

        try:
            self.commit_message.format(project_name="project", project_title="Project")
        except (KeyError, IndexError, AttributeError, ValueError) as e:
            raise ConfigurationError(
                f"'git.commit_message' is not a valid template ({type(e).__name__}: {e}). "
                "Only {project_name} and {project_title} are available; write literal braces as {{ and }}"
            ) from e

    @classmethod
    def from_config(cls, config: ConfigBuilder) -> "ScaffoldSettings":
        """Read every setting from ``config``, validating types.

        Raises:
            ConfigurationError: If a value has the wrong type or is invalid
        """
        return cls(
            template=str(config.get("template", cls.template)),
            rewrite_legacy_identifiers=_as_bool(
                config.get("substitution.rewrite_legacy_identifiers", True),
                "substitution.rewrite_legacy_identifiers",
            ),
            install_dependencies=_as_bool(config.get("install.enabled", True), "install.enabled"),
            package_manager=str(config.get("install.package_manager", cls.package_manager)),
            fallback_package_manager=str(
                config.get("install.fallback_package_manager", cls.fallback_package_manager)
            ),
            init_git=_as_bool(config.get("git.enabled", True), "git.enabled"),
            commit_message=str(config.get("git.commit_message", cls.commit_message)),
        )
