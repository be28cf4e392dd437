"""Command-line interface for kitstarter.

The single ``kitstarter`` command scaffolds a SvelteKit monorepo from the
bundled template.

Architecture:
    Uses Click for command-line parsing. The command in ``init_cmd`` builds a
    :class:`~kitstarter.cli.bootstrap.ProjectBootstrapper` from configuration
    and flags, and ``main`` adds process-level signal and error handling.
"""

from .init_cmd import init
from .main import main

__all__ = ["init", "main"]
