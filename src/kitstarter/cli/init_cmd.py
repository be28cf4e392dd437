"""Project initialization command.

This module provides the ``kitstarter`` command which creates a new
SvelteKit monorepo from the bundled template: copy, substitute, then
optionally install dependencies and initialize git.
"""

import dataclasses
import logging

import click

from kitstarter import __version__
from kitstarter.errors import ConfigurationError
from kitstarter.utils.commands import SubprocessRunner
from kitstarter.utils.config import ConfigBuilder, ScaffoldSettings
from kitstarter.utils.logger import configure_logging

from .bootstrap import ProjectBootstrapper
from .prompts import QuestionaryPrompter
from .styles import Messages, console
from .templates import TemplateManager


@click.command()
@click.argument("project_name", required=False)
@click.option(
    "--template",
    "-t",
    default=None,
    help="Template to use (default from configuration: sveltekit-monorepo)",
)
@click.option("--skip-install", is_flag=True, help="Do not install dependencies")
@click.option("--skip-git", is_flag=True, help="Do not initialize a git repository")
@click.option(
    "--force", "-f", is_flag=True, help="Overwrite an existing project directory without asking"
)
@click.option(
    "--legacy-identifiers/--no-legacy-identifiers",
    default=None,
    help="Rewrite leftover template brand names to the project name",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML configuration file (default: $KITSTARTER_CONFIG or ./kitstarter.yml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(version=__version__, prog_name="kitstarter")
@click.pass_context
def init(
    ctx: click.Context,
    project_name: str | None,
    template: str | None,
    skip_install: bool,
    skip_git: bool,
    force: bool,
    legacy_identifiers: bool | None,
    config_path: str | None,
    verbose: bool,
):
    """Create a new SvelteKit monorepo project.

    PROJECT_NAME: Name of your project (e.g., my-app, widget-shop). Prompted
    for when omitted. Letters, numbers, hyphens and underscores, 2 to 50
    characters.

    The generated project includes:

    \b
      - SvelteKit web app with TypeScript and TailwindCSS
      - Monorepo with pnpm workspaces
      - Logger and datastore packages
      - CLI tools package

    Examples:

    \b
      # Create a project, prompting for the name
      $ kitstarter

      # Create my-app without installing dependencies
      $ kitstarter my-app --skip-install

      # Replace an existing directory without confirmation
      $ kitstarter my-app --force
    """
    try:
        config = ConfigBuilder.from_sources(config_path)
        settings = ScaffoldSettings.from_config(config)
    except ConfigurationError as e:
        console.print(Messages.error(str(e)))
        ctx.exit(1)

    configure_logging(config, logging.DEBUG if verbose else None, force=True)

    overrides = {}
    if template:
        overrides["template"] = template
    if skip_install:
        overrides["install_dependencies"] = False
    if skip_git:
        overrides["init_git"] = False
    if legacy_identifiers is not None:
        overrides["rewrite_legacy_identifiers"] = legacy_identifiers
    settings = dataclasses.replace(settings, **overrides)

    console.print("🚀 [header]Welcome to kitstarter![/header]")
    console.print("[dim]Creating a new SvelteKit application with monorepo structure.[/dim]\n")

    bootstrapper = ProjectBootstrapper(
        TemplateManager(),
        SubprocessRunner(),
        QuestionaryPrompter(),
        settings,
        force=force,
    )
    outcome = bootstrapper.run(project_name)
    ctx.exit(outcome.exit_code)
