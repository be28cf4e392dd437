"""Project bootstrapper: drives one scaffolder run from name to finished project.

The run is a linear state machine with no loops back::

    START → NAME_RESOLVED → DIRECTORY_CHECKED → COPIED → SUBSTITUTED
          → [DEPENDENCIES_INSTALLED] → [VERSION_CONTROL_INITIALIZED] → DONE

``ABORTED`` is reachable from every stage. Fatal errors after the target
directory has been claimed remove it, so no partially copied or partially
substituted project is left behind. Dependency installation and git
initialization failures are downgraded to warnings.

All collaborators are injected: the template manager, the command runner, the
prompter, and the console. Tests pass fakes for the last three.
"""

import shutil
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from kitstarter.errors import (
    CopyError,
    ExternalToolFailure,
    InvalidNameError,
    SubstitutionError,
    TemplateNotFoundError,
    TraversalError,
)
from kitstarter.utils.commands import CommandRunner
from kitstarter.utils.config import ScaffoldSettings
from kitstarter.utils.logger import get_logger
from kitstarter.utils.naming import ProjectIdentifier, validate_name

from .prompts import DEFAULT_PROJECT_NAME, Prompter
from .styles import Messages
from .styles import console as default_console
from .templates import TemplateManager

logger = get_logger("bootstrap")


class BootstrapStage(Enum):
    """Stages of a bootstrap run, in order."""

    START = "start"
    NAME_RESOLVED = "name_resolved"
    DIRECTORY_CHECKED = "directory_checked"
    COPIED = "copied"
    SUBSTITUTED = "substituted"
    DEPENDENCIES_INSTALLED = "dependencies_installed"
    VERSION_CONTROL_INITIALIZED = "version_control_initialized"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class OperationOutcome:
    """Result of a whole bootstrap run.

    Attributes:
        success: Whether the project was created
        stage: Last stage reached (``DONE`` or ``ABORTED``)
        target_dir: Project directory, once computed
        identifier: Derived project identifiers, once the name is valid
        error: Reason for an abort
        warnings: Non-fatal problems (install or git failures)
        dependencies_installed: Whether the install step succeeded
        git_initialized: Whether the repository was created
        stage_reached: Last non-terminal stage completed before finishing
    """

    success: bool
    stage: BootstrapStage
    target_dir: Path | None = None
    identifier: ProjectIdentifier | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    dependencies_installed: bool = False
    git_initialized: bool = False
    stage_reached: BootstrapStage = BootstrapStage.START

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


class BootstrapAborted(Exception):
    """Internal signal that the run stops at the current stage."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProjectBootstrapper:
    """Create a project from a bundled template.

    Examples:
        >>> bootstrapper = ProjectBootstrapper(
        ...     TemplateManager(), SubprocessRunner(), QuestionaryPrompter(), ScaffoldSettings()
        ... )
        >>> outcome = bootstrapper.run("widget-shop")
        >>> outcome.exit_code
        0
    """

    def __init__(
        self,
        manager: TemplateManager,
        runner: CommandRunner,
        prompter: Prompter,
        settings: ScaffoldSettings,
        *,
        cwd: Path | None = None,
        force: bool = False,
        console: Console | None = None,
    ):
        """
        Args:
            manager: Template discovery, copy and substitution
            runner: Executes git and the package manager
            prompter: Interactive name and overwrite prompts
            settings: Resolved configuration for this run
            cwd: Directory the project is created in (default: current directory)
            force: Overwrite an existing target without asking
            console: Rich console for progress output
        """
        self.manager = manager
        self.runner = runner
        self.prompter = prompter
        self.settings = settings
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.force = force
        self.console = console or default_console

        self._stage = BootstrapStage.START
        self._owned_target: Path | None = None
        self._package_manager = settings.package_manager

    @property
    def stage(self) -> BootstrapStage:
        return self._stage

    def _advance(self, stage: BootstrapStage) -> None:
        logger.debug(f"{self._stage.value} -> {stage.value}")
        self._stage = stage

    # -- Public API --------------------------------------------------------

    def run(self, project_name: str | None = None) -> OperationOutcome:
        """Execute the whole run.

        Args:
            project_name: Name from the command line; prompted for when None

        Returns:
            OperationOutcome describing success or the abort reason. Unexpected
            exceptions (anything that is not a ScaffoldError) propagate without
            cleanup.
        """
        self._stage = BootstrapStage.START
        self._owned_target = None
        self._package_manager = self.settings.package_manager
        outcome = OperationOutcome(success=False, stage=BootstrapStage.START)

        try:
            identifier = self._resolve_name(project_name)
            outcome.identifier = identifier
            self._advance(BootstrapStage.NAME_RESOLVED)

            template_dir = self.manager.get_template_dir(self.settings.template)
            logger.key_info(f"Creating {identifier.kebab} from template {self.settings.template}")

            target_dir = self.cwd / identifier.kebab
            outcome.target_dir = target_dir
            self._check_directory(target_dir)
            self._advance(BootstrapStage.DIRECTORY_CHECKED)

            self._materialize(template_dir, target_dir, identifier)

            if self.settings.install_dependencies:
                warning = self._install_dependencies(target_dir)
                if warning:
                    outcome.warnings.append(warning)
                else:
                    outcome.dependencies_installed = True
                    self._advance(BootstrapStage.DEPENDENCIES_INSTALLED)

            if self.settings.init_git:
                warning = self._initialize_git(target_dir, identifier)
                if warning:
                    outcome.warnings.append(warning)
                else:
                    outcome.git_initialized = True
                    self._advance(BootstrapStage.VERSION_CONTROL_INITIALIZED)

        except BootstrapAborted as e:
            return self._abort(outcome, e.message, cleanup=False)
        except (InvalidNameError, TemplateNotFoundError) as e:
            return self._abort(outcome, str(e), cleanup=False)
        except (CopyError, TraversalError, SubstitutionError) as e:
            return self._abort(outcome, str(e), cleanup=True)
        except KeyboardInterrupt:
            return self._abort(outcome, "Project creation cancelled.", cleanup=True)

        outcome.stage_reached = self._stage
        outcome.success = True
        outcome.stage = BootstrapStage.DONE
        self._advance(BootstrapStage.DONE)
        self._print_next_steps(outcome)
        return outcome

    # -- Stages ------------------------------------------------------------

    def _resolve_name(self, project_name: str | None) -> ProjectIdentifier:
        """Take the name from the argument or prompt for it, then validate."""
        if project_name is None:
            project_name = self.prompter.ask_project_name(
                DEFAULT_PROJECT_NAME, lambda value: validate_name(value).for_prompt()
            )
            if not project_name:
                raise BootstrapAborted("Project creation cancelled.")

        return ProjectIdentifier.from_name(project_name)

    def _check_directory(self, target_dir: Path) -> None:
        """Make sure ``target_dir`` is free, asking before replacing it."""
        if not target_dir.exists():
            self._owned_target = target_dir
            return

        if not self.force:
            confirmed = self.prompter.confirm_overwrite(target_dir.name)
            if not confirmed:
                raise BootstrapAborted("Project creation cancelled.")

        self.console.print(Messages.warning(f"Removing existing directory: {target_dir}"))
        # Confirmed: from here on the directory is ours to clean up
        self._owned_target = target_dir
        try:
            if target_dir.is_dir() and not target_dir.is_symlink():
                shutil.rmtree(target_dir)
            else:
                target_dir.unlink()
        except OSError as e:
            raise BootstrapAborted(f"Could not remove existing directory {target_dir}: {e}") from e

    def _materialize(
        self, template_dir: Path, target_dir: Path, identifier: ProjectIdentifier
    ) -> None:
        """Copy the template and substitute its tokens."""
        started = time.perf_counter()
        with self.console.status("Copying template files...", spinner="dots"):
            self.manager.copy_template(template_dir, target_dir)
        self._advance(BootstrapStage.COPIED)

        with self.console.status("Processing template variables...", spinner="dots"):
            rewritten = self.manager.substitute_variables(
                target_dir,
                identifier.template_variables(),
                rewrite_legacy=self.settings.rewrite_legacy_identifiers,
            )
        self._advance(BootstrapStage.SUBSTITUTED)

        logger.debug(f"Substituted variables in {rewritten} file(s)")
        logger.timing(f"Template materialized in {time.perf_counter() - started:.2f} seconds")
        self.console.print(Messages.success("Project structure created!"))

    def _run_checked(self, argv: list[str], cwd: Path) -> None:
        result = self.runner.run(argv, cwd=cwd)
        if not result.ok:
            raise ExternalToolFailure(argv, result.exit_code, result.stderr)

    def _select_package_manager(self, target_dir: Path) -> str:
        """Return the preferred package manager if it answers, else the fallback."""
        preferred = self.settings.package_manager
        version_check = self.runner.run([preferred, "--version"], cwd=target_dir)
        if version_check.ok:
            return preferred

        fallback = self.settings.fallback_package_manager
        logger.info(f"{preferred} is not available, falling back to {fallback}")
        return fallback

    def _install_dependencies(self, target_dir: Path) -> str | None:
        """Install dependencies. Returns a warning message instead of raising."""
        package_manager = self._select_package_manager(target_dir)
        self._package_manager = package_manager
        try:
            with self.console.status(
                f"Installing dependencies with {escape(package_manager)}...", spinner="dots"
            ):
                self._run_checked([package_manager, "install"], target_dir)
        except ExternalToolFailure as e:
            message = (
                f"Dependency installation failed ({e}). "
                f"Run it manually: cd {target_dir.name} && {package_manager} install"
            )
            logger.warning(message)
            self.console.print(Messages.warning(message))
            return message

        self.console.print(Messages.success(f"Dependencies installed with {package_manager}"))
        return None

    def _initialize_git(self, target_dir: Path, identifier: ProjectIdentifier) -> str | None:
        """Create a repository with an initial commit. Returns a warning message instead of raising."""
        commit_message = self.settings.commit_message.format(
            project_name=identifier.kebab, project_title=identifier.title
        )
        try:
            self._run_checked(["git", "init"], target_dir)
            self._run_checked(["git", "add", "."], target_dir)
            self._run_checked(["git", "commit", "-m", commit_message], target_dir)
        except ExternalToolFailure as e:
            message = (
                f"Git initialization failed ({e}). Initialize it manually: "
                f'cd {target_dir.name} && git init && git add . && git commit -m "{commit_message}"'
            )
            logger.warning(message)
            self.console.print(Messages.warning(message))
            return message

        self.console.print(Messages.success("Initialized git repository"))
        return None

    # -- Termination -------------------------------------------------------

    def _abort(self, outcome: OperationOutcome, message: str, *, cleanup: bool) -> OperationOutcome:
        outcome.stage_reached = self._stage
        self._advance(BootstrapStage.ABORTED)
        outcome.stage = BootstrapStage.ABORTED
        outcome.success = False
        outcome.error = message

        self.console.print(Messages.error(message))
        logger.debug(f"Aborted after {outcome.stage_reached.value}: {message}")

        if cleanup:
            self.cleanup()
        return outcome

    def cleanup(self) -> bool:
        """Best-effort removal of the target directory claimed by this run.

        Only a directory created (or confirmed for overwrite) by this run is
        ever removed.

        Returns:
            True if a directory was removed
        """
        target = self._owned_target
        if target is None or not target.exists():
            return False

        self.console.print(Messages.warning("Cleaning up..."))
        try:
            shutil.rmtree(target)
        except OSError as e:
            logger.warning(f"Could not remove {target}: {e}")
            return False
        return True

    def _print_next_steps(self, outcome: OperationOutcome) -> None:
        identifier = outcome.identifier
        package_manager = self._package_manager

        self.console.print()
        title = escape(identifier.title)
        self.console.print(f"🎉 [success]Project {title} created successfully![/success]")
        self.console.print(f"   {Messages.path(str(outcome.target_dir))}")
        self.console.print()
        self.console.print("[bold]Next steps:[/bold]")
        self.console.print(f"  {Messages.command(f'cd {identifier.kebab}')}")
        if not outcome.dependencies_installed:
            self.console.print(f"  {Messages.command(f'{package_manager} install')}")
        self.console.print(
            f"  {Messages.command(f'{package_manager} web')}        [dim]# start development server[/dim]"
        )
        self.console.print(
            f"  {Messages.command(f'{package_manager} cli hello')}  [dim]# run the bundled CLI tool[/dim]"
        )
