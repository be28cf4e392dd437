"""Exception hierarchy for the kitstarter scaffolder.

Every failure the scaffolder knows how to report derives from
:class:`ScaffoldError`. The bootstrapper treats everything except
:class:`ExternalToolFailure` as fatal: the partially created project directory
is removed and the process exits with a non-zero status.

.. seealso::
   :class:`kitstarter.cli.bootstrap.ProjectBootstrapper` : Error propagation policy
"""

from pathlib import Path


class ScaffoldError(Exception):
    """Base exception for all scaffolder errors."""

    pass


class ConfigurationError(ScaffoldError):
    """Raised when a configuration file cannot be loaded or has the wrong shape."""

    pass


class InvalidNameError(ScaffoldError):
    """Raised when a project name fails validation.

    The message is the human readable validation failure, suitable for
    showing to the user as-is.
    """

    pass


class TemplateNotFoundError(ScaffoldError):
    """Raised when the requested template is not bundled or its directory is missing."""

    pass


class TraversalError(ScaffoldError):
    """Raised when a directory of the template tree cannot be listed.

    A partial traversal is never returned: a partial template copy is not a
    valid project.
    """

    def __init__(self, path: Path, cause: BaseException | None = None):
        self.path = Path(path)
        self.cause = cause
        reason = f": {cause}" if cause else ""
        super().__init__(f"Failed to read directory {self.path}{reason}")


class CopyError(ScaffoldError):
    """Raised when copying part of the template tree fails."""

    def __init__(self, source: Path, destination: Path, cause: BaseException | None = None):
        self.source = Path(source)
        self.destination = Path(destination)
        self.cause = cause
        reason = f": {cause}" if cause else ""
        super().__init__(f"Failed to copy {self.source} to {self.destination}{reason}")


class SubstitutionError(ScaffoldError):
    """Raised when a substituted file cannot be written back."""

    def __init__(self, path: Path, cause: BaseException | None = None):
        self.path = Path(path)
        self.cause = cause
        reason = f": {cause}" if cause else ""
        super().__init__(f"Failed to write {self.path}{reason}")


class ExternalToolFailure(ScaffoldError):
    """Raised when git or the package manager exits with a non-zero status.

    Never fatal: the bootstrapper downgrades it to a warning with manual
    follow-up instructions.
    """

    def __init__(self, argv: list[str], exit_code: int, stderr: str = ""):
        self.argv = list(argv)
        self.exit_code = exit_code
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"'{' '.join(self.argv)}' exited with status {exit_code}{detail}")
