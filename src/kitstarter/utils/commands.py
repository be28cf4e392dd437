"""Child process execution behind a small capability interface.

The bootstrapper never spawns processes directly. It is handed a
:class:`CommandRunner` so tests can substitute a fake that records the calls
and returns canned results.

No timeout is applied: a hung ``pnpm install`` blocks the run until the user
interrupts it.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from kitstarter.utils.logger import get_logger

logger = get_logger("commands")

# Exit status reported when the executable itself cannot be started (shell convention)
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """Result of one finished child process."""

    argv: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner(Protocol):
    """Anything that can run an argv in a working directory."""

    def run(self, argv: list[str], cwd: Path | None = None) -> CommandResult: ...


class SubprocessRunner:
    """Run commands with :func:`subprocess.run`, capturing their output."""

    def run(self, argv: list[str], cwd: Path | None = None) -> CommandResult:
        logger.debug(f"Running: {' '.join(argv)} (cwd={cwd or Path.cwd()})")
        try:
            result = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except (FileNotFoundError, PermissionError) as e:
            # Missing executable is a failed command, not a crash
            return CommandResult(tuple(argv), COMMAND_NOT_FOUND, "", str(e))

        logger.debug(f"'{argv[0]}' exited with status {result.returncode}")
        return CommandResult(tuple(argv), result.returncode, result.stdout, result.stderr)
