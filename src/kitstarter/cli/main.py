"""Main CLI entry point for kitstarter.

Wraps the click command with process-level handling. SIGTERM is turned into
KeyboardInterrupt so the bootstrapper removes a half-created project for both
Ctrl+C and termination. The command runs with ``standalone_mode=False`` so
interrupts outside the bootstrapper reach this wrapper as ``click.Abort``
instead of click's own "Aborted!" exit. Unexpected errors exit with status 1
without cleanup.
"""

import signal
import sys

import click

# Fix Windows console encoding to support the emoji and check marks in output
if sys.platform == "win32":
    try:
        import io

        if sys.stdout.encoding.lower() != "utf-8":
            sys.stdout = io.TextIOWrapper(
                sys.stdout.buffer, encoding="utf-8", errors="replace", line_buffering=True
            )
        if sys.stderr.encoding.lower() != "utf-8":
            sys.stderr = io.TextIOWrapper(
                sys.stderr.buffer, encoding="utf-8", errors="replace", line_buffering=True
            )
    except (AttributeError, OSError):
        # No buffer to wrap; plain output still works
        pass

from .init_cmd import init  # noqa: E402


def _raise_keyboard_interrupt(signum, frame):
    raise KeyboardInterrupt


def main():
    """Entry point for the kitstarter CLI."""
    signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)

    try:
        exit_code = init(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except (KeyboardInterrupt, click.Abort):
        click.echo("\nProject creation cancelled.", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
