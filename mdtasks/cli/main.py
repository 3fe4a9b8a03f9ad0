"""
FILE: mdtasks/cli/main.py
PURPOSE: Typer-based CLI for listing and editing tasks embedded in markdown
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - version() - Show version
  - help() - Show command list and usage
  - ls() - List tasks (filter / sort)
  - show() - View full task details
  - add() - Append a new task line
  - done() / reopen() - Tick / clear checkboxes
  - edit() - Change task description
  - due() - Set or clear due date
  - priority() - Set priority
  - hide() / unhide() - Hide tasks from the default report
  - note() - Set or clear detailed description
  - check() - Report malformed task lines
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - logging (stdlib, rendered through rich.logging.RichHandler)
  - mdtasks.core.vault (vault root selection)
NOTES:
  - Listing / reading commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Global options: --vault PATH, --verbose
"""

import sys
import logging
from pathlib import Path
from typing import Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core import vault

# Typer app setup
app = typer.Typer(
    name="mdtasks",
    help="Tasks embedded in markdown notes: list, filter, sort and edit them",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.1.0"


def setup_logging(verbose: bool = False) -> None:
    """Send package log records to stderr; DEBUG with --verbose, else warnings only."""
    package_logger = logging.getLogger("mdtasks")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=error_console, show_time=False, show_path=False)
        )


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    vault_dir: Optional[Path] = typer.Option(
        None,
        "--vault",
        "-V",
        help="Vault directory (default: $MDTASKS_VAULT or current directory)",
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    Global options; shows usage when no command is given.
    """
    setup_logging(verbose)
    if vault_dir is not None:
        vault.VAULT_DIR = vault_dir

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # System commands
    version,
    help,
    # Task commands
    ls,
    show,
    add,
    done,
    reopen,
    edit,
    due,
    priority,
    hide,
    unhide,
    note,
    check,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
