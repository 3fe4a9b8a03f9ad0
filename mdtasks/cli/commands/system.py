"""
FILE: mdtasks/cli/commands/system.py
PURPOSE: System commands (version, help)
"""

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, __version__
from ...core.constants import TASK_MARKER, TASK_MARKER_END, VAULT_ENV_VAR


@app.command()
def version():
    """Show mdtasks version."""
    console.print(f"mdtasks v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]mdtasks[/bold cyan] - Tasks embedded in markdown notes\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  mdtasks [--vault PATH] \\[command] \\[options]\n")

    console.print("[bold]Task line format:[/bold]")
    console.print(
        f"  - \\[ ] Buy milk {TASK_MARKER}{{\"priority\":1,\"dueDate\":\"2025-01-01\"}}{TASK_MARKER_END}\n",
        markup=True,
        highlight=False,
    )

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("ls", "List tasks", "mdtasks ls [--keyword K] [--priority N] [--file F] [--all] [--sort COL] [--desc]"),
        ("show", "View full task details", "mdtasks show <task_id>"),
        ("add", "Append a new task", 'mdtasks add "Task summary" [--file F] [--due DATE] [--priority N]'),
        ("done", "Tick task checkbox(es)", "mdtasks done <task_id>..."),
        ("reopen", "Clear task checkbox(es)", "mdtasks reopen <task_id>..."),
        ("edit", "Change task description", 'mdtasks edit <task_id> "New summary"'),
        ("due", "Set or clear due date", "mdtasks due <task_id> 2025-01-31 | --clear"),
        ("priority", "Set priority (1-3)", "mdtasks priority <task_id> 1"),
        ("hide", "Hide task(s) from the report", "mdtasks hide <task_id>..."),
        ("unhide", "Show hidden task(s) again", "mdtasks unhide <task_id>..."),
        ("note", "Set or clear detailed description", 'mdtasks note <task_id> "Notes" | --clear'),
        ("check", "Report malformed task lines", "mdtasks check"),
        ("version", "Show version", "mdtasks version"),
        ("help", "Show this help message", "mdtasks help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:8}[/green] {desc}")
        console.print(f"           [dim]{example}[/dim]\n", markup=True, highlight=False)

    console.print("[bold]Global Options:[/bold]")
    console.print(f"  [yellow]--vault[/yellow]   Vault directory (or set ${VAULT_ENV_VAR})")
    console.print("  [yellow]--verbose[/yellow] Show debug logging")
    console.print("  [yellow]--json[/yellow]    Output as JSON (for scripting)")
    console.print("  [yellow]--raw[/yellow]     Plain text output (no colors)\n")

    console.print("[dim]Task ids look like 'Notes/Todo.md-4' (file path and line number)[/dim]")
    console.print("[dim]and change when lines are inserted or removed above the task.[/dim]\n")

